import pydantic
from packaging.version import parse
from pydantic.version import VERSION

version_parsed = parse(str(VERSION))

if version_parsed.major >= 2:
    PydanticVersion = 2
    from pydantic import ConfigDict
    from pydantic import ValidationError as PydanticValidationError
else:
    PydanticVersion = 1
    ConfigDict = None
    from pydantic import ValidationError as PydanticValidationError

# validate_by_name / validate_by_alias replaced populate_by_name in 2.11
PYDANTIC_V2_11_PLUS = (version_parsed.major, version_parsed.minor) >= (2, 11)


BaseModel: type = pydantic.BaseModel
Field: type = pydantic.Field


# Pydantic V1: __fields__; Pydantic V2: model_fields
def get_model_fields(cls: type) -> dict:
    if PydanticVersion == 1:
        return getattr(cls, "__fields__", {})
    return getattr(cls, "model_fields", {})  # type: ignore[attr-defined]


def get_model_config() -> dict:
    """Config letting models be built from field names or stored aliases."""
    if PydanticVersion == 1:
        return {"allow_population_by_field_name": True}
    if PYDANTIC_V2_11_PLUS:
        return ConfigDict(validate_by_name=True, validate_by_alias=True)
    return ConfigDict(populate_by_name=True)


def model_dump_compat(instance, **kwargs) -> dict:
    if PydanticVersion == 1:
        return instance.dict(**kwargs)
    return instance.model_dump(**kwargs)


class AliasedModel(BaseModel):
    """Plain model (not a collection) sharing the aliasing rules of the ODM."""

    if PydanticVersion >= 2:
        model_config = get_model_config()
    else:
        class Config:
            allow_population_by_field_name = True


__all__ = [
    "AliasedModel",
    "BaseModel",
    "ConfigDict",
    "Field",
    "PydanticValidationError",
    "get_model_config",
    "get_model_fields",
    "model_dump_compat",
    "PydanticVersion",
    "PYDANTIC_V2_11_PLUS",
]
