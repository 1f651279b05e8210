"""
Tests to verify no deprecation warnings are raised with Pydantic V2.
"""
import pytest
import warnings

from firestore_catalog.pydantic_compat import PydanticVersion


pytestmark = pytest.mark.skipif(
    PydanticVersion < 2,
    reason="Deprecation warning tests only apply to Pydantic V2"
)


def _pydantic_warnings(caught):
    return [
        w for w in caught
        if "pydantic" in str(w.filename).lower()
        or "pydantic" in str(w.message).lower()
        or "Config" in str(w.message)
        or ".dict()" in str(w.message)
    ]


class TestNoDeprecationWarnings:
    """Tests that verify no deprecation warnings are raised."""

    def test_model_definition_no_config_warnings(self):
        with warnings.catch_warnings(record=True) as caught_warnings:
            warnings.simplefilter("always", DeprecationWarning)

            from firestore_catalog import BaseFirestoreModel

            class Warehouse(BaseFirestoreModel):
                class Settings:
                    name = "warehouses"

                name: str

        assert _pydantic_warnings(caught_warnings) == []

    def test_product_serialization_no_warnings(self):
        from firestore_catalog import Product

        product = Product(
            name="Desk",
            user="admin-1",
            image="/images/desk.jpg",
            brand="Ikea",
            category="Furniture",
            description="Oak",
            reviews=[{"user": "u1", "name": "Ann", "rating": 5}],
        )

        with warnings.catch_warnings(record=True) as caught_warnings:
            warnings.simplefilter("always", DeprecationWarning)
            document = product.to_document()

        assert _pydantic_warnings(caught_warnings) == []
        assert document["countInStock"] == 0
        assert document["reviews"] == [{"user": "u1", "name": "Ann", "rating": 5, "comment": ""}]
        assert "id" not in document

    def test_model_dump_compat_returns_dict(self):
        from typing import Optional
        from firestore_catalog import BaseFirestoreModel
        from firestore_catalog.pydantic_compat import model_dump_compat

        class Shelf(BaseFirestoreModel):
            class Settings:
                name = "shelves"

            label: str
            optional_field: Optional[str] = None

        instance = Shelf(label="A1")

        result = model_dump_compat(instance, exclude={"id"}, exclude_none=True)
        assert result == {"label": "A1"}

        result_with_none = model_dump_compat(instance, exclude={"id"}, exclude_none=False)
        assert result_with_none["optional_field"] is None

    def test_model_config_keys(self):
        from firestore_catalog.pydantic_compat import (
            ConfigDict,
            PYDANTIC_V2_11_PLUS,
            get_model_config,
        )

        assert ConfigDict is not None
        config = get_model_config()
        if PYDANTIC_V2_11_PLUS:
            assert config["validate_by_name"] is True
            assert config["validate_by_alias"] is True
        else:
            assert config["populate_by_name"] is True
