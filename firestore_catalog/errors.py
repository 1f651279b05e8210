"""
Error taxonomy of the catalog.

Every error raised by the services derives from :class:`CatalogError` so that
callers (the HTTP layer included) can translate them in one place.  Errors are
propagated unmodified: nothing here is retried or swallowed.
"""


class CatalogError(Exception):
    """Base class for catalog errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(CatalogError):
    """The referenced product does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class DuplicateReview(CatalogError):
    """The reviewer already reviewed this product."""

    def __init__(self, product_id: str, user_id: str):
        super().__init__("Product already reviewed")
        self.product_id = product_id
        self.user_id = user_id


class ValidationError(CatalogError):
    """Malformed review or update input."""

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = errors or []


class StoreError(CatalogError):
    """The document store failed; the original exception is chained."""
