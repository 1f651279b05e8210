"""
Catalog documents.

A :class:`Product` is stored in the ``products`` collection with its reviews
embedded.  Stored keys are the camelCase aliases (``countInStock``,
``numReviews``, ``createdAt``); Python code uses the snake_case names.
"""

from datetime import datetime
from typing import List, Optional

from .firestore_model import BaseFirestoreModel
from .pydantic_compat import AliasedModel, Field


class Identity(AliasedModel):
    """The authenticated caller, as supplied by the identity provider."""

    id: str
    name: str


class Review(AliasedModel):
    """
    A review embedded in exactly one product.

    ``name`` is a snapshot of the reviewer's display name taken at submission
    time and does not follow later profile changes.
    """

    user: str
    name: str
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class Product(BaseFirestoreModel):
    class Settings:
        name = "products"

    name: str
    price: float = Field(0, ge=0)
    user: str
    image: str
    brand: str
    category: str
    description: str
    count_in_stock: int = Field(0, ge=0, alias="countInStock")
    num_reviews: int = Field(0, ge=0, alias="numReviews")
    rating: float = Field(0, ge=0, le=5)
    reviews: List[Review] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def _stamp(self, now: datetime) -> None:
        super()._stamp(now)
        for review in self.reviews:
            if review.created_at is None:
                review.created_at = now


class ProductDraft(AliasedModel):
    """
    Placeholder listing handed out by ``create``; the owner fills it in with
    a subsequent update.
    """

    name: str = "Sample name"
    price: float = 0
    image: str = "/images/sample.jpg"
    brand: str = "Sample brand"
    category: str = "Sample category"
    count_in_stock: int = Field(0, alias="countInStock")
    description: str = "Sample Description"

    def materialize(self, owner_id: str) -> Product:
        return Product(
            name=self.name,
            price=self.price,
            user=owner_id,
            image=self.image,
            brand=self.brand,
            category=self.category,
            count_in_stock=self.count_in_stock,
            description=self.description,
        )


class ProductUpdate(AliasedModel):
    """Editable product fields.  All are required and overwrite the stored ones."""

    name: str
    price: float = Field(..., ge=0)
    description: str
    image: str
    brand: str
    category: str
    count_in_stock: int = Field(..., ge=0, alias="countInStock")

    def apply_to(self, product: Product) -> Product:
        product.name = self.name
        product.price = self.price
        product.description = self.description
        product.image = self.image
        product.brand = self.brand
        product.category = self.category
        product.count_in_stock = self.count_in_stock
        return product


class ProductPage(AliasedModel):
    items: List[Product]
    page: int
    total_pages: int = Field(..., alias="totalPages")


CATALOG_MODELS = [Product]
