# firestore_catalog/__init__.py
from typing import List, Optional, Type
from .firestore_model import BaseFirestoreModel
from .firestore_fields import FirestoreField
from .firestore_client import FirestoreDB
from .enums import FirestoreOperators, OrderByDirection
from .errors import CatalogError, DuplicateReview, NotFound, StoreError, ValidationError
from .keyed_lock import DEFAULT_LOCKS, KeyedLock
from .models import CATALOG_MODELS, Identity, Product, ProductDraft, ProductPage, ProductUpdate, Review
from .catalog import PAGE_SIZE, ProductCatalog
from .reviews import ReviewAggregator, mean_rating
from .top_rated import TOP_RATED_LIMIT, top_rated


def init_catalog(database: FirestoreDB, document_models: Optional[List[Type[BaseFirestoreModel]]] = None):
    """Bind the models to ``database`` and expose their query fields."""
    for model in document_models or CATALOG_MODELS:
        model.initialize_db(database)
        model.initialize_fields()

__all__ = [
    "BaseFirestoreModel",
    "CatalogError",
    "DEFAULT_LOCKS",
    "DuplicateReview",
    "FirestoreDB",
    "FirestoreField",
    "FirestoreOperators",
    "Identity",
    "KeyedLock",
    "NotFound",
    "OrderByDirection",
    "PAGE_SIZE",
    "Product",
    "ProductCatalog",
    "ProductDraft",
    "ProductPage",
    "ProductUpdate",
    "Review",
    "ReviewAggregator",
    "StoreError",
    "TOP_RATED_LIMIT",
    "ValidationError",
    "init_catalog",
    "mean_rating",
    "top_rated",
]
