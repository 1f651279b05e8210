import logging
import math
from typing import Any, List, Optional

from .errors import NotFound, ValidationError
from .firestore_model import FilterType
from .keyed_lock import DEFAULT_LOCKS, KeyedLock
from .models import Product, ProductDraft, ProductPage, ProductUpdate
from .pydantic_compat import PydanticValidationError

logger = logging.getLogger(__name__)

PAGE_SIZE = 10


def normalize_page(page: Any) -> int:
    """
    Effective page number for a caller-supplied value.

    Integers and integer strings are accepted; anything else, and any
    value below 1, means the first page.
    """
    if isinstance(page, bool):
        return 1
    if isinstance(page, str):
        try:
            page = int(page.strip())
        except ValueError:
            return 1
    if not isinstance(page, int) or page < 1:
        return 1
    return page


def keyword_filters(keyword: Optional[str]) -> List[FilterType]:
    """Case-insensitive substring match on the product name; blank matches all."""
    if keyword is None or not keyword.strip():
        return []
    return [Product.name.icontains(keyword.strip())]


class ProductCatalog:
    """
    Listing, retrieval and maintenance of catalog products.

    Updates, deletions and review submissions on one product are serialized
    through ``locks``; services left on the default registry share it.
    """

    def __init__(self, locks: Optional[KeyedLock] = None, page_size: int = PAGE_SIZE):
        self.locks = locks if locks is not None else DEFAULT_LOCKS
        self.page_size = page_size

    async def list_products(self, keyword: Optional[str] = None, page: Any = None) -> ProductPage:
        page = normalize_page(page)
        filters = keyword_filters(keyword)

        count = await Product.count(filters)
        items = [
            product
            async for product in Product.find(
                filters=filters,
                limit=self.page_size,
                offset=self.page_size * (page - 1),
            )
        ]
        logger.debug(f"List products: keyword={keyword!r} page={page} matches={count}")
        return ProductPage(
            items=items,
            page=page,
            total_pages=math.ceil(count / self.page_size),
        )

    async def get_product(self, product_id: str) -> Product:
        product = await Product.get(product_id)
        if product is None:
            raise NotFound("Product", product_id)
        return product

    async def delete_product(self, product_id: str) -> None:
        async with self.locks.hold(product_id):
            await Product.delete_by_id(product_id)
        logger.info(f"Product {product_id} deleted")

    async def create_product(self, owner_id: str, draft: Optional[ProductDraft] = None) -> Product:
        product = (draft or ProductDraft()).materialize(owner_id)
        await product.save()
        logger.info(f"Product {product.id} created for owner {owner_id}")
        return product

    async def update_product(self, product_id: str, changes: Any) -> Product:
        """
        Overwrite the editable fields of a product and persist it.

        ``changes`` is a :class:`ProductUpdate` or a mapping convertible to one.
        """
        if not isinstance(changes, ProductUpdate):
            try:
                changes = ProductUpdate(**changes)
            except PydanticValidationError as exc:
                raise ValidationError("Invalid product fields", exc.errors()) from exc

        async with self.locks.hold(product_id):
            product = await self.get_product(product_id)
            changes.apply_to(product)
            await product.replace()
        logger.info(f"Product {product_id} updated")
        return product
