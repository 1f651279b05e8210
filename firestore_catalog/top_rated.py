from typing import List

from .enums import OrderByDirection
from .models import Product

TOP_RATED_LIMIT = 3


async def top_rated(limit: int = TOP_RATED_LIMIT) -> List[Product]:
    """
    Up to ``limit`` products by descending rating.

    Equal ratings come back in descending document ID order, the implicit
    tie-break Firestore applies after the last explicit ordering.
    """
    if limit <= 0:
        return []
    return [
        product
        async for product in Product.find(
            order_by=[(Product.rating, OrderByDirection.DESCENDING)],
            limit=limit,
        )
    ]
