import logging
from typing import Any, List, Optional

from .errors import DuplicateReview, NotFound, ValidationError
from .keyed_lock import DEFAULT_LOCKS, KeyedLock
from .models import Identity, Product, Review
from .pydantic_compat import PydanticValidationError

logger = logging.getLogger(__name__)


def mean_rating(reviews: List[Review]) -> float:
    """Unweighted mean of the review ratings, 0 without reviews."""
    if not reviews:
        return 0.0
    return sum(review.rating for review in reviews) / len(reviews)


def has_reviewed(product: Product, user_id: str) -> bool:
    return any(str(review.user) == str(user_id) for review in product.reviews)


class ReviewAggregator:
    """
    Appends reviews to products and keeps ``num_reviews`` and ``rating``
    derived from the full review list.

    The read, append and save of one product happen while holding that
    product's lock, so concurrent submissions are all kept.  The write never
    recreates a product deleted in the meantime.
    """

    def __init__(self, locks: Optional[KeyedLock] = None):
        self.locks = locks if locks is not None else DEFAULT_LOCKS

    async def add_review(
        self,
        product_id: str,
        reviewer: Identity,
        rating: Any,
        comment: str = "",
    ) -> Product:
        try:
            review = Review(
                user=reviewer.id,
                name=reviewer.name,
                rating=rating,
                comment=comment,
            )
        except PydanticValidationError as exc:
            raise ValidationError("Invalid review", exc.errors()) from exc

        async with self.locks.hold(product_id):
            product = await Product.get(product_id)
            if product is None:
                raise NotFound("Product", product_id)

            if has_reviewed(product, reviewer.id):
                logger.warning(f"User {reviewer.id} already reviewed product {product_id}")
                raise DuplicateReview(product_id, reviewer.id)

            product.reviews.append(review)
            product.num_reviews = len(product.reviews)
            product.rating = mean_rating(product.reviews)
            await product.replace()

        logger.info(
            f"Review by {reviewer.id} added to product {product_id} "
            f"(reviews={product.num_reviews}, rating={product.rating:.2f})"
        )
        return product
