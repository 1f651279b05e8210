from functools import wraps
import asyncio
import logging

from firestore_catalog import (
    DuplicateReview,
    FirestoreDB,
    Identity,
    KeyedLock,
    ProductCatalog,
    ReviewAggregator,
    init_catalog,
    top_rated,
)


def async_decorator(f):
    """Decorator to allow calling an async function like a sync function"""
    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))
    return wrapper


@async_decorator
async def main():
    logging.basicConfig(level=logging.INFO)

    # 1. Connect (GOOGLE_CLOUD_PROJECT / FIRESTORE_EMULATOR_HOST)
    db = FirestoreDB.from_env()
    init_catalog(db)

    locks = KeyedLock()
    catalog = ProductCatalog(locks=locks)
    reviews = ReviewAggregator(locks=locks)

    # 2. Scaffold a listing, then fill it in
    product = await catalog.create_product("admin-1")
    product = await catalog.update_product(product.id, {
        "name": "Airpods Wireless Bluetooth Headphones",
        "price": 89.99,
        "description": "Bluetooth technology lets you connect it with compatible devices",
        "image": "/images/airpods.jpg",
        "brand": "Apple",
        "category": "Electronics",
        "countInStock": 10,
    })

    # 3. Reviews
    await reviews.add_review(product.id, Identity(id="u1", name="Ann"), 5, "Great sound")
    await reviews.add_review(product.id, Identity(id="u2", name="Bob"), 4, "Good value")
    try:
        await reviews.add_review(product.id, Identity(id="u1", name="Ann"), 1)
    except DuplicateReview as exc:
        print(exc.message)

    # 4. Listing and top rated
    page = await catalog.list_products(keyword="airpods")
    print(f"page {page.page}/{page.total_pages}: {[p.name for p in page.items]}")
    for p in await top_rated():
        print(p.name, p.rating, p.num_reviews)


main()
