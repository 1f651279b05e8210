import pytest

from firestore_catalog import FirestoreDB, Product, init_catalog

from .fake_firestore import FakeAsyncClient


def make_db(client) -> FirestoreDB:
    """FirestoreDB bound to ``client`` without creating a real AsyncClient."""
    db = FirestoreDB.__new__(FirestoreDB)
    db.project_id = "test-project"
    db.database = None
    db.credentials = None
    db._emulator_host = None
    db.client = client
    return db


@pytest.fixture
def fake_client():
    return FakeAsyncClient()


@pytest.fixture
def firestore_db(fake_client):
    return make_db(fake_client)


@pytest.fixture
def catalog_db(firestore_db):
    """Catalog models registered against the in-memory client."""
    init_catalog(firestore_db)
    return firestore_db


def make_product(**overrides) -> Product:
    fields = {
        "name": "Airpods Wireless Bluetooth Headphones",
        "price": 89.99,
        "user": "admin-1",
        "image": "/images/airpods.jpg",
        "brand": "Apple",
        "category": "Electronics",
        "description": "Bluetooth technology lets you connect it with compatible devices",
        "count_in_stock": 10,
    }
    fields.update(overrides)
    return Product(**fields)


async def seed_products(count: int, **overrides) -> list:
    products = []
    for i in range(count):
        product = make_product(name=f"Product {i:02d}", **overrides)
        await product.save()
        products.append(product)
    return products
