import pytest

from firestore_catalog import (
    NotFound,
    Product,
    ProductCatalog,
    ProductDraft,
    ProductUpdate,
    ValidationError,
)
from firestore_catalog.catalog import keyword_filters, normalize_page

from .conftest import make_product, seed_products


@pytest.fixture
def catalog(catalog_db):
    return ProductCatalog()


# -----------------------------------------------------------------------------
# Page and keyword normalization
# -----------------------------------------------------------------------------
@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 1),
        (3, 3),
        ("2", 2),
        (" 4 ", 4),
        (0, 1),
        (-2, 1),
        ("-5", 1),
        ("abc", 1),
        ("2.5", 1),
        (2.0, 1),
        (True, 1),
    ],
)
def test_normalize_page(raw, expected):
    assert normalize_page(raw) == expected


def test_blank_keyword_matches_everything(catalog_db):
    assert keyword_filters(None) == []
    assert keyword_filters("   ") == []
    assert keyword_filters(" phone ") == [Product.name.icontains("phone")]


# -----------------------------------------------------------------------------
# list_products
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_list_first_page(catalog):
    await seed_products(23)

    page = await catalog.list_products()

    assert page.page == 1
    assert page.total_pages == 3
    assert [p.name for p in page.items] == [f"Product {i:02d}" for i in range(10)]


@pytest.mark.asyncio
async def test_list_last_partial_page(catalog):
    await seed_products(23)

    page = await catalog.list_products(page="3")

    assert page.page == 3
    assert [p.name for p in page.items] == ["Product 20", "Product 21", "Product 22"]


@pytest.mark.asyncio
async def test_list_beyond_last_page_is_empty(catalog):
    await seed_products(23)

    first = await catalog.list_products(keyword="", page=1)
    beyond = await catalog.list_products(keyword="", page=7)

    assert beyond.items == []
    assert beyond.page == 7
    assert beyond.total_pages == first.total_pages == 3


@pytest.mark.asyncio
async def test_list_invalid_page_is_clamped_to_first(catalog):
    await seed_products(12)

    page = await catalog.list_products(page=-1)

    assert page.page == 1
    assert len(page.items) == 10


@pytest.mark.asyncio
async def test_list_keyword_is_case_insensitive_substring(catalog):
    for name in ["iPhone 11 Pro", "Sony Playstation 4", "Cannon EOS 80D", "PHONE charger"]:
        await make_product(name=name).save()

    page = await catalog.list_products(keyword="phone")

    assert [p.name for p in page.items] == ["iPhone 11 Pro", "PHONE charger"]
    assert page.total_pages == 1


@pytest.mark.asyncio
async def test_list_keyword_is_not_a_pattern(catalog):
    await make_product(name="Cable (2m)").save()
    await make_product(name="Cable 2m").save()

    page = await catalog.list_products(keyword="(2m)")

    assert [p.name for p in page.items] == ["Cable (2m)"]


@pytest.mark.asyncio
async def test_list_keyword_paginates_matches(catalog):
    await seed_products(15, brand="Acme")
    for i in range(4):
        await make_product(name=f"Lamp {i}").save()

    page = await catalog.list_products(keyword="product", page=2)

    assert page.total_pages == 2
    assert [p.name for p in page.items] == [f"Product {i:02d}" for i in range(10, 15)]


@pytest.mark.asyncio
async def test_list_without_matches(catalog):
    page = await catalog.list_products(keyword="anything")

    assert page.items == []
    assert page.page == 1
    assert page.total_pages == 0


# -----------------------------------------------------------------------------
# get / delete
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_get_product(catalog):
    product = make_product(name="Logitech G-Series Gaming Mouse")
    await product.save()

    found = await catalog.get_product(product.id)

    assert found.id == product.id
    assert found.name == "Logitech G-Series Gaming Mouse"
    assert found.count_in_stock == 10


@pytest.mark.asyncio
async def test_get_missing_product_raises_not_found(catalog):
    with pytest.raises(NotFound) as excinfo:
        await catalog.get_product("missing")
    assert excinfo.value.resource_id == "missing"


@pytest.mark.asyncio
async def test_delete_is_idempotent(catalog):
    product = make_product()
    await product.save()

    await catalog.delete_product(product.id)
    await catalog.delete_product(product.id)
    await catalog.delete_product("never-existed")

    with pytest.raises(NotFound):
        await catalog.get_product(product.id)


# -----------------------------------------------------------------------------
# create / update
# -----------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_create_persists_placeholder_for_owner(catalog, fake_client):
    product = await catalog.create_product("admin-7")

    stored = fake_client.store("products")[product.id]
    assert stored["name"] == "Sample name"
    assert stored["price"] == 0
    assert stored["user"] == "admin-7"
    assert stored["image"] == "/images/sample.jpg"
    assert stored["brand"] == "Sample brand"
    assert stored["category"] == "Sample category"
    assert stored["countInStock"] == 0
    assert stored["numReviews"] == 0
    assert stored["description"] == "Sample Description"
    assert stored["reviews"] == []


@pytest.mark.asyncio
async def test_create_from_custom_draft(catalog):
    product = await catalog.create_product("admin-7", ProductDraft(name="Desk", price=120))

    assert product.name == "Desk"
    assert product.price == 120
    assert product.brand == "Sample brand"


@pytest.mark.asyncio
async def test_update_overwrites_editable_fields(catalog):
    product = await catalog.create_product("admin-7")
    changes = {
        "name": "Amazon Echo Dot 3rd Generation",
        "price": 29.99,
        "description": "Meet Echo Dot",
        "image": "/images/alexa.jpg",
        "brand": "Amazon",
        "category": "Electronics",
        "countInStock": 4,
    }

    updated = await catalog.update_product(product.id, changes)
    reloaded = await catalog.get_product(product.id)

    for result in (updated, reloaded):
        assert result.name == "Amazon Echo Dot 3rd Generation"
        assert result.price == 29.99
        assert result.count_in_stock == 4
        assert result.user == "admin-7"


@pytest.mark.asyncio
async def test_update_keeps_reviews_and_aggregates(catalog):
    product = make_product(num_reviews=1, rating=4.0, reviews=[{"user": "u1", "name": "Ann", "rating": 4}])
    await product.save()

    changes = ProductUpdate(
        name="Renamed",
        price=1,
        description="d",
        image="/images/x.jpg",
        brand="b",
        category="c",
        count_in_stock=0,
    )
    updated = await catalog.update_product(product.id, changes)

    assert updated.num_reviews == 1
    assert updated.rating == 4.0
    assert updated.reviews[0].user == "u1"


@pytest.mark.asyncio
async def test_update_missing_product_raises_not_found(catalog):
    changes = ProductUpdate(
        name="n", price=1, description="d", image="i", brand="b", category="c", count_in_stock=1
    )
    with pytest.raises(NotFound):
        await catalog.update_product("missing", changes)


@pytest.mark.asyncio
async def test_update_with_invalid_fields_raises_validation_error(catalog):
    product = await catalog.create_product("admin-7")

    with pytest.raises(ValidationError):
        await catalog.update_product(product.id, {"name": "n", "price": -1})
