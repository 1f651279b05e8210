"""
FastAPI routes for the product catalog.

The router only translates HTTP requests into calls on :class:`ProductCatalog`,
:class:`ReviewAggregator` and :func:`top_rated`; catalog errors are mapped to
status codes by :func:`register_exception_handlers`.  Authentication is not
done here: :func:`get_identity` trusts the ``X-User-Id`` / ``X-User-Name``
headers set by the upstream identity provider and can be overridden through
``app.dependency_overrides``.
"""

import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from . import init_catalog
from .catalog import ProductCatalog
from .errors import DuplicateReview, NotFound, StoreError, ValidationError
from .firestore_client import FirestoreDB
from .keyed_lock import KeyedLock
from .models import Identity, Product, ProductPage, ProductUpdate
from .pydantic_compat import BaseModel, Field
from .reviews import ReviewAggregator
from .top_rated import top_rated

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])


class ReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = ""


class MessageResponse(BaseModel):
    message: str


# -------- Dependencies --------

def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog


def get_reviews(request: Request) -> ReviewAggregator:
    return request.app.state.reviews


def get_identity(
    x_user_id: Optional[str] = Header(None),
    x_user_name: Optional[str] = Header(None),
) -> Identity:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Not authorized")
    return Identity(id=x_user_id, name=x_user_name or "")


# -------- Routes --------

@router.get("", response_model=ProductPage)
async def list_products(
    keyword: Optional[str] = None,
    pageNumber: Optional[str] = None,
    catalog: ProductCatalog = Depends(get_catalog),
):
    """Paginated listing, optionally filtered by a name keyword."""
    return await catalog.list_products(keyword=keyword, page=pageNumber)


@router.get("/top", response_model=List[Product])
async def get_top_products():
    return await top_rated()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
    return await catalog.get_product(product_id)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: str,
    catalog: ProductCatalog = Depends(get_catalog),
    identity: Identity = Depends(get_identity),
):
    await catalog.delete_product(product_id)
    return Response(status_code=204)


@router.post("", status_code=201, response_model=Product)
async def create_product(
    catalog: ProductCatalog = Depends(get_catalog),
    identity: Identity = Depends(get_identity),
):
    return await catalog.create_product(identity.id)


@router.put("/{product_id}", status_code=201, response_model=Product)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    catalog: ProductCatalog = Depends(get_catalog),
    identity: Identity = Depends(get_identity),
):
    return await catalog.update_product(product_id, body)


@router.post("/{product_id}/reviews", status_code=201, response_model=MessageResponse)
async def create_review(
    product_id: str,
    body: ReviewRequest,
    reviews: ReviewAggregator = Depends(get_reviews),
    identity: Identity = Depends(get_identity),
):
    await reviews.add_review(product_id, identity, body.rating, body.comment)
    return MessageResponse(message="Review added")


# -------- Error mapping --------

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return JSONResponse(status_code=404, content={"message": exc.message})

    @app.exception_handler(DuplicateReview)
    async def duplicate_review_handler(request: Request, exc: DuplicateReview):
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": "Invalid request"})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Store failure on {request.method} {request.url.path}", exc_info=exc)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(database: Optional[FirestoreDB] = None) -> FastAPI:
    """Application serving the catalog routes against ``database``."""
    init_catalog(database or FirestoreDB.from_env())

    app = FastAPI(title="Firestore Catalog API")
    locks = KeyedLock()
    app.state.catalog = ProductCatalog(locks=locks)
    app.state.reviews = ReviewAggregator(locks=locks)
    app.include_router(router)
    register_exception_handlers(app)
    return app


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(create_app(), host="0.0.0.0", port=port)
