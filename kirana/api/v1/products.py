"""Public product catalog endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from kirana.api.deps import DatabaseSession
from kirana.api.errors import to_http_exception
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.schemas.catalog import ProductListResponse, ProductResponse
from kirana.services.catalog.service import CatalogService

settings = get_settings()

router = APIRouter(prefix="/products", tags=["catalog"])


@router.get("", response_model=ProductListResponse, summary="List available products")
async def list_products(
    db: DatabaseSession,
    category: Optional[str] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> ProductListResponse:
    try:
        result = await CatalogService(db).list_products(
            category=category, skip=skip, limit=limit
        )
        return ProductListResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/categories", response_model=list[str], summary="List product categories")
async def list_categories(db: DatabaseSession) -> list[str]:
    try:
        return await CatalogService(db).list_categories()
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/{product_id}", response_model=ProductResponse, summary="Get a product")
async def get_product(product_id: str, db: DatabaseSession) -> ProductResponse:
    try:
        product = await CatalogService(db).get_product(product_id)
        return ProductResponse(**product)
    except KiranaError as e:
        raise to_http_exception(e)
