"""Vendor inventory endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query, status

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.schemas.catalog import (
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductUpdateRequest,
)
from kirana.services.catalog.service import InventoryService

settings = get_settings()

router = APIRouter(prefix="/vendor/inventory", tags=["inventory"])


@router.get("", response_model=ProductListResponse, summary="List the vendor's products")
async def list_inventory(
    context: VendorContext,
    db: DatabaseSession,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> ProductListResponse:
    try:
        result = await InventoryService(db).list_inventory(
            context.account_id, skip=skip, limit=limit
        )
        return ProductListResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product",
)
async def create_product(
    payload: ProductCreateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> ProductResponse:
    try:
        product = await InventoryService(db).create_product(
            context.account_id, payload.model_dump()
        )
        return ProductResponse(**product)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("/{product_id}", response_model=ProductResponse, summary="Update a product")
async def update_product(
    product_id: str,
    payload: ProductUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> ProductResponse:
    try:
        product = await InventoryService(db).update_product(
            product_id, context.account_id, payload.model_dump(exclude_unset=True)
        )
        return ProductResponse(**product)
    except KiranaError as e:
        raise to_http_exception(e)


@router.delete("/{product_id}", summary="Delete a product")
async def delete_product(
    product_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> dict:
    try:
        return await InventoryService(db).delete_product(product_id, context.account_id)
    except KiranaError as e:
        raise to_http_exception(e)
