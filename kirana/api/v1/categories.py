"""Vendor product category endpoints."""

from fastapi import APIRouter, status

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.catalog import ProductCreateRequest, ProductResponse
from kirana.schemas.categories import (
    CategoryCreateRequest,
    CategoryDeleteResponse,
    CategoryResponse,
    CategoryUpdateRequest,
)
from kirana.services.categories.service import CategoryService

router = APIRouter(prefix="/vendor/inventory/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse], summary="List categories")
async def list_categories(
    context: VendorContext, db: DatabaseSession
) -> list[CategoryResponse]:
    try:
        categories = await CategoryService(db).list_categories(context.account_id)
        return [CategoryResponse(**category) for category in categories]
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    payload: CategoryCreateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> CategoryResponse:
    """
    Raises:
        HTTPException: 400 without a name, 409 for a duplicate name
    """
    try:
        category = await CategoryService(db).create_category(
            context.account_id, payload.model_dump()
        )
        return CategoryResponse(**category)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("/{category_id}", response_model=CategoryResponse, summary="Update a category")
async def update_category(
    category_id: str,
    payload: CategoryUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> CategoryResponse:
    try:
        category = await CategoryService(db).update_category(
            category_id, context.account_id, payload.model_dump(exclude_unset=True)
        )
        return CategoryResponse(**category)
    except KiranaError as e:
        raise to_http_exception(e)


@router.delete(
    "/{category_id}", response_model=CategoryDeleteResponse, summary="Delete a category"
)
async def delete_category(
    category_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> CategoryDeleteResponse:
    try:
        result = await CategoryService(db).delete_category(category_id, context.account_id)
        return CategoryDeleteResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get(
    "/{category_id}/products",
    response_model=list[ProductResponse],
    summary="List products in a category",
)
async def list_category_products(
    category_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> list[ProductResponse]:
    try:
        products = await CategoryService(db).list_category_products(
            category_id, context.account_id
        )
        return [ProductResponse(**product) for product in products]
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "/{category_id}/products",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a product to a category",
)
async def add_category_product(
    category_id: str,
    payload: ProductCreateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> ProductResponse:
    try:
        product = await CategoryService(db).add_product(
            category_id, context.account_id, payload.model_dump()
        )
        return ProductResponse(**product)
    except KiranaError as e:
        raise to_http_exception(e)
