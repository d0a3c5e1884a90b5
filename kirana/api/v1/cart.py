"""Customer cart endpoints."""

from fastapi import APIRouter

from kirana.api.deps import CustomerContext, DatabaseSession
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.cart import AddToCartRequest, CartResponse, UpdateCartItemRequest
from kirana.services.cart.service import CartService

router = APIRouter(prefix="/customer/cart", tags=["cart"])


@router.get("", response_model=CartResponse, summary="Get the cart")
async def get_cart(context: CustomerContext, db: DatabaseSession) -> CartResponse:
    try:
        cart = await CartService(db).get_cart(context.account_id)
        return CartResponse(**cart)
    except KiranaError as e:
        raise to_http_exception(e)


@router.post("/items", response_model=CartResponse, summary="Add a product to the cart")
async def add_item(
    payload: AddToCartRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> CartResponse:
    try:
        cart = await CartService(db).add_item(
            context.account_id, payload.product_id, payload.quantity
        )
        return CartResponse(**cart)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put(
    "/items/{product_id}",
    response_model=CartResponse,
    summary="Set a line quantity (zero removes it)",
)
async def set_quantity(
    product_id: str,
    payload: UpdateCartItemRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> CartResponse:
    try:
        cart = await CartService(db).set_quantity(
            context.account_id, product_id, payload.quantity
        )
        return CartResponse(**cart)
    except KiranaError as e:
        raise to_http_exception(e)


@router.delete("/items/{product_id}", response_model=CartResponse, summary="Remove a line")
async def remove_item(
    product_id: str,
    context: CustomerContext,
    db: DatabaseSession,
) -> CartResponse:
    try:
        cart = await CartService(db).remove_item(context.account_id, product_id)
        return CartResponse(**cart)
    except KiranaError as e:
        raise to_http_exception(e)


@router.delete("", response_model=CartResponse, summary="Clear the cart")
async def clear_cart(context: CustomerContext, db: DatabaseSession) -> CartResponse:
    try:
        cart = await CartService(db).clear_cart(context.account_id)
        return CartResponse(**cart)
    except KiranaError as e:
        raise to_http_exception(e)
