"""
Customer checkout and order history endpoints.

Checkout creates one order per vendor. When the request carries no items
the customer's cart is used and emptied.
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from kirana.api.deps import CustomerContext, DatabaseSession
from kirana.api.errors import to_http_exception
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.core.logging import get_logger
from kirana.schemas.orders import (
    CheckoutRequest,
    CheckoutResponse,
    OrderDetailResponse,
    OrderListResponse,
)
from kirana.services.checkout.service import CheckoutService

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/customer/orders", tags=["customer orders"])


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Place orders",
)
async def place_orders(
    payload: CheckoutRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> CheckoutResponse:
    """
    Check out the given items or the cart.

    Raises:
        HTTPException: 400 for an empty checkout, unavailable product or
            insufficient stock; 409 if stock changed concurrently
    """
    logger.info(
        "Checkout requested",
        customer_id=str(context.account_id),
        from_cart=payload.items is None,
    )
    items = (
        [item.model_dump() for item in payload.items]
        if payload.items is not None
        else None
    )
    try:
        result = await CheckoutService(db).place_orders(
            customer_id=context.account_id,
            delivery_address=payload.delivery_address.model_dump(),
            items=items,
        )
        return CheckoutResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("", response_model=OrderListResponse, summary="List my orders")
async def list_orders(
    context: CustomerContext,
    db: DatabaseSession,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> OrderListResponse:
    try:
        result = await CheckoutService(db).list_orders(
            context.account_id, skip=skip, limit=limit
        )
        return OrderListResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/{order_id}", response_model=OrderDetailResponse, summary="Get one of my orders")
async def get_order(
    order_id: str,
    context: CustomerContext,
    db: DatabaseSession,
) -> OrderDetailResponse:
    try:
        order = await CheckoutService(db).get_order(order_id, context.account_id)
        return OrderDetailResponse(**order)
    except KiranaError as e:
        raise to_http_exception(e)
