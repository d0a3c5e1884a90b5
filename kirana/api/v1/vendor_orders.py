"""
Vendor order management endpoints.

``PUT /vendor/orders?mongoId=<id>`` keeps the query-parameter contract the
vendor dashboard already uses.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.core.logging import get_logger
from kirana.schemas.orders import (
    OrderDetailResponse,
    OrderStatusUpdateRequest,
    VendorOrderListResponse,
    VendorOrderRow,
)
from kirana.services.orders.service import OrderService

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/vendor/orders", tags=["vendor orders"])


@router.get("", response_model=VendorOrderListResponse, summary="List the vendor's orders")
async def list_orders(
    context: VendorContext,
    db: DatabaseSession,
    status: Optional[str] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> VendorOrderListResponse:
    try:
        result = await OrderService(db).list_vendor_orders(
            vendor_id=context.account_id, status=status, skip=skip, limit=limit
        )
        return VendorOrderListResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("", response_model=VendorOrderRow, summary="Update an order's status")
async def update_order_status(
    payload: OrderStatusUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
    order_id: Annotated[str, Query(alias="mongoId")],
) -> VendorOrderRow:
    """
    Move an order along Pending -> Preparing -> Out for Delivery -> Delivered,
    or cancel it while it is not yet final.

    Raises:
        HTTPException: 400 for a malformed id, unknown status or disallowed
            transition; 403 for another vendor's order; 404 if missing;
            409 if the order changed concurrently
    """
    logger.info(
        "Order status update requested",
        order_id=order_id,
        vendor_id=str(context.account_id),
        new_status=payload.new_status,
    )
    try:
        row = await OrderService(db).update_order_status(
            order_id=order_id,
            new_status=payload.new_status,
            vendor_id=context.account_id,
        )
        return VendorOrderRow(**row)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/{order_id}", response_model=OrderDetailResponse, summary="Get one order")
async def get_order(
    order_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> OrderDetailResponse:
    try:
        order = await OrderService(db).get_vendor_order(order_id, context.account_id)
        return OrderDetailResponse(**order)
    except KiranaError as e:
        raise to_http_exception(e)
