"""Vendor delivery tracking and agent assignment endpoints."""

from typing import Annotated, Optional

from fastapi import APIRouter, Query

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.core.logging import get_logger
from kirana.schemas.deliveries import (
    AssignAgentRequest,
    DeliveryListResponse,
    DeliveryResponse,
    DeliveryStatusUpdateRequest,
)
from kirana.services.deliveries.service import DeliveryService

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/vendor/deliveries", tags=["vendor deliveries"])


@router.get("", response_model=DeliveryListResponse, summary="List the vendor's deliveries")
async def list_deliveries(
    context: VendorContext,
    db: DatabaseSession,
    status: Optional[str] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> DeliveryListResponse:
    try:
        result = await DeliveryService(db).list_deliveries(
            vendor_id=context.account_id, status=status, skip=skip, limit=limit
        )
        return DeliveryListResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/{delivery_id}", response_model=DeliveryResponse, summary="Get a delivery")
async def get_delivery(
    delivery_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryResponse:
    try:
        delivery = await DeliveryService(db).get_delivery(delivery_id, context.account_id)
        return DeliveryResponse(**delivery)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put(
    "/{delivery_id}/assign",
    response_model=DeliveryResponse,
    summary="Assign or unassign a delivery agent",
)
async def assign_agent(
    delivery_id: str,
    payload: AssignAgentRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryResponse:
    """
    Bind an agent to the delivery (status Assigned), or release it with
    ``agentId: null`` (status Pending Assignment).

    Raises:
        HTTPException: 400 for malformed ids, an inactive agent or a
            disallowed transition; 403 if the delivery or agent belongs to
            another vendor; 404 if either is missing; 409 on a concurrent change
    """
    logger.info(
        "Delivery assignment requested",
        delivery_id=delivery_id,
        agent_id=payload.agent_id,
        vendor_id=str(context.account_id),
    )
    try:
        delivery = await DeliveryService(db).assign_agent(
            delivery_id=delivery_id,
            agent_id=payload.agent_id,
            vendor_id=context.account_id,
        )
        return DeliveryResponse(**delivery)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put(
    "/{delivery_id}/status",
    response_model=DeliveryResponse,
    summary="Update a delivery's status",
)
async def update_delivery_status(
    delivery_id: str,
    payload: DeliveryStatusUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryResponse:
    logger.info(
        "Delivery status update requested",
        delivery_id=delivery_id,
        new_status=payload.new_status,
        vendor_id=str(context.account_id),
    )
    try:
        delivery = await DeliveryService(db).update_delivery_status(
            delivery_id=delivery_id,
            new_status=payload.new_status,
            vendor_id=context.account_id,
        )
        return DeliveryResponse(**delivery)
    except KiranaError as e:
        raise to_http_exception(e)
