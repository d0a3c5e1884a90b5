"""Vendor delivery agent management endpoints."""

from fastapi import APIRouter, status

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.delivery_agents import (
    DeliveryAgentCreateRequest,
    DeliveryAgentDeleteResponse,
    DeliveryAgentResponse,
    DeliveryAgentUpdateRequest,
)
from kirana.services.delivery_agents.service import DeliveryAgentService

router = APIRouter(prefix="/vendor/delivery-agents", tags=["delivery agents"])


@router.get("", response_model=list[DeliveryAgentResponse], summary="List delivery agents")
async def list_agents(
    context: VendorContext, db: DatabaseSession
) -> list[DeliveryAgentResponse]:
    try:
        agents = await DeliveryAgentService(db).list_agents(context.account_id)
        return [DeliveryAgentResponse(**agent) for agent in agents]
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "",
    response_model=DeliveryAgentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a delivery agent",
)
async def create_agent(
    payload: DeliveryAgentCreateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryAgentResponse:
    """
    Raises:
        HTTPException: 400 listing missing fields, 409 for a duplicate phone
    """
    try:
        agent = await DeliveryAgentService(db).create_agent(
            context.account_id, payload.model_dump()
        )
        return DeliveryAgentResponse(**agent)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/{agent_id}", response_model=DeliveryAgentResponse, summary="Get a delivery agent")
async def get_agent(
    agent_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryAgentResponse:
    try:
        agent = await DeliveryAgentService(db).get_agent(agent_id, context.account_id)
        return DeliveryAgentResponse(**agent)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("/{agent_id}", response_model=DeliveryAgentResponse, summary="Update a delivery agent")
async def update_agent(
    agent_id: str,
    payload: DeliveryAgentUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryAgentResponse:
    try:
        agent = await DeliveryAgentService(db).update_agent(
            agent_id, context.account_id, payload.model_dump(exclude_unset=True)
        )
        return DeliveryAgentResponse(**agent)
    except KiranaError as e:
        raise to_http_exception(e)


@router.delete(
    "/{agent_id}",
    response_model=DeliveryAgentDeleteResponse,
    summary="Delete a delivery agent",
)
async def delete_agent(
    agent_id: str,
    context: VendorContext,
    db: DatabaseSession,
) -> DeliveryAgentDeleteResponse:
    """
    Delete an agent. Its open deliveries go back to Pending Assignment.

    Raises:
        HTTPException: 409 while the agent has a delivery out for delivery
    """
    try:
        result = await DeliveryAgentService(db).delete_agent(agent_id, context.account_id)
        return DeliveryAgentDeleteResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)
