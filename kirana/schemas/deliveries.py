"""Delivery schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeliveryAgentSummary(BaseModel):
    id: str
    name: str
    phone: str
    vehicle_type: str


class DeliveryResponse(BaseModel):
    id: str
    order_id: str
    customer_id: str
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: dict
    order_value: float
    status: str
    delivery_agent_id: Optional[str] = None
    agent: Optional[DeliveryAgentSummary] = None
    scheduled_pickup_time: Optional[str] = None
    actual_pickup_time: Optional[str] = None
    scheduled_delivery_time: Optional[str] = None
    estimated_delivery_time: Optional[str] = None
    actual_delivery_time: Optional[str] = None
    delivery_notes: Optional[str] = None
    created_at: Optional[str] = None


class DeliveryListResponse(BaseModel):
    deliveries: list[DeliveryResponse]
    total: int
    skip: int
    limit: int


class AssignAgentRequest(BaseModel):
    """``agentId`` null unassigns the delivery."""

    model_config = ConfigDict(populate_by_name=True)

    agent_id: Optional[str] = Field(..., alias="agentId")


class DeliveryStatusUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_status: str = Field(..., alias="newStatus", min_length=1)
