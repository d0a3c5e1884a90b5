"""Delivery agent schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeliveryAgentCreateRequest(BaseModel):
    """
    New delivery agent.

    ``name`` and ``phone`` are optional here so the service can report every
    missing field in one message.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    vehicle_type: Optional[str] = Field(None, description="bike, car, scooter or other")
    vehicle_details: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class DeliveryAgentUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    vehicle_type: Optional[str] = None
    vehicle_details: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class DeliveryAgentResponse(BaseModel):
    id: str
    vendor_id: str
    name: str
    phone: str
    vehicle_type: str
    vehicle_details: Optional[str] = None
    is_active: bool
    created_at: Optional[str] = None


class DeliveryAgentDeleteResponse(BaseModel):
    id: str
    deleted: bool
    released_deliveries: int
