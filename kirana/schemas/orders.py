"""
Order schemas for checkout, customer order history and vendor order
management.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DeliveryAddress(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)


class CheckoutItem(BaseModel):
    product_id: UUID
    quantity: int = Field(..., ge=1, le=100)


class CheckoutRequest(BaseModel):
    """Place orders from the given items, or from the cart when items is omitted."""

    delivery_address: DeliveryAddress
    items: Optional[list[CheckoutItem]] = Field(
        None,
        description="Explicit order lines; the customer's cart is used when omitted",
    )


class OrderItemResponse(BaseModel):
    product_id: Optional[str] = None
    name: str
    quantity: int
    price: float
    unit: str
    line_total: float


class OrderDetailResponse(BaseModel):
    id: str
    order_number: str
    customer_id: str
    customer_name: str
    vendor_id: str
    status: str
    order_date: Optional[str] = None
    delivery_address: dict
    total_amount: float
    items: list[OrderItemResponse]


class CheckoutResponse(BaseModel):
    orders: list[OrderDetailResponse]
    total: float


class OrderListResponse(BaseModel):
    orders: list[OrderDetailResponse]
    total: int
    skip: int
    limit: int


class VendorOrderRow(BaseModel):
    """One row of the vendor order table; ``items`` is the line count."""

    id: str
    order_number: str
    customer: str
    date: Optional[str] = None
    items: int
    total: float
    status: str


class VendorOrderListResponse(BaseModel):
    orders: list[VendorOrderRow]
    total: int
    skip: int
    limit: int


class OrderStatusUpdateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_status: str = Field(..., alias="newStatus", min_length=1)
