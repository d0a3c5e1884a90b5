"""Shopping cart schemas."""

from uuid import UUID

from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: UUID
    quantity: int = Field(default=1, ge=1, le=100)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., le=100, description="Zero or less removes the line")


class CartLineResponse(BaseModel):
    product_id: str
    vendor_id: str
    name: str
    price: float
    unit: str
    quantity: int
    line_total: float
    is_available: bool


class CartResponse(BaseModel):
    items: list[CartLineResponse]
    item_count: int
    total: float
