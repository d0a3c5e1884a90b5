"""Vendor dashboard and store settings schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from kirana.schemas.orders import VendorOrderRow


class SalesPoint(BaseModel):
    name: str
    sales: float


class DashboardStats(BaseModel):
    revenue: float
    orders: int
    customers: int
    products: int
    sales_data: list[SalesPoint]


class LowStockProduct(BaseModel):
    id: str
    name: str
    stock: int
    unit: str
    category: str


class DashboardResponse(BaseModel):
    stats: DashboardStats
    recent_orders: list[VendorOrderRow]
    low_stock_products: list[LowStockProduct]


class BusinessHours(BaseModel):
    day: str
    open: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    close: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    enabled: bool = True


class DeliverySettings(BaseModel):
    delivery_radius: float = Field(5, ge=0)
    free_delivery: bool = True
    free_delivery_threshold: float = Field(500, ge=0)
    express_delivery: bool = False
    express_delivery_time: int = Field(30, ge=0)


class StoreSettingsResponse(BaseModel):
    store_name: str
    store_description: str = ""
    phone_number: str = ""
    email: str
    address: str = ""
    business_hours: list[BusinessHours]
    delivery_settings: DeliverySettings


class StoreSettingsUpdateRequest(BaseModel):
    """Only the fields that are present are changed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    store_name: Optional[str] = Field(None, max_length=255)
    store_description: Optional[str] = None
    phone_number: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=500)
    business_hours: Optional[list[BusinessHours]] = None
    delivery_settings: Optional[dict[str, Any]] = None
