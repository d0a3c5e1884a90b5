"""Product catalog and inventory schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductResponse(BaseModel):
    id: str
    vendor_id: str
    name: str
    description: Optional[str] = None
    price: float
    unit: str
    category: str
    stock: int
    image_url: Optional[str] = None
    is_available: bool
    tags: list[str] = Field(default_factory=list)


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int
    skip: int
    limit: int


class ProductCreateRequest(BaseModel):
    """
    New inventory item.

    Required fields are checked by the inventory service so the error
    lists every missing field at once.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, le=Decimal("99999999.99"))
    unit: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=100)
    stock: int = Field(default=0, ge=0, le=2_147_483_647)
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: bool = True
    tags: list[str] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, le=Decimal("99999999.99"))
    unit: Optional[str] = Field(None, max_length=50)
    category: Optional[str] = Field(None, max_length=100)
    stock: Optional[int] = Field(None, ge=0, le=2_147_483_647)
    image_url: Optional[str] = Field(None, max_length=500)
    is_available: Optional[bool] = None
    tags: Optional[list[str]] = None
