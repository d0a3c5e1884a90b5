"""Vendor product category schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryResponse(BaseModel):
    id: str
    vendor_id: str
    name: str
    color: str
    bg_color: str
    icon: str
    subcategories: list[str] = Field(default_factory=list)
    product_count: int = 0


class CategoryCreateRequest(BaseModel):
    """New category; the name is checked by the service."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    bg_color: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)
    subcategories: Optional[list[str]] = None


class CategoryUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, max_length=50)
    bg_color: Optional[str] = Field(None, max_length=50)
    icon: Optional[str] = Field(None, max_length=50)
    subcategories: Optional[list[str]] = None


class CategoryDeleteResponse(BaseModel):
    id: str
    deleted: bool
