"""Customer and vendor profile schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class CustomerAddress(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""


class PhoneNumberEntry(BaseModel):
    id: str
    number: str
    type: str


class CustomerProfileResponse(BaseModel):
    id: str
    name: str
    phone: Optional[str] = None
    address: Optional[CustomerAddress] = None
    phone_numbers: list[PhoneNumberEntry] = Field(default_factory=list)


class CustomerProfileUpdateRequest(BaseModel):
    """
    Profile changes. ``name`` is checked by the service; unknown keys such
    as ``email`` are dropped.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[dict[str, Any]] = None


class CustomerSettingsResponse(BaseModel):
    name: str
    email: str
    phone: str = ""
    address: CustomerAddress


class CustomerSettingsUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[dict[str, Any]] = None


class PhoneNumberCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    number: Optional[str] = Field(None, max_length=20)
    type: Optional[str] = Field(None, max_length=20, description="Defaults to secondary")


class VendorProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    phone_number: str = ""


class VendorProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, max_length=255)
    phone_number: Optional[str] = Field(None, max_length=20)
