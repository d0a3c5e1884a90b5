"""
Account profile services for customers and vendors.

Customers edit their name, phone and default address and keep a list of
extra phone numbers. Vendors edit their display name and phone number.
Emails are never changed here.
"""

import uuid
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import NotFoundError, ValidationError
from kirana.core.logging import get_logger
from kirana.database.models.customer import Customer
from kirana.database.models.vendor import Vendor
from kirana.services.auth.repository import AccountRepository

logger = get_logger(__name__)

ADDRESS_FIELDS = ("street", "city", "state", "postal_code")
DEFAULT_PHONE_TYPE = "secondary"


def _empty_address() -> dict[str, str]:
    return {field: "" for field in ADDRESS_FIELDS}


def _clean_address(address: Optional[dict[str, Any]]) -> dict[str, str]:
    address = address or {}
    missing = [
        field for field in ADDRESS_FIELDS if not str(address.get(field) or "").strip()
    ]
    if missing:
        raise ValidationError(
            "Missing required address fields", missing_fields=missing
        )
    return {field: str(address[field]).strip() for field in ADDRESS_FIELDS}


def format_customer_profile(customer: Customer) -> dict[str, Any]:
    return {
        "id": str(customer.id),
        "name": customer.name,
        "phone": customer.phone,
        "address": customer.address,
        "phone_numbers": list(customer.phone_numbers or []),
    }


def format_customer_settings(customer: Customer) -> dict[str, Any]:
    address = _empty_address()
    address.update(customer.address or {})
    return {
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone or "",
        "address": address,
    }


def format_vendor_profile(vendor: Vendor) -> dict[str, Any]:
    return {
        "id": str(vendor.id),
        "name": vendor.business_name,
        "email": vendor.email,
        "phone_number": vendor.phone or "",
    }


class CustomerProfileService:
    """Profile, settings and phone numbers of the calling customer."""

    def __init__(self, session: AsyncSession):
        self.repository = AccountRepository(session)

    async def _get_customer(self, customer_id: uuid.UUID) -> Customer:
        customer = await self.repository.get_customer(customer_id)
        if not customer:
            raise NotFoundError("Customer not found", customer_id=str(customer_id))
        return customer

    async def get_profile(self, customer_id: uuid.UUID) -> dict[str, Any]:
        customer = await self._get_customer(customer_id)
        return format_customer_profile(customer)

    async def update_profile(
        self, customer_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update name, phone and address. ``email`` in the payload is ignored.

        Raises:
            ValidationError: If the name is missing or the address is incomplete
            NotFoundError: If the customer does not exist
        """
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")

        fields: dict[str, Any] = {"name": name}
        if data.get("phone") is not None:
            fields["phone"] = str(data["phone"]).strip() or None
        if data.get("address") is not None:
            fields["address"] = _clean_address(data["address"])

        customer = await self._get_customer(customer_id)
        customer = await self.repository.update_account(customer, **fields)
        return format_customer_profile(customer)

    async def get_settings(self, customer_id: uuid.UUID) -> dict[str, Any]:
        customer = await self._get_customer(customer_id)
        return format_customer_settings(customer)

    async def update_settings(
        self, customer_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Replace the phone and default address.

        Raises:
            ValidationError: If phone or address is missing, or an address part is blank
        """
        phone = str(data.get("phone") or "").strip()
        address = data.get("address")
        if not phone or not address:
            raise ValidationError(
                "Missing required fields",
                missing_fields=[
                    key for key, value in (("phone", phone), ("address", address))
                    if not value
                ],
            )

        fields = {"phone": phone, "address": _clean_address(address)}
        customer = await self._get_customer(customer_id)
        customer = await self.repository.update_account(customer, **fields)
        return format_customer_settings(customer)

    async def add_phone_number(
        self,
        customer_id: uuid.UUID,
        number: Optional[str],
        phone_type: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Append a phone number to the customer's list.

        Returns:
            The new entry ``{id, number, type}``
        """
        number = str(number or "").strip()
        if not number:
            raise ValidationError("Phone number is required", field="number")

        customer = await self._get_customer(customer_id)
        entry = {
            "id": str(uuid.uuid4()),
            "number": number,
            "type": (phone_type or DEFAULT_PHONE_TYPE).strip() or DEFAULT_PHONE_TYPE,
        }
        # New list so the JSONB column is flagged dirty
        await self.repository.update_account(
            customer, phone_numbers=[*(customer.phone_numbers or []), entry]
        )

        logger.info(
            "Customer phone number added",
            customer_id=str(customer_id),
            phone_id=entry["id"],
        )
        return entry


class VendorProfileService:
    """Profile of the calling vendor."""

    def __init__(self, session: AsyncSession):
        self.repository = AccountRepository(session)

    async def _get_vendor(self, vendor_id: uuid.UUID) -> Vendor:
        vendor = await self.repository.get_vendor(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor profile not found", vendor_id=str(vendor_id))
        return vendor

    async def get_profile(self, vendor_id: uuid.UUID) -> dict[str, Any]:
        vendor = await self._get_vendor(vendor_id)
        return format_vendor_profile(vendor)

    async def update_profile(
        self, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update the vendor's name and/or phone number.

        Raises:
            ValidationError: If no field is provided or the name is blank
        """
        fields: dict[str, Any] = {}
        if data.get("name") is not None:
            name = str(data["name"]).strip()
            if not name:
                raise ValidationError("name cannot be empty", field="name")
            fields["business_name"] = name
        if data.get("phone_number") is not None:
            fields["phone"] = str(data["phone_number"]).strip() or None

        if not fields:
            raise ValidationError("No update fields provided")

        vendor = await self._get_vendor(vendor_id)
        vendor = await self.repository.update_account(vendor, **fields)
        return format_vendor_profile(vendor)
