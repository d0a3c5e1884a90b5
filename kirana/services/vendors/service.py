"""
Vendor store settings.

Profile fields live on the vendor row; store description, business hours
and delivery settings live in its ``store_settings`` JSONB document.
Missing values fall back to the defaults below.
"""

import copy
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import NotFoundError, ValidationError
from kirana.core.logging import get_logger
from kirana.database.models.vendor import Vendor
from kirana.services.auth.repository import AccountRepository

logger = get_logger(__name__)

DEFAULT_BUSINESS_HOURS: list[dict[str, Any]] = [
    {"day": "Monday", "open": "08:00", "close": "22:00", "enabled": True},
    {"day": "Tuesday", "open": "08:00", "close": "22:00", "enabled": True},
    {"day": "Wednesday", "open": "08:00", "close": "22:00", "enabled": True},
    {"day": "Thursday", "open": "08:00", "close": "22:00", "enabled": True},
    {"day": "Friday", "open": "08:00", "close": "22:00", "enabled": True},
    {"day": "Saturday", "open": "09:00", "close": "20:00", "enabled": True},
    {"day": "Sunday", "open": "10:00", "close": "18:00", "enabled": False},
]

DEFAULT_DELIVERY_SETTINGS: dict[str, Any] = {
    "delivery_radius": 5,
    "free_delivery": True,
    "free_delivery_threshold": 500,
    "express_delivery": False,
    "express_delivery_time": 30,
}

# settings key -> vendor column
PROFILE_FIELDS = {
    "store_name": "business_name",
    "phone_number": "phone",
    "email": "email",
    "address": "address",
}

DOCUMENT_FIELDS = ("store_description", "business_hours", "delivery_settings")


def build_settings(vendor: Vendor) -> dict[str, Any]:
    document = vendor.store_settings or {}
    delivery_settings = copy.deepcopy(DEFAULT_DELIVERY_SETTINGS)
    delivery_settings.update(document.get("delivery_settings") or {})
    return {
        "store_name": vendor.business_name,
        "store_description": document.get("store_description", vendor.description or ""),
        "phone_number": vendor.phone or "",
        "email": vendor.email,
        "address": vendor.address or "",
        "business_hours": copy.deepcopy(
            document.get("business_hours") or DEFAULT_BUSINESS_HOURS
        ),
        "delivery_settings": delivery_settings,
    }


class VendorSettingsService:
    """Read and update a vendor's store settings."""

    def __init__(self, session: AsyncSession):
        self.repository = AccountRepository(session)

    async def _get_vendor(self, vendor_id: uuid.UUID) -> Vendor:
        vendor = await self.repository.get_vendor(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor not found", vendor_id=str(vendor_id))
        return vendor

    async def get_settings(self, vendor_id: uuid.UUID) -> dict[str, Any]:
        vendor = await self._get_vendor(vendor_id)
        return build_settings(vendor)

    async def update_settings(
        self, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Merge the provided fields into the vendor's settings.

        Raises:
            ValidationError: If store_name or email is set to an empty value
            DuplicateKeyError: If the new email belongs to another vendor
        """
        vendor = await self._get_vendor(vendor_id)

        for key in ("store_name", "email"):
            if key in data and not str(data[key] or "").strip():
                raise ValidationError(f"{key} cannot be empty", field=key)

        fields = {
            column: data[key]
            for key, column in PROFILE_FIELDS.items()
            if key in data and data[key] is not None
        }
        if "email" in fields:
            fields["email"] = str(fields["email"]).strip().lower()

        document = copy.deepcopy(vendor.store_settings or {})
        for key in DOCUMENT_FIELDS:
            if key in data and data[key] is not None:
                if key == "delivery_settings":
                    merged = dict(document.get(key) or {})
                    merged.update(data[key])
                    document[key] = merged
                else:
                    document[key] = data[key]

        vendor = await self.repository.save_vendor_settings(vendor, fields, document)

        logger.info(
            "Store settings updated",
            vendor_id=str(vendor_id),
            fields=sorted(key for key in data if data[key] is not None),
        )
        return build_settings(vendor)
