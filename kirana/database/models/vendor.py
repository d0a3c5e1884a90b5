"""Vendor account model: a store selling on the marketplace."""

from typing import Any, Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from kirana.database.base import BaseModel


class Vendor(BaseModel):
    """
    Vendor account and store profile.

    ``store_settings`` holds the editable store configuration (description,
    business hours, delivery settings) as a JSONB document.
    """

    __tablename__ = "vendors"

    business_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Store display name",
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login email",
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    store_settings: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        comment="Store description, business hours and delivery settings",
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
