"""Customer account model."""

from typing import Any, Optional

from sqlalchemy import Boolean, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from kirana.database.base import BaseModel


class Customer(BaseModel):
    """Shopper account that places orders and owns a cart."""

    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    address: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=True,
        comment="Default delivery address {street, city, state, postal_code}",
    )

    phone_numbers: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONB,
        nullable=False,
        default=list,
        comment="Additional phone numbers [{id, number, type}]",
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
