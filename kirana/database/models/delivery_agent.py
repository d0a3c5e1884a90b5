"""Delivery agent model: a courier employed by a vendor."""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import (
    Boolean,
    Enum as SQLEnum,
    ForeignKey,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from kirana.database.base import BaseModel
from kirana.database.models.order import enum_values


class VehicleType(str, Enum):
    BIKE = "bike"
    CAR = "car"
    SCOOTER = "scooter"
    OTHER = "other"

    @classmethod
    def from_string(cls, value: str) -> "VehicleType":
        """
        Parse a vehicle type case-insensitively.

        Raises:
            ValueError: If value is not a supported vehicle type
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid_values = ", ".join(v.value for v in cls)
            raise ValueError(
                f"Invalid vehicle type: {value}. Valid values are: {valid_values}"
            )


class DeliveryAgent(BaseModel):
    """
    Courier that can be assigned to the vendor's deliveries.

    Phone numbers are unique per vendor. Only active agents can take new
    assignments.
    """

    __tablename__ = "delivery_agents"

    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    vehicle_type: Mapped[VehicleType] = mapped_column(
        SQLEnum(VehicleType, name="vehicle_type", values_callable=enum_values),
        nullable=False,
        default=VehicleType.OTHER,
    )

    vehicle_details: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("vendor_id", "phone", name="uq_delivery_agents_vendor_phone"),
    )
