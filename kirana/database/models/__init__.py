"""
Database models package initialization.

Importing this package registers every table with ``Base.metadata`` so
relationships resolve and Alembic autogenerate sees the full schema.
"""

from kirana.database.base import Base, BaseModel, TimestampMixin, UUIDMixin
from kirana.database.models.cart import CartItem
from kirana.database.models.category import ProductCategory
from kirana.database.models.customer import Customer
from kirana.database.models.delivery import Delivery
from kirana.database.models.delivery_agent import DeliveryAgent, VehicleType
from kirana.database.models.order import Order, OrderItem
from kirana.database.models.product import Product
from kirana.database.models.vendor import Vendor

__all__ = [
    "Base",
    "BaseModel",
    "TimestampMixin",
    "UUIDMixin",
    "CartItem",
    "Customer",
    "Delivery",
    "DeliveryAgent",
    "VehicleType",
    "Order",
    "OrderItem",
    "Product",
    "ProductCategory",
    "Vendor",
]
