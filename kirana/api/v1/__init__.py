"""
API v1 routers.

Every router is mounted under the ``/api`` prefix by ``kirana.main``.
"""

from kirana.api.v1.auth import router as auth_router
from kirana.api.v1.cart import router as cart_router
from kirana.api.v1.categories import router as categories_router
from kirana.api.v1.customer_orders import router as customer_orders_router
from kirana.api.v1.customer_profile import router as customer_profile_router
from kirana.api.v1.dashboard import router as dashboard_router
from kirana.api.v1.delivery_agents import router as delivery_agents_router
from kirana.api.v1.inventory import router as inventory_router
from kirana.api.v1.products import router as products_router
from kirana.api.v1.settings import router as settings_router
from kirana.api.v1.vendor_deliveries import router as vendor_deliveries_router
from kirana.api.v1.vendor_orders import router as vendor_orders_router
from kirana.api.v1.vendor_profile import router as vendor_profile_router

routers = [
    auth_router,
    products_router,
    cart_router,
    customer_orders_router,
    customer_profile_router,
    vendor_orders_router,
    vendor_deliveries_router,
    delivery_agents_router,
    categories_router,
    inventory_router,
    dashboard_router,
    settings_router,
    vendor_profile_router,
]

__all__ = ["routers"]
