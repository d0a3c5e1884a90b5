"""
Tests for storefront browsing and vendor inventory management.
"""

import uuid
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status

from kirana.core.errors import ForbiddenError, NotFoundError, ValidationError
from kirana.services.catalog.service import (
    CatalogService,
    InventoryService,
    _clean_product_fields,
)


def _product(vendor_id, available=True):
    product = MagicMock()
    product.id = uuid.uuid4()
    product.vendor_id = vendor_id
    product.name = "Ghee"
    product.description = None
    product.price = Decimal("550.00")
    product.unit = "litre"
    product.category = "Dairy"
    product.stock = 4
    product.image_url = None
    product.is_available = available
    product.tags = ["organic"]
    return product


@pytest.fixture
def inventory_service(mock_session: AsyncMock) -> InventoryService:
    service = InventoryService(mock_session)
    service.repository = AsyncMock()
    return service


@pytest.fixture
def catalog_service(mock_session: AsyncMock) -> CatalogService:
    service = CatalogService(mock_session)
    service.repository = AsyncMock()
    return service


class TestCleanProductFields:
    def test_price_is_quantized(self):
        assert _clean_product_fields({"price": "12.5"})["price"] == Decimal("12.50")

    @pytest.mark.parametrize(
        "price", ["abc", "-1", "NaN", "Infinity", "100000000", "99999999.999"]
    )
    def test_bad_prices(self, price):
        with pytest.raises(ValidationError):
            _clean_product_fields({"price": price})

    @pytest.mark.parametrize("stock", ["many", -3, 2**31])
    def test_bad_stock(self, stock):
        with pytest.raises(ValidationError):
            _clean_product_fields({"stock": stock})

    def test_unknown_fields_are_dropped(self):
        assert _clean_product_fields({"vendor_id": "x", "name": " Ghee "}) == {"name": "Ghee"}


class TestCatalogService:
    async def test_unavailable_product_is_hidden(self, catalog_service, vendor_id):
        catalog_service.repository.get_by_id.return_value = _product(vendor_id, available=False)

        with pytest.raises(NotFoundError):
            await catalog_service.get_product(uuid.uuid4())

    async def test_list_products(self, catalog_service, vendor_id):
        catalog_service.repository.list_available.return_value = ([_product(vendor_id)], 1)

        result = await catalog_service.list_products(category="dairy")

        catalog_service.repository.list_available.assert_awaited_once_with(
            category="dairy", skip=0, limit=20
        )
        assert result["products"][0]["price"] == 550.0
        assert result["products"][0]["tags"] == ["organic"]


class TestInventoryService:
    async def test_create_requires_fields(self, inventory_service, vendor_id):
        with pytest.raises(ValidationError, match="category, price, unit"):
            await inventory_service.create_product(vendor_id, {"name": "Ghee"})

    async def test_create_defaults_stock(self, inventory_service, vendor_id):
        inventory_service.repository.create.return_value = _product(vendor_id)

        await inventory_service.create_product(
            vendor_id,
            {"name": "Ghee", "category": "Dairy", "price": 550, "unit": "litre"},
        )

        kwargs = inventory_service.repository.create.await_args.kwargs
        assert kwargs["stock"] == 0
        assert kwargs["price"] == Decimal("550.00")

    async def test_update_other_vendors_product(
        self, inventory_service, vendor_id, other_vendor_id
    ):
        inventory_service.repository.get_by_id.return_value = _product(vendor_id)

        with pytest.raises(ForbiddenError):
            await inventory_service.update_product(uuid.uuid4(), other_vendor_id, {"stock": 3})

        inventory_service.repository.update.assert_not_called()

    async def test_delete_product(self, inventory_service, vendor_id):
        product = _product(vendor_id)
        inventory_service.repository.get_by_id.return_value = product

        result = await inventory_service.delete_product(str(product.id), vendor_id)

        assert result == {"id": str(product.id), "deleted": True}
        inventory_service.repository.delete.assert_awaited_once_with(product.id, vendor_id)


class TestProductEndpoints:
    def test_public_listing_needs_no_token(self, test_client, override_dependencies):
        override_dependencies()
        service = MagicMock()
        service.list_products = AsyncMock(
            return_value={"products": [], "total": 0, "skip": 0, "limit": 20}
        )

        with patch("kirana.api.v1.products.CatalogService", return_value=service):
            response = test_client.get("/api/products")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total"] == 0

    def test_price_above_column_range_is_422(
        self, test_client, override_dependencies, vendor_context
    ):
        override_dependencies(vendor_context)

        with patch("kirana.api.v1.inventory.InventoryService") as service_cls:
            response = test_client.post(
                "/api/vendor/inventory",
                json={
                    "name": "Saffron",
                    "category": "Spices",
                    "unit": "g",
                    "price": "1000000000",
                },
            )

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        service_cls.assert_not_called()
