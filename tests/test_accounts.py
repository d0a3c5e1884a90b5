"""
Tests for customer and vendor profiles.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from sqlalchemy.exc import IntegrityError

from kirana.core.errors import DuplicateKeyError, NotFoundError, ValidationError
from kirana.database.models.customer import Customer
from kirana.database.models.vendor import Vendor
from kirana.services.accounts.service import (
    CustomerProfileService,
    VendorProfileService,
    format_customer_profile,
)
from kirana.services.auth.repository import AccountRepository

REPOSITORY_PATH = "kirana.services.accounts.service.AccountRepository"

ADDRESS = {
    "street": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "postal_code": "411001",
}


def _apply_fields(account, **fields):
    for key, value in fields.items():
        setattr(account, key, value)
    return account


@pytest.fixture
def account_repository() -> AsyncMock:
    repository = AsyncMock(spec=AccountRepository)
    repository.update_account.side_effect = _apply_fields
    return repository


@pytest.fixture
def customer(customer_id) -> Customer:
    return Customer(
        id=customer_id,
        name="Asha Rao",
        email="asha@example.com",
        phone="+919800000001",
        address=None,
        phone_numbers=[],
    )


@pytest.fixture
def vendor(vendor_id) -> Vendor:
    return Vendor(
        id=vendor_id,
        business_name="Sharma Kirana",
        email="owner@sharmakirana.in",
        phone="+919822222222",
    )


@pytest.fixture
def customer_service(mock_session, account_repository) -> CustomerProfileService:
    service = CustomerProfileService(mock_session)
    service.repository = account_repository
    return service


@pytest.fixture
def vendor_service(mock_session, account_repository) -> VendorProfileService:
    service = VendorProfileService(mock_session)
    service.repository = account_repository
    return service


# ============================================================================
# Customer profile
# ============================================================================


class TestCustomerProfile:
    async def test_profile_leaves_out_email(self, customer_service, customer):
        customer_service.repository.get_customer.return_value = customer

        profile = await customer_service.get_profile(customer.id)

        assert "email" not in profile
        assert profile["name"] == "Asha Rao"
        assert profile["phone_numbers"] == []

    async def test_unknown_customer(self, customer_service):
        customer_service.repository.get_customer.return_value = None

        with pytest.raises(NotFoundError, match="Customer not found"):
            await customer_service.get_profile(uuid.uuid4())

    @pytest.mark.parametrize("data", [{}, {"name": "   "}, {"phone": "+91 98000"}])
    async def test_name_is_required(self, customer_service, customer, data):
        with pytest.raises(ValidationError, match="Name is required"):
            await customer_service.update_profile(customer.id, data)

        customer_service.repository.update_account.assert_not_called()

    async def test_email_cannot_be_changed(self, customer_service, customer):
        customer_service.repository.get_customer.return_value = customer

        profile = await customer_service.update_profile(
            customer.id, {"name": " Asha R ", "email": "new@example.com"}
        )

        customer_service.repository.update_account.assert_awaited_once_with(
            customer, name="Asha R"
        )
        assert customer.email == "asha@example.com"
        assert profile["name"] == "Asha R"

    async def test_incomplete_address_rejected(self, customer_service, customer):
        with pytest.raises(ValidationError, match="Missing required address fields"):
            await customer_service.update_profile(
                customer.id, {"name": "Asha", "address": {"street": "12 MG Road"}}
            )


class TestCustomerSettings:
    async def test_missing_address_is_blank(self, customer_service, customer):
        customer_service.repository.get_customer.return_value = customer

        settings = await customer_service.get_settings(customer.id)

        assert settings == {
            "name": "Asha Rao",
            "email": "asha@example.com",
            "phone": "+919800000001",
            "address": {"street": "", "city": "", "state": "", "postal_code": ""},
        }

    @pytest.mark.parametrize(
        "data",
        [{"address": ADDRESS}, {"phone": "+919800000002"}, {"phone": " ", "address": ADDRESS}],
    )
    async def test_phone_and_address_required(self, customer_service, customer, data):
        with pytest.raises(ValidationError, match="Missing required fields"):
            await customer_service.update_settings(customer.id, data)

    async def test_every_address_part_required(self, customer_service, customer):
        address = {**ADDRESS, "state": ""}

        with pytest.raises(ValidationError) as exc_info:
            await customer_service.update_settings(
                customer.id, {"phone": "+919800000002", "address": address}
            )

        assert exc_info.value.message == "Missing required address fields"
        assert exc_info.value.context["missing_fields"] == ["state"]

    async def test_update_settings(self, customer_service, customer):
        customer_service.repository.get_customer.return_value = customer

        settings = await customer_service.update_settings(
            customer.id,
            {"phone": " +919800000002 ", "address": {**ADDRESS, "city": " Pune "}},
        )

        assert settings["phone"] == "+919800000002"
        assert settings["address"] == ADDRESS


class TestPhoneNumbers:
    async def test_number_is_appended(self, customer_service, customer):
        customer.phone_numbers = [{"id": "p1", "number": "+911111", "type": "primary"}]
        customer_service.repository.get_customer.return_value = customer

        entry = await customer_service.add_phone_number(customer.id, " +919833333333 ")

        assert entry["number"] == "+919833333333"
        assert entry["type"] == "secondary"
        uuid.UUID(entry["id"])
        assert [p["id"] for p in customer.phone_numbers] == ["p1", entry["id"]]

    async def test_blank_number(self, customer_service, customer):
        with pytest.raises(ValidationError, match="Phone number is required"):
            await customer_service.add_phone_number(customer.id, "  ")

        customer_service.repository.get_customer.assert_not_called()


def test_format_customer_profile_handles_missing_list(customer):
    customer.phone_numbers = None

    assert format_customer_profile(customer)["phone_numbers"] == []


# ============================================================================
# Vendor profile
# ============================================================================


class TestVendorProfile:
    async def test_get_profile(self, vendor_service, vendor):
        vendor_service.repository.get_vendor.return_value = vendor

        assert await vendor_service.get_profile(vendor.id) == {
            "id": str(vendor.id),
            "name": "Sharma Kirana",
            "email": "owner@sharmakirana.in",
            "phone_number": "+919822222222",
        }

    async def test_fields_map_to_columns(self, vendor_service, vendor):
        vendor_service.repository.get_vendor.return_value = vendor

        profile = await vendor_service.update_profile(
            vendor.id, {"name": " Sharma Stores ", "phone_number": " +919844444444 "}
        )

        vendor_service.repository.update_account.assert_awaited_once_with(
            vendor, business_name="Sharma Stores", phone="+919844444444"
        )
        assert profile["name"] == "Sharma Stores"

    async def test_no_fields(self, vendor_service, vendor):
        with pytest.raises(ValidationError, match="No update fields provided"):
            await vendor_service.update_profile(vendor.id, {})

    async def test_blank_name(self, vendor_service, vendor):
        with pytest.raises(ValidationError):
            await vendor_service.update_profile(vendor.id, {"name": " "})

    async def test_unknown_vendor(self, vendor_service):
        vendor_service.repository.get_vendor.return_value = None

        with pytest.raises(NotFoundError, match="Vendor profile not found"):
            await vendor_service.update_profile(uuid.uuid4(), {"name": "Shop"})


async def test_update_account_maps_integrity_error(mock_session, vendor):
    mock_session.flush.side_effect = IntegrityError("UPDATE", {}, Exception("ix_vendors_email"))

    with pytest.raises(DuplicateKeyError):
        await AccountRepository(mock_session).update_account(vendor, email="taken@example.com")

    mock_session.rollback.assert_awaited_once()


# ============================================================================
# Endpoints
# ============================================================================


class TestProfileEndpoints:
    def test_customer_profile(
        self, test_client, override_dependencies, customer_context, account_repository, customer
    ):
        override_dependencies(customer_context)
        account_repository.get_customer.return_value = customer

        with patch(REPOSITORY_PATH, return_value=account_repository):
            response = test_client.get("/api/customer/profile")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Asha Rao"
        account_repository.get_customer.assert_awaited_once_with(customer_context.account_id)

    def test_vendor_cannot_read_customer_profile(
        self, test_client, override_dependencies, vendor_context
    ):
        override_dependencies(vendor_context)

        response = test_client.get("/api/customer/profile")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_profile_without_name_is_400(
        self, test_client, override_dependencies, customer_context, account_repository
    ):
        override_dependencies(customer_context)

        with patch(REPOSITORY_PATH, return_value=account_repository):
            response = test_client.put("/api/customer/profile", json={"phone": "+91"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["message"] == "Name is required"

    def test_add_phone_is_201(
        self, test_client, override_dependencies, customer_context, account_repository, customer
    ):
        override_dependencies(customer_context)
        account_repository.get_customer.return_value = customer

        with patch(REPOSITORY_PATH, return_value=account_repository):
            response = test_client.post(
                "/api/customer/profile/phone", json={"number": "+919833333333", "type": "work"}
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["type"] == "work"

    def test_customer_settings_update(
        self, test_client, override_dependencies, customer_context, account_repository, customer
    ):
        override_dependencies(customer_context)
        account_repository.get_customer.return_value = customer

        with patch(REPOSITORY_PATH, return_value=account_repository):
            response = test_client.put(
                "/api/customer/settings", json={"phone": "+919800000002", "address": ADDRESS}
            )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["address"] == ADDRESS

    def test_empty_vendor_profile_update_is_400(
        self, test_client, override_dependencies, vendor_context, account_repository
    ):
        override_dependencies(vendor_context)

        with patch(REPOSITORY_PATH, return_value=account_repository):
            response = test_client.put("/api/vendor/profile", json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["message"] == "No update fields provided"
