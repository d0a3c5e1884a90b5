"""
Tests for authentication: password hashing, JWT handling, the auth service
and the sign-up/sign-in endpoints.
"""

import uuid
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status

from kirana.core.errors import AuthenticationError, DuplicateKeyError, ValidationError
from kirana.core.roles import AccountRole
from kirana.core.security import (
    PasswordError,
    TokenError,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from kirana.database.models.customer import Customer
from kirana.database.models.vendor import Vendor
from kirana.services.auth.service import AuthService, format_account


# ============================================================================
# Security helpers
# ============================================================================


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("basmati-rice")

        assert hashed != "basmati-rice"
        assert verify_password("basmati-rice", hashed)
        assert not verify_password("jasmine-rice", hashed)

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(PasswordError):
            hash_password("")

    def test_malformed_hash_verifies_false(self):
        assert verify_password("secret", "not-a-bcrypt-hash") is False


class TestTokens:
    def test_round_trip_claims(self):
        account_id = str(uuid.uuid4())
        token = create_access_token({"sub": account_id, "role": "vendor"})

        payload = decode_token(token)

        assert payload["sub"] == account_id
        assert payload["role"] == "vendor"
        assert payload["type"] == "access"

    def test_expired_token(self):
        token = create_access_token(
            {"sub": str(uuid.uuid4()), "role": "customer"},
            expires_delta=timedelta(seconds=-5),
        )

        with pytest.raises(TokenError) as exc_info:
            decode_token(token)
        assert exc_info.value.code == "TOKEN_EXPIRED"

    def test_claims_are_required(self):
        with pytest.raises(TokenError):
            create_access_token({"sub": str(uuid.uuid4())})

    def test_tampered_token(self):
        token = create_access_token({"sub": str(uuid.uuid4()), "role": "vendor"})

        with pytest.raises(TokenError) as exc_info:
            decode_token(token[:-2] + "xx")
        assert exc_info.value.code == "TOKEN_INVALID"


# ============================================================================
# AuthService
# ============================================================================


@pytest.fixture
def auth_service(mock_session: AsyncMock) -> AuthService:
    service = AuthService(mock_session)
    service.repository = AsyncMock()
    return service


def _vendor_account(password: str = "correct-horse", is_active: bool = True) -> Vendor:
    return Vendor(
        id=uuid.uuid4(),
        business_name="Sharma Kirana",
        email="owner@sharmakirana.in",
        password_hash=hash_password(password),
        is_active=is_active,
    )


class TestSignup:
    async def test_vendor_signup(self, auth_service):
        auth_service.repository.get_by_email.return_value = None
        auth_service.repository.create.side_effect = lambda role, **fields: Vendor(
            id=uuid.uuid4(), **fields
        )

        account = await auth_service.signup(
            "vendor", " Sharma Kirana ", "Owner@SharmaKirana.in", "correct-horse"
        )

        assert account["role"] == "vendor"
        assert account["name"] == "Sharma Kirana"
        assert account["email"] == "owner@sharmakirana.in"
        role, = auth_service.repository.create.call_args.args
        fields = auth_service.repository.create.call_args.kwargs
        assert role == AccountRole.VENDOR
        assert fields["password_hash"] != "correct-horse"

    async def test_duplicate_email(self, auth_service):
        auth_service.repository.get_by_email.return_value = _vendor_account()

        with pytest.raises(DuplicateKeyError, match="already exists"):
            await auth_service.signup("vendor", "Shop", "owner@sharmakirana.in", "password123")

        auth_service.repository.create.assert_not_called()

    async def test_short_password(self, auth_service):
        with pytest.raises(ValidationError, match="at least 8"):
            await auth_service.signup("customer", "Asha", "asha@example.com", "short")

    async def test_unknown_role(self, auth_service):
        with pytest.raises(ValidationError, match="Invalid role"):
            await auth_service.signup("admin", "Asha", "asha@example.com", "password123")


class TestSignin:
    async def test_signin_issues_token(self, auth_service):
        vendor = _vendor_account()
        auth_service.repository.get_by_email.return_value = vendor

        result = await auth_service.signin("owner@sharmakirana.in", "correct-horse", "vendor")

        assert result["token_type"] == "bearer"
        assert result["expires_in"] == 3600
        payload = decode_token(result["access_token"])
        assert payload == {**payload, "sub": str(vendor.id), "role": "vendor"}

    @pytest.mark.parametrize(
        "account, password",
        [
            (None, "correct-horse"),
            ("vendor", "wrong-horse"),
            ("inactive", "correct-horse"),
        ],
    )
    async def test_invalid_credentials(self, auth_service, account, password):
        if account == "vendor":
            auth_service.repository.get_by_email.return_value = _vendor_account()
        elif account == "inactive":
            auth_service.repository.get_by_email.return_value = _vendor_account(
                is_active=False
            )
        else:
            auth_service.repository.get_by_email.return_value = None

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await auth_service.signin("owner@sharmakirana.in", password, "vendor")


def test_format_customer_account():
    customer = Customer(id=uuid.uuid4(), name="Asha Rao", email="asha@example.com")

    assert format_account(customer, AccountRole.CUSTOMER) == {
        "id": str(customer.id),
        "role": "customer",
        "name": "Asha Rao",
        "email": "asha@example.com",
    }


# ============================================================================
# Endpoints
# ============================================================================


class TestAuthEndpoints:
    def test_signup_returns_201(self, test_client, override_dependencies):
        override_dependencies()
        service = MagicMock()
        service.signup = AsyncMock(
            return_value={
                "id": str(uuid.uuid4()),
                "role": "customer",
                "name": "Asha Rao",
                "email": "asha@example.com",
            }
        )

        with patch("kirana.api.v1.auth.AuthService", return_value=service):
            response = test_client.post(
                "/api/auth/signup",
                json={
                    "role": "customer",
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "password": "password123",
                },
            )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["role"] == "customer"

    def test_signin_bad_credentials_is_401(self, test_client, override_dependencies):
        override_dependencies()
        service = MagicMock()
        service.signin = AsyncMock(side_effect=AuthenticationError("Invalid credentials"))

        with patch("kirana.api.v1.auth.AuthService", return_value=service):
            response = test_client.post(
                "/api/auth/signin",
                json={"email": "asha@example.com", "password": "nope-nope"},
            )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == {
            "error": "INVALID_CREDENTIALS",
            "message": "Invalid credentials",
        }
        assert response.headers["WWW-Authenticate"] == "Bearer"
