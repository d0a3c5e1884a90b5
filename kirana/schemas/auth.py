"""Authentication request/response schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kirana.core.roles import AccountRole


class SignupRequest(BaseModel):
    """Vendor or customer registration."""

    model_config = ConfigDict(str_strip_whitespace=True)

    role: AccountRole = Field(..., description="Account kind: vendor or customer")
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    phone: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        """Validate email format."""
        if "@" not in v or "." not in v.split("@")[-1]:
            raise ValueError("Invalid email format")
        return v.lower()


class SigninRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)
    role: AccountRole = Field(default=AccountRole.CUSTOMER)


class AccountResponse(BaseModel):
    id: str
    role: AccountRole
    name: str
    email: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    account: AccountResponse
