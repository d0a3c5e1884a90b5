"""Account roles carried in access tokens."""

from enum import Enum


class AccountRole(str, Enum):
    """Kind of account a token was issued to."""

    VENDOR = "vendor"
    CUSTOMER = "customer"

    @classmethod
    def from_string(cls, value: str) -> "AccountRole":
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid role: {value}. Valid roles are: vendor, customer")
