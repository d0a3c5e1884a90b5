"""Customer profile, settings and phone number endpoints."""

from fastapi import APIRouter, status

from kirana.api.deps import CustomerContext, DatabaseSession
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.accounts import (
    CustomerProfileResponse,
    CustomerProfileUpdateRequest,
    CustomerSettingsResponse,
    CustomerSettingsUpdateRequest,
    PhoneNumberCreateRequest,
    PhoneNumberEntry,
)
from kirana.services.accounts.service import CustomerProfileService

router = APIRouter(prefix="/customer", tags=["customer profile"])


@router.get("/profile", response_model=CustomerProfileResponse, summary="Get my profile")
async def get_profile(context: CustomerContext, db: DatabaseSession) -> CustomerProfileResponse:
    try:
        profile = await CustomerProfileService(db).get_profile(context.account_id)
        return CustomerProfileResponse(**profile)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("/profile", response_model=CustomerProfileResponse, summary="Update my profile")
async def update_profile(
    payload: CustomerProfileUpdateRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> CustomerProfileResponse:
    """
    Raises:
        HTTPException: 400 when the name is missing
    """
    try:
        profile = await CustomerProfileService(db).update_profile(
            context.account_id, payload.model_dump(exclude_unset=True)
        )
        return CustomerProfileResponse(**profile)
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "/profile/phone",
    response_model=PhoneNumberEntry,
    status_code=status.HTTP_201_CREATED,
    summary="Add a phone number",
)
async def add_phone_number(
    payload: PhoneNumberCreateRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> PhoneNumberEntry:
    try:
        entry = await CustomerProfileService(db).add_phone_number(
            context.account_id, payload.number, payload.type
        )
        return PhoneNumberEntry(**entry)
    except KiranaError as e:
        raise to_http_exception(e)


@router.get("/settings", response_model=CustomerSettingsResponse, summary="Get my settings")
async def get_settings(context: CustomerContext, db: DatabaseSession) -> CustomerSettingsResponse:
    try:
        result = await CustomerProfileService(db).get_settings(context.account_id)
        return CustomerSettingsResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("/settings", response_model=CustomerSettingsResponse, summary="Update my settings")
async def update_settings(
    payload: CustomerSettingsUpdateRequest,
    context: CustomerContext,
    db: DatabaseSession,
) -> CustomerSettingsResponse:
    """Replace phone and default address; both are required."""
    try:
        result = await CustomerProfileService(db).update_settings(
            context.account_id, payload.model_dump()
        )
        return CustomerSettingsResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)
