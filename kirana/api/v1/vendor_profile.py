"""Vendor profile endpoints."""

from fastapi import APIRouter

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.accounts import VendorProfileResponse, VendorProfileUpdateRequest
from kirana.services.accounts.service import VendorProfileService

router = APIRouter(prefix="/vendor/profile", tags=["vendor profile"])


@router.get("", response_model=VendorProfileResponse, summary="Get the vendor profile")
async def get_profile(context: VendorContext, db: DatabaseSession) -> VendorProfileResponse:
    try:
        profile = await VendorProfileService(db).get_profile(context.account_id)
        return VendorProfileResponse(**profile)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("", response_model=VendorProfileResponse, summary="Update the vendor profile")
async def update_profile(
    payload: VendorProfileUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> VendorProfileResponse:
    """
    Raises:
        HTTPException: 400 when neither name nor phone_number is given
    """
    try:
        profile = await VendorProfileService(db).update_profile(
            context.account_id, payload.model_dump(exclude_unset=True)
        )
        return VendorProfileResponse(**profile)
    except KiranaError as e:
        raise to_http_exception(e)
