"""Vendor store settings endpoints."""

from fastapi import APIRouter

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.dashboard import StoreSettingsResponse, StoreSettingsUpdateRequest
from kirana.services.vendors.service import VendorSettingsService

router = APIRouter(prefix="/vendor/settings", tags=["store settings"])


@router.get("", response_model=StoreSettingsResponse, summary="Get store settings")
async def get_settings(context: VendorContext, db: DatabaseSession) -> StoreSettingsResponse:
    try:
        result = await VendorSettingsService(db).get_settings(context.account_id)
        return StoreSettingsResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)


@router.put("", response_model=StoreSettingsResponse, summary="Update store settings")
async def update_settings(
    payload: StoreSettingsUpdateRequest,
    context: VendorContext,
    db: DatabaseSession,
) -> StoreSettingsResponse:
    """Merge the provided fields into the stored settings."""
    try:
        result = await VendorSettingsService(db).update_settings(
            context.account_id, payload.model_dump(exclude_unset=True, mode="json")
        )
        return StoreSettingsResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)
