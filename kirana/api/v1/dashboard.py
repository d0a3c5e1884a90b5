"""Vendor dashboard endpoint."""

from fastapi import APIRouter

from kirana.api.deps import DatabaseSession, VendorContext
from kirana.api.errors import to_http_exception
from kirana.core.errors import KiranaError
from kirana.schemas.dashboard import DashboardResponse
from kirana.services.dashboard.service import DashboardService

router = APIRouter(prefix="/vendor/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse, summary="Vendor dashboard")
async def get_dashboard(context: VendorContext, db: DatabaseSession) -> DashboardResponse:
    try:
        dashboard = await DashboardService(db).get_dashboard(context.account_id)
        return DashboardResponse(**dashboard)
    except KiranaError as e:
        raise to_http_exception(e)
