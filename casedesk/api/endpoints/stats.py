"""
Statistics and dashboard endpoints.
"""

from uuid import UUID

from fastapi import APIRouter

from casedesk.core.dependencies import DBSession, Scope
from casedesk.schemas.base import APIResponse
from casedesk.schemas.stats import ClientStats, LawFirmStats, StaffDashboard, UserStats
from casedesk.services.stats_service import StatsService

router = APIRouter(prefix="/stats", tags=["Stats"])
dashboard_router = APIRouter(prefix="/dashboard", tags=["Stats"])


@router.get("/law-firm/{law_firm_id}", response_model=APIResponse[LawFirmStats])
async def law_firm_stats(law_firm_id: UUID, db: DBSession, scope: Scope):
    stats = await StatsService(db, scope).law_firm_stats(law_firm_id)
    return APIResponse(success=True, data=stats)


@router.get("/user/{user_id}", response_model=APIResponse[UserStats])
async def user_stats(user_id: UUID, db: DBSession, scope: Scope):
    stats = await StatsService(db, scope).user_stats(user_id)
    return APIResponse(success=True, data=stats)


@router.get("/client", response_model=APIResponse[ClientStats])
async def client_stats(db: DBSession, scope: Scope, client_id: UUID | None = None):
    """Client portal summary; staff pass ``client_id``."""
    stats = await StatsService(db, scope).client_stats(client_id)
    return APIResponse(success=True, data=stats)


@dashboard_router.get("", response_model=APIResponse[StaffDashboard])
async def staff_dashboard(db: DBSession, scope: Scope):
    dashboard = await StatsService(db, scope).dashboard()
    return APIResponse(success=True, data=dashboard)
