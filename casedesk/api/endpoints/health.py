"""
Health check endpoints.
"""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from casedesk.core.config import settings
from casedesk.core.dependencies import DBSession

router = APIRouter()


@router.get("")
async def health_check() -> dict:
    """Liveness: the process is up."""
    return {
        "status": "healthy",
        "version": settings.VERSION,
    }


@router.get("/ready")
async def readiness_check(db: DBSession):
    """Readiness: the database answers."""
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "checks": {"database": "error"}},
        )

    return {
        "status": "ready",
        "checks": {"database": "ok"},
    }
