"""
Main API router.

Aggregates every route, grouped by domain.
"""

from fastapi import APIRouter

from casedesk.api.endpoints import (
    auth,
    cases,
    clients,
    documents,
    events,
    health,
    invoices,
    law_firms,
    notes,
    stats,
    users,
)
from casedesk.schemas.base import ErrorResponse

ERROR_RESPONSES = {
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Resource already exists"},
}

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["Health"])

# Authentication and onboarding
api_router.include_router(auth.router, responses=ERROR_RESPONSES)

# Tenants and team
api_router.include_router(law_firms.router, responses=ERROR_RESPONSES)
api_router.include_router(users.router, responses=ERROR_RESPONSES)

# Clients and cases
api_router.include_router(clients.router, responses=ERROR_RESPONSES)
api_router.include_router(cases.router, responses=ERROR_RESPONSES)

# Documents and notes
api_router.include_router(documents.router, responses=ERROR_RESPONSES)
api_router.include_router(notes.router, responses=ERROR_RESPONSES)

# Billing
api_router.include_router(invoices.router, responses=ERROR_RESPONSES)

# Calendar
api_router.include_router(events.router, responses=ERROR_RESPONSES)

# Statistics
api_router.include_router(stats.router, responses=ERROR_RESPONSES)
api_router.include_router(stats.dashboard_router, responses=ERROR_RESPONSES)
