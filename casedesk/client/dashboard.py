"""
Portal dashboard composition.

Each loader issues its read queries concurrently and assembles the results.
A failed query leaves its section empty and records the error message.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from casedesk.client.http import ApiResult
from casedesk.client.resources import CaseDeskApi

RECENT_DOCUMENTS = 4
DASHBOARD_LIST_SIZE = 5


def _collect(results: list[ApiResult], errors: list[str], default: Any = None) -> list[Any]:
    values = []
    for result in results:
        if result.ok:
            values.append(result.data)
        else:
            errors.append(result.error)
            values.append(default)
    return values


@dataclass
class ClientPortalDashboard:
    stats: dict[str, Any] | None = None
    cases: list[dict[str, Any]] = field(default_factory=list)
    recent_documents: list[dict[str, Any]] = field(default_factory=list)
    invoices: list[dict[str, Any]] = field(default_factory=list)
    upcoming_events: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class AssociateDashboard:
    stats: dict[str, Any] | None = None
    upcoming_deadlines: list[dict[str, Any]] = field(default_factory=list)
    recent_documents: list[dict[str, Any]] = field(default_factory=list)
    todays_events: list[dict[str, Any]] = field(default_factory=list)
    upcoming_events: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class AdminDashboard:
    overview: dict[str, Any] | None = None
    team: list[dict[str, Any]] = field(default_factory=list)
    clients: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


async def load_client_dashboard(api: CaseDeskApi) -> ClientPortalDashboard:
    """Client portal: own stats, cases, latest documents, invoices and events."""
    results = await asyncio.gather(
        api.stats.client_portal(),
        api.cases.list(),
        api.documents.list(limit=RECENT_DOCUMENTS),
        api.invoices.list(),
        api.events.upcoming(limit=DASHBOARD_LIST_SIZE),
    )
    dashboard = ClientPortalDashboard()
    stats, cases, documents, invoices, events = _collect(list(results), dashboard.errors)
    dashboard.stats = stats
    dashboard.cases = cases or []
    dashboard.recent_documents = documents or []
    dashboard.invoices = invoices or []
    dashboard.upcoming_events = events or []
    return dashboard


async def load_associate_dashboard(api: CaseDeskApi, user_id: UUID | str) -> AssociateDashboard:
    results = await asyncio.gather(
        api.stats.user(user_id),
        api.cases.upcoming_deadlines(limit=DASHBOARD_LIST_SIZE),
        api.documents.list(limit=RECENT_DOCUMENTS),
        api.events.today(),
        api.events.upcoming(limit=DASHBOARD_LIST_SIZE),
    )
    dashboard = AssociateDashboard()
    stats, deadlines, documents, today, upcoming = _collect(list(results), dashboard.errors)
    dashboard.stats = stats
    dashboard.upcoming_deadlines = deadlines or []
    dashboard.recent_documents = documents or []
    dashboard.todays_events = today or []
    dashboard.upcoming_events = upcoming or []
    return dashboard


async def load_admin_dashboard(api: CaseDeskApi) -> AdminDashboard:
    """Firm admin: the server-side overview plus the team and client rosters."""
    results = await asyncio.gather(
        api.stats.dashboard(),
        api.users.list(limit=DASHBOARD_LIST_SIZE),
        api.clients.list(limit=DASHBOARD_LIST_SIZE),
    )
    dashboard = AdminDashboard()
    overview, team, clients = _collect(list(results), dashboard.errors)
    dashboard.overview = overview
    dashboard.team = team or []
    dashboard.clients = clients or []
    return dashboard
