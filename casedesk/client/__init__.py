"""
Python client for the CaseDesk API, shared by the attorney, client and
admin portals.
"""

from casedesk.client.dashboard import (
    AdminDashboard,
    AssociateDashboard,
    ClientPortalDashboard,
    load_admin_dashboard,
    load_associate_dashboard,
    load_client_dashboard,
)
from casedesk.client.http import NETWORK_ERROR, ApiClient, ApiResult, DownloadedFile
from casedesk.client.resources import CaseDeskApi
from casedesk.client.session import Session, SessionStore
from casedesk.client.state import CaseListState
from casedesk.client.uploads import filename_from_content_disposition, preview_mode, validate_upload

__all__ = [
    "AdminDashboard",
    "ApiClient",
    "ApiResult",
    "AssociateDashboard",
    "CaseDeskApi",
    "CaseListState",
    "ClientPortalDashboard",
    "DownloadedFile",
    "NETWORK_ERROR",
    "Session",
    "SessionStore",
    "filename_from_content_disposition",
    "load_admin_dashboard",
    "load_associate_dashboard",
    "load_client_dashboard",
    "preview_mode",
    "validate_upload",
]
