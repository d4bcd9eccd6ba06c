"""
Typed data-access classes, one per API entity.

Portals share these classes and express their differences through filter
arguments. ``CaseDeskApi`` bundles them around a single ``ApiClient``.
"""

import mimetypes
from datetime import date
from pathlib import Path
from typing import Any
from uuid import UUID

import httpx

from casedesk.client.http import ApiClient, ApiResult
from casedesk.client.session import SessionStore
from casedesk.client.uploads import (
    DOCUMENT_MAX_SIZE_MB,
    PAYMENT_PROOF_MAX_SIZE_MB,
    validate_upload,
)


class Resource:
    """CRUD calls against one collection path."""

    path: str = ""

    def __init__(self, client: ApiClient):
        self.client = client

    def _item(self, item_id: UUID | str) -> str:
        return f"{self.path}/{item_id}"

    async def list(self, **filters: Any) -> ApiResult:
        return await self.client.get(self.path, **filters)

    async def get(self, item_id: UUID | str) -> ApiResult:
        return await self.client.get(self._item(item_id))

    async def create(self, payload: dict[str, Any]) -> ApiResult:
        return await self.client.post(self.path, payload)

    async def update(self, item_id: UUID | str, changes: dict[str, Any]) -> ApiResult:
        return await self.client.put(self._item(item_id), changes)

    async def delete(self, item_id: UUID | str) -> ApiResult:
        return await self.client.delete(self._item(item_id))


class AuthApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def login(self, email: str, password: str, remember_me: bool = False) -> ApiResult:
        """Log in and persist the token plus user in the session store."""
        result = await self.client.post("/api/auth/login", {"email": email, "password": password})
        if result.ok:
            self.client.session.save(
                token=result.data["access_token"],
                user=result.data["user"],
                remember_me=remember_me,
                email=email,
            )
        return result

    async def onboard(self, payload: dict[str, Any]) -> ApiResult:
        """Create a law firm with its first admin and start a session as that admin."""
        result = await self.client.post("/api/auth/onboarding", payload)
        if result.ok:
            self.client.session.save(token=result.data["access_token"])
            me = await self.me()
            if me.ok:
                self.client.session.update_user(me.data)
        return result

    async def me(self) -> ApiResult:
        return await self.client.get("/api/auth/me")

    async def update_me(self, changes: dict[str, Any]) -> ApiResult:
        result = await self.client.put("/api/auth/me", changes)
        if result.ok:
            self.client.session.update_user(result.data)
        return result

    async def change_password(self, current_password: str, new_password: str) -> ApiResult:
        return await self.client.post(
            "/api/auth/change-password",
            {"current_password": current_password, "new_password": new_password},
        )

    async def register(self, payload: dict[str, Any]) -> ApiResult:
        return await self.client.post("/api/auth/register", payload)

    def logout(self) -> None:
        self.client.session.invalidate()


class UserApi(Resource):
    path = "/api/users"


class LawFirmApi(Resource):
    path = "/api/law-firms"


class ClientApi(Resource):
    path = "/api/clients"


class CaseApi(Resource):
    path = "/api/cases"

    async def upcoming_deadlines(self, **filters: Any) -> ApiResult:
        return await self.client.get(f"{self.path}/upcoming-deadlines", **filters)

    async def activities(self, case_id: UUID | str) -> ApiResult:
        return await self.client.get(f"{self._item(case_id)}/activities")

    async def events(self, case_id: UUID | str) -> ApiResult:
        return await self.client.get(f"{self._item(case_id)}/events")


class DocumentApi(Resource):
    path = "/api/documents"

    async def upload(
        self,
        file_name: str,
        content: bytes,
        mime_type: str = "application/octet-stream",
        **fields: Any,
    ) -> ApiResult:
        """
        Upload a document as multipart form data.

        Oversized files are refused here without touching the network.
        """
        error = validate_upload(len(content), DOCUMENT_MAX_SIZE_MB)
        if error:
            return ApiResult(error=error)
        return await self.client.request(
            "POST",
            self.path,
            files={"file": (file_name, content, mime_type)},
            data=fields,
        )

    async def upload_path(self, path: str | Path, mime_type: str | None = None, **fields: Any) -> ApiResult:
        path = Path(path)
        error = validate_upload(path.stat().st_size, DOCUMENT_MAX_SIZE_MB)
        if error:
            return ApiResult(error=error)
        return await self.upload(
            path.name,
            path.read_bytes(),
            mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream",
            **fields,
        )

    async def download(self, document_id: UUID | str, fallback_name: str | None = None) -> ApiResult:
        return await self.client.download(
            f"{self._item(document_id)}/download",
            fallback_name=fallback_name or f"document-{document_id}",
        )


class NoteApi(Resource):
    path = "/api/notes"

    async def toggle_pin(self, note_id: UUID | str) -> ApiResult:
        return await self.client.post(f"{self._item(note_id)}/toggle-pin")

    async def toggle_archive(self, note_id: UUID | str) -> ApiResult:
        return await self.client.post(f"{self._item(note_id)}/toggle-archive")


class InvoiceApi(Resource):
    path = "/api/invoices"

    async def upload_payment_proof(
        self,
        invoice_id: UUID | str,
        file_name: str,
        content: bytes,
        mime_type: str = "application/octet-stream",
    ) -> ApiResult:
        error = validate_upload(len(content), PAYMENT_PROOF_MAX_SIZE_MB)
        if error:
            return ApiResult(error=error)
        return await self.client.request(
            "POST",
            f"{self._item(invoice_id)}/payment-proof",
            files={"file": (file_name, content, mime_type)},
        )

    async def review_payment(
        self,
        invoice_id: UUID | str,
        approved: bool,
        paid_date: date | None = None,
    ) -> ApiResult:
        return await self.client.post(
            f"{self._item(invoice_id)}/review-payment",
            {"approved": approved, "paid_date": paid_date},
        )


class EventApi(Resource):
    path = "/api/events"

    async def upcoming(self, days: int = 7, limit: int | None = None) -> ApiResult:
        return await self.client.get(f"{self.path}/upcoming", days=days, limit=limit)

    async def today(self) -> ApiResult:
        return await self.client.get(f"{self.path}/today")

    async def calendar(self, year: int, month: int) -> ApiResult:
        return await self.client.get(f"{self.path}/calendar/{year}/{month}")

    async def confirm(self, event_id: UUID | str) -> ApiResult:
        return await self.client.post(f"{self._item(event_id)}/confirm")


class StatsApi:
    def __init__(self, client: ApiClient):
        self.client = client

    async def law_firm(self, law_firm_id: UUID | str) -> ApiResult:
        return await self.client.get(f"/api/stats/law-firm/{law_firm_id}")

    async def user(self, user_id: UUID | str) -> ApiResult:
        return await self.client.get(f"/api/stats/user/{user_id}")

    async def client_portal(self, client_id: UUID | str | None = None) -> ApiResult:
        return await self.client.get("/api/stats/client", client_id=client_id)

    async def dashboard(self) -> ApiResult:
        return await self.client.get("/api/dashboard")


class CaseDeskApi:
    """Entry point for portals: one session, one HTTP client, every resource."""

    def __init__(
        self,
        base_url: str,
        session: SessionStore | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = ApiClient(base_url, session=session, timeout=timeout, transport=transport)
        self.auth = AuthApi(self.client)
        self.users = UserApi(self.client)
        self.law_firms = LawFirmApi(self.client)
        self.clients = ClientApi(self.client)
        self.cases = CaseApi(self.client)
        self.documents = DocumentApi(self.client)
        self.notes = NoteApi(self.client)
        self.invoices = InvoiceApi(self.client)
        self.events = EventApi(self.client)
        self.stats = StatsApi(self.client)

    @property
    def session(self) -> SessionStore:
        return self.client.session

    async def __aenter__(self) -> "CaseDeskApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.client.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()
