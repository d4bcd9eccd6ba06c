"""
Case service.

Cases are scoped to the caller's firm; client accounts only see the
cases where their client record is the client. Every change is written
to the case's activity feed.
"""

from datetime import date
from typing import Any
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import ResourceAlreadyExistsError, ResourceNotFoundError
from casedesk.core.permissions import AccessScope
from casedesk.models.case import Case, CaseActivity, CasePriority, CaseStatus
from casedesk.repositories.case_repository import CaseActivityRepository, CaseRepository
from casedesk.repositories.client_repository import ClientRepository
from casedesk.repositories.document_repository import DocumentRepository
from casedesk.repositories.note_repository import CaseNoteReader
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.base import changes
from casedesk.schemas.case import (
    CaseActivityResponse,
    CaseCreate,
    CaseDetailResponse,
    CaseUpdate,
    UpcomingDeadline,
)
from casedesk.schemas.document import DocumentResponse
from casedesk.schemas.note import NoteResponse

logger = structlog.get_logger()

CLEARABLE_FIELDS = ("description", "assigned_to_user_id", "deadline")

FIELD_LABELS = {
    "case_number": "case number",
    "file_number": "file number",
    "case_type": "case type",
    "client_id": "client",
    "assigned_to_user_id": "assignee",
    "date_opened": "date opened",
}


def _label(value: Any) -> str:
    return getattr(value, "value", None) or str(value)


def describe_changes(case: Case, values: dict[str, Any]) -> str | None:
    """
    Human readable summary of an update, or None when nothing changed.

    Status changes are spelled out; other fields are listed by name.
    """
    changed = [key for key, value in values.items() if getattr(case, key) != value]
    if not changed:
        return None

    parts = []
    if "status" in changed:
        parts.append(f"Status changed from {_label(case.status)} to {_label(values['status'])}")
        changed.remove("status")
    if "priority" in changed:
        parts.append(f"Priority changed from {_label(case.priority)} to {_label(values['priority'])}")
        changed.remove("priority")
    if changed:
        parts.append("Updated " + ", ".join(FIELD_LABELS.get(key, key) for key in changed))
    return "; ".join(parts)


class CaseService:
    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._law_firm_id = scope.require_law_firm()
        self._repo = CaseRepository(db, self._law_firm_id)
        self._activity_repo = CaseActivityRepository(db, self._law_firm_id)

    # === Scoping helpers ===

    async def _check_client(self, client_id: UUID) -> None:
        client = await ClientRepository(self._db, self._law_firm_id).get_by_id(client_id)
        if client is None:
            raise ResourceNotFoundError("Client", client_id)

    async def _check_assignee(self, user_id: UUID | None) -> None:
        if user_id is None:
            return
        if await UserRepository(self._db).get_in_firm(user_id, self._law_firm_id) is None:
            raise ResourceNotFoundError("User", user_id)

    async def _ensure_unique(self, case_number: str | None, file_number: str | None, case_id: UUID | None = None):
        others = [Case.id != case_id] if case_id else []
        if case_number and await self._repo.exists(Case.case_number == case_number, *others):
            raise ResourceAlreadyExistsError("Case", "case_number", case_number)
        if file_number and await self._repo.exists(Case.file_number == file_number, *others):
            raise ResourceAlreadyExistsError("Case", "file_number", file_number)

    # === Reads ===

    async def get(self, case_id: UUID) -> Case:
        case = await self._repo.get_by_id(case_id)
        if case is None:
            raise ResourceNotFoundError("Case", case_id)
        if self._scope.is_client and case.client_id != self._scope.client_id:
            raise ResourceNotFoundError("Case", case_id)
        return case

    async def get_detail(self, case_id: UUID) -> CaseDetailResponse:
        """The case with its documents, the notes the caller may see and its activity."""
        case = await self.get(case_id)
        documents = await DocumentRepository(self._db, self._law_firm_id).get_by_case(case.id)
        notes = await CaseNoteReader(self._db, self._scope.user_id).get_by_case(case.id)
        activities = await self._activity_repo.get_by_case(case.id)

        return CaseDetailResponse.model_validate(case).model_copy(
            update={
                "documents": [DocumentResponse.model_validate(d) for d in documents],
                "notes": [NoteResponse.model_validate(n) for n in notes],
                "activities": [CaseActivityResponse.model_validate(a) for a in activities],
            }
        )

    async def list_cases(
        self,
        status: CaseStatus | None = None,
        priority: CasePriority | None = None,
        search: str | None = None,
        client_id: UUID | None = None,
        assigned_to_user_id: UUID | None = None,
        deadline_from: date | None = None,
        deadline_to: date | None = None,
        order: str = "date_opened",
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Case], int]:
        if self._scope.is_client:
            if self._scope.client_id is None:
                return [], 0
            client_id = self._scope.client_id

        return await self._repo.search(
            client_id=client_id,
            status=status,
            priority=priority,
            assigned_to_user_id=assigned_to_user_id,
            search=search,
            deadline_from=deadline_from,
            deadline_to=deadline_to,
            order=order,
            skip=skip,
            limit=limit,
        )

    async def upcoming_deadlines(
        self,
        days: int | None = None,
        assigned_to_user_id: UUID | None = None,
        limit: int = 10,
    ) -> list[UpcomingDeadline]:
        client_id = None
        if self._scope.is_client:
            if self._scope.client_id is None:
                return []
            client_id = self._scope.client_id

        cases = await self._repo.upcoming_deadlines(
            days or settings.UPCOMING_DEADLINE_DAYS,
            client_id=client_id,
            assigned_to_user_id=assigned_to_user_id,
            limit=limit,
        )
        return [
            UpcomingDeadline(
                case_id=case.id,
                case_number=case.case_number,
                title=case.title,
                deadline=case.deadline,
                days_left=case.days_left,
                urgency=case.deadline_urgency,
                priority=case.priority,
            )
            for case in cases
        ]

    async def activities(self, case_id: UUID, limit: int = 50) -> list[CaseActivity]:
        case = await self.get(case_id)
        return await self._activity_repo.get_by_case(case.id, limit)

    # === Writes ===

    async def create(self, data: CaseCreate) -> Case:
        self._scope.require_editor("create cases")
        await self._ensure_unique(data.case_number, data.file_number)
        await self._check_client(data.client_id)
        await self._check_assignee(data.assigned_to_user_id)

        values = data.model_dump(exclude_none=True)
        case = await self._repo.create(**values, added_by_user_id=self._scope.user_id)

        self._activity_repo.add(case.id, self._scope.user_id, "created", f"Case {case.case_number} opened")
        await self._db.commit()
        await self._db.refresh(case)

        logger.info(
            "case created",
            case_id=str(case.id),
            case_number=case.case_number,
            law_firm_id=str(self._law_firm_id),
        )
        return case

    async def update(self, case_id: UUID, data: CaseUpdate) -> Case:
        """Partial merge: fields the caller did not send keep their value."""
        self._scope.require_editor("update cases")
        case = await self.get(case_id)

        values = changes(data, clearable=CLEARABLE_FIELDS)
        await self._ensure_unique(values.get("case_number"), values.get("file_number"), case.id)
        if "client_id" in values:
            await self._check_client(values["client_id"])
        await self._check_assignee(values.get("assigned_to_user_id"))

        description = describe_changes(case, values)
        if description:
            action = "status_changed" if "Status changed" in description else "updated"
            self._activity_repo.add(case.id, self._scope.user_id, action, description)

        case = await self._repo.update(case, **values)
        logger.info("case updated", case_id=str(case.id), fields=list(values))
        return case

    async def delete(self, case_id: UUID) -> None:
        self._scope.require_editor("delete cases")
        case = await self.get(case_id)

        await self._repo.delete_case(case)
        logger.info("case deleted", case_id=str(case_id), deleted_by=str(self._scope.user_id))