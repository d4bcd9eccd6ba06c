"""
Statistics and dashboard composition.

Read-only: every figure is a count or sum computed in SQL for the
caller's firm.
"""

from datetime import timedelta
from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import ResourceNotFoundError, ValidationError
from casedesk.core.permissions import AccessScope
from casedesk.core.storage import MB
from casedesk.db.base import utcnow
from casedesk.models.case import OPEN_CASE_STATUSES, Case, CaseStatus
from casedesk.models.client import Client, ClientStatus
from casedesk.models.document import Document
from casedesk.models.invoice import OUTSTANDING_STATUSES, InvoiceStatus
from casedesk.models.user import User, UserRole
from casedesk.repositories.case_repository import CaseRepository
from casedesk.repositories.client_repository import ClientRepository
from casedesk.repositories.document_repository import DocumentRepository
from casedesk.repositories.event_repository import EventRepository
from casedesk.repositories.invoice_repository import InvoiceRepository
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.case import CaseResponse
from casedesk.schemas.document import DocumentResponse
from casedesk.schemas.event import EventResponse
from casedesk.schemas.invoice import InvoiceResponse
from casedesk.schemas.stats import ClientStats, LawFirmStats, StaffDashboard, UserStats
from casedesk.services.case_service import CaseService
from casedesk.services.event_service import EventService, day_bounds
from casedesk.services.law_firm_service import LawFirmService
from casedesk.services.user_service import UserService

logger = structlog.get_logger()

BILLED_STATUSES = (InvoiceStatus.PENDING, InvoiceStatus.PAID, InvoiceStatus.OVERDUE)
DASHBOARD_LIST_SIZE = 5


class StatsService:
    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope

    async def law_firm_stats(self, law_firm_id: UUID) -> LawFirmStats:
        if not self._scope.is_platform_admin:
            self._scope.require_staff("view firm statistics")
        firm = await LawFirmService(self._db, self._scope).get(law_firm_id)

        cases = CaseRepository(self._db, firm.id)
        invoices = InvoiceRepository(self._db, firm.id)

        status_counts = await cases.status_counts()
        role_counts = await UserRepository(self._db).count_by_role(firm.id)
        invoice_counts = await invoices.count_by_status()
        total_bytes = await DocumentRepository(self._db, firm.id).total_bytes()
        active_clients = await ClientRepository(self._db, firm.id).count(
            Client.status == ClientStatus.ACTIVE
        )

        return LawFirmStats(
            law_firm_id=firm.id,
            member_count=sum(role_counts.values()),
            case_count=sum(status_counts.values()),
            storage_used_mb=round(total_bytes / MB, 2),
            active_cases=status_counts.get(CaseStatus.ACTIVE, 0),
            closed_cases=status_counts.get(CaseStatus.CLOSED, 0) + status_counts.get(CaseStatus.ARCHIVED, 0),
            high_priority_cases=await cases.count_high_priority_open(),
            associate_count=role_counts.get(UserRole.ASSOCIATE, 0),
            admin_count=role_counts.get(UserRole.ADMIN, 0),
            active_clients=active_clients,
            paid_invoices=invoice_counts.get(InvoiceStatus.PAID, 0),
            pending_invoices=sum(invoice_counts.get(s, 0) for s in OUTSTANDING_STATUSES),
            total_revenue=await invoices.sum_amount((InvoiceStatus.PAID,)),
        )

    async def user_stats(self, user_id: UUID) -> UserStats:
        """Workload of one user: assigned open cases, uploads, events and deadlines."""
        user: User = await UserService(self._db, self._scope).get(user_id)
        if user.law_firm_id is None:
            return UserStats(
                user_id=user.id,
                assigned_cases=0,
                total_documents=0,
                upcoming_events=0,
                todays_events=0,
                deadlines=0,
            )

        cases = CaseRepository(self._db, user.law_firm_id)
        events = EventRepository(self._db, user.law_firm_id)
        now = utcnow()
        today_start, today_end = day_bounds(now)

        deadlines = await cases.upcoming_deadlines(
            settings.UPCOMING_DEADLINE_DAYS,
            assigned_to_user_id=user.id,
            limit=None,
        )
        return UserStats(
            user_id=user.id,
            assigned_cases=await cases.count(
                Case.assigned_to_user_id == user.id,
                Case.status.in_(OPEN_CASE_STATUSES),
            ),
            total_documents=await DocumentRepository(self._db, user.law_firm_id).count(
                Document.uploaded_by_user_id == user.id
            ),
            upcoming_events=await events.count_between(
                now,
                now + timedelta(days=settings.UPCOMING_EVENT_DAYS),
                assigned_to_user_id=user.id,
            ),
            todays_events=await events.count_between(today_start, today_end, assigned_to_user_id=user.id),
            deadlines=len(deadlines),
        )

    async def client_stats(self, client_id: UUID | None = None) -> ClientStats:
        """
        Client portal summary.

        Client accounts always get their own figures; staff pass the
        client they are looking at.
        """
        law_firm_id = self._scope.require_law_firm()
        if self._scope.is_client:
            client_id = self._scope.client_id
            if client_id is None:
                return ClientStats(
                    client_id=None,
                    total_cases=0,
                    active_cases=0,
                    completed_cases=0,
                    total_documents=0,
                    pending_documents=0,
                    outstanding_balance=Decimal("0.00"),
                    total_billed=Decimal("0.00"),
                )
        else:
            self._scope.require_staff("view client statistics")
            if client_id is None:
                raise ValidationError("client_id is required", field="client_id")

        client = await ClientRepository(self._db, law_firm_id).get_by_id(client_id)
        if client is None:
            raise ResourceNotFoundError("Client", client_id)

        cases = CaseRepository(self._db, law_firm_id)
        documents = DocumentRepository(self._db, law_firm_id)
        invoices = InvoiceRepository(self._db, law_firm_id)

        case_ids = cases.client_case_ids(client.id)
        if client.user_account_id is not None:
            document_scope = DocumentRepository.visible_to_client(case_ids, client.user_account_id)
        else:
            document_scope = Document.case_id.in_(case_ids)

        status_counts = await cases.status_counts(client_id=client.id)
        return ClientStats(
            client_id=client.id,
            total_cases=sum(status_counts.values()),
            active_cases=sum(status_counts.get(s, 0) for s in OPEN_CASE_STATUSES),
            completed_cases=await cases.count_closed(client_id=client.id),
            total_documents=await documents.count(document_scope),
            pending_documents=await documents.count_pending(document_scope),
            outstanding_balance=await invoices.sum_amount(OUTSTANDING_STATUSES, client_id=client.id),
            total_billed=await invoices.sum_amount(BILLED_STATUSES, client_id=client.id),
        )

    async def dashboard(self) -> StaffDashboard:
        """Everything the staff dashboard shows, in one response."""
        self._scope.require_staff("view the dashboard")
        law_firm_id = self._scope.require_law_firm()

        firm = await LawFirmService(self._db, self._scope).get_response(law_firm_id)
        stats = await self.law_firm_stats(law_firm_id)

        recent_cases = await CaseRepository(self._db, law_firm_id).find(
            order_by=(Case.created_at.desc(),),
            limit=DASHBOARD_LIST_SIZE,
        )
        recent_documents = await DocumentRepository(self._db, law_firm_id).find(
            order_by=(Document.uploaded_at.desc(),),
            limit=DASHBOARD_LIST_SIZE,
        )
        pending_invoices = await InvoiceRepository(self._db, law_firm_id).outstanding(DASHBOARD_LIST_SIZE)

        events = EventService(self._db, self._scope)
        deadlines = await CaseService(self._db, self._scope).upcoming_deadlines(limit=DASHBOARD_LIST_SIZE)

        return StaffDashboard(
            law_firm=firm,
            stats=stats,
            recent_cases=[CaseResponse.model_validate(c) for c in recent_cases],
            upcoming_deadlines=deadlines,
            recent_documents=[DocumentResponse.model_validate(d) for d in recent_documents],
            pending_invoices=[InvoiceResponse.model_validate(i) for i in pending_invoices],
            todays_events=[EventResponse.model_validate(e) for e in await events.today()],
            upcoming_events=[EventResponse.model_validate(e) for e in await events.upcoming()],
        )
