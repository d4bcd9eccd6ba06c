"""
Client records of a law firm.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import ResourceAlreadyExistsError, ResourceNotFoundError
from casedesk.core.permissions import AccessScope
from casedesk.models.client import Client, ClientStatus
from casedesk.repositories.client_repository import ClientRepository
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.base import changes
from casedesk.schemas.client import ClientCreate, ClientUpdate

logger = structlog.get_logger()


class ClientService:
    """
    Staff manage the firm's clients; a client account can only read its
    own record.
    """

    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._law_firm_id = scope.require_law_firm()
        self._repo = ClientRepository(db, self._law_firm_id)

    async def _check_associate(self, user_id: UUID | None) -> None:
        if user_id is None:
            return
        if await UserRepository(self._db).get_in_firm(user_id, self._law_firm_id) is None:
            raise ResourceNotFoundError("User", user_id)

    async def _ensure_unique_email(self, email: str | None, client_id: UUID | None = None) -> None:
        if not email:
            return
        existing = await self._repo.get_by_email(email)
        if existing and existing.id != client_id:
            raise ResourceAlreadyExistsError("Client", "email", email)

    async def get(self, client_id: UUID) -> Client:
        if self._scope.is_client and client_id != self._scope.client_id:
            raise ResourceNotFoundError("Client", client_id)

        client = await self._repo.get_by_id(client_id)
        if client is None:
            raise ResourceNotFoundError("Client", client_id)
        return client

    async def list_clients(
        self,
        status: ClientStatus | None = None,
        search: str | None = None,
        assigned_associate_id: UUID | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Client], int]:
        self._scope.require_staff("list clients")
        return await self._repo.search(
            status=status,
            search=search,
            assigned_associate_id=assigned_associate_id,
            skip=skip,
            limit=limit,
        )

    async def create(self, data: ClientCreate) -> Client:
        self._scope.require_editor("create clients")
        await self._ensure_unique_email(data.email)
        await self._check_associate(data.assigned_associate_id)

        client = await self._repo.create(**data.model_dump())
        logger.info("client created", client_id=str(client.id), law_firm_id=str(self._law_firm_id))
        return client

    async def update(self, client_id: UUID, data: ClientUpdate) -> Client:
        self._scope.require_editor("update clients")
        client = await self.get(client_id)

        values = changes(
            data,
            clearable=("email", "phone", "company", "address", "assigned_associate_id"),
        )
        await self._ensure_unique_email(values.get("email"), client.id)
        await self._check_associate(values.get("assigned_associate_id"))

        client = await self._repo.update(client, **values)
        logger.info("client updated", client_id=str(client.id), fields=list(values))
        return client

    async def deactivate(self, client_id: UUID) -> Client:
        self._scope.require_editor("deactivate clients")
        client = await self.get(client_id)

        client = await self._repo.update(client, status=ClientStatus.INACTIVE)
        logger.info("client deactivated", client_id=str(client.id))
        return client
