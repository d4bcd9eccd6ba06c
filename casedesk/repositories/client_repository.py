"""
Client repository.
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.client import Client, ClientStatus
from casedesk.repositories.base import MultiTenantRepository


class ClientRepository(MultiTenantRepository[Client]):
    def __init__(self, db: AsyncSession, law_firm_id: UUID):
        super().__init__(Client, db, law_firm_id)

    async def get_by_email(self, email: str) -> Client | None:
        result = await self.db.execute(
            self.query(func.lower(Client.email) == email.lower())
        )
        return result.scalars().first()

    async def get_by_user_account(self, user_id: UUID) -> Client | None:
        result = await self.db.execute(self.query(Client.user_account_id == user_id))
        return result.scalar_one_or_none()

    async def search(
        self,
        status: ClientStatus | None = None,
        search: str | None = None,
        assigned_associate_id: UUID | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[Client], int]:
        criteria = []
        if status is not None:
            criteria.append(Client.status == status)
        if assigned_associate_id is not None:
            criteria.append(Client.assigned_associate_id == assigned_associate_id)
        if search:
            term = f"%{search}%"
            criteria.append(
                or_(
                    Client.name.ilike(term),
                    Client.email.ilike(term),
                    Client.company.ilike(term),
                )
            )

        clients = await self.find(*criteria, order_by=(Client.name,), skip=skip, limit=limit)
        return clients, await self.count(*criteria)


async def find_client_for_user(db: AsyncSession, user_id: UUID) -> Client | None:
    """The client record a client-role user signs in as, in any firm."""
    result = await db.execute(select(Client).where(Client.user_account_id == user_id))
    return result.scalar_one_or_none()
