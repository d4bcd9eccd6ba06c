"""
User repository.

Not tenant-scoped: login and platform administration look users up
across firms, so callers add the firm filter themselves.
"""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.user import User, UserRole
from casedesk.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def search(
        self,
        law_firm_id: UUID | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[User], int]:
        criteria = []
        if law_firm_id is not None:
            criteria.append(User.law_firm_id == law_firm_id)
        if role is not None:
            criteria.append(User.role == role)
        if is_active is not None:
            criteria.append(User.is_active == is_active)
        if search:
            term = f"%{search}%"
            criteria.append(or_(User.full_name.ilike(term), User.email.ilike(term)))

        users = await self.find(
            *criteria,
            order_by=(User.full_name,),
            skip=skip,
            limit=limit,
        )
        return users, await self.count(*criteria)

    async def count_by_role(self, law_firm_id: UUID) -> dict[UserRole, int]:
        result = await self.db.execute(
            select(User.role, func.count())
            .where(User.law_firm_id == law_firm_id, User.is_active.is_(True))
            .group_by(User.role)
        )
        return {row[0]: row[1] for row in result.all()}

    async def get_in_firm(self, user_id: UUID, law_firm_id: UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id, User.law_firm_id == law_firm_id)
        )
        return result.scalar_one_or_none()
