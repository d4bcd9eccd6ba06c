"""
Law firm repository.
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.models.case import Case
from casedesk.models.law_firm import LawFirm
from casedesk.models.user import User
from casedesk.repositories.base import BaseRepository


class LawFirmRepository(BaseRepository[LawFirm]):
    def __init__(self, db: AsyncSession):
        super().__init__(LawFirm, db)

    async def get_by_name(self, name: str) -> LawFirm | None:
        result = await self.db.execute(
            select(LawFirm).where(func.lower(LawFirm.name) == name.lower())
        )
        return result.scalars().first()

    async def member_counts(self, firm_ids: list[UUID]) -> dict[UUID, int]:
        if not firm_ids:
            return {}
        result = await self.db.execute(
            select(User.law_firm_id, func.count())
            .where(User.law_firm_id.in_(firm_ids), User.is_active.is_(True))
            .group_by(User.law_firm_id)
        )
        return {row[0]: row[1] for row in result.all()}

    async def case_counts(self, firm_ids: list[UUID]) -> dict[UUID, int]:
        if not firm_ids:
            return {}
        result = await self.db.execute(
            select(Case.law_firm_id, func.count())
            .where(Case.law_firm_id.in_(firm_ids))
            .group_by(Case.law_firm_id)
        )
        return {row[0]: row[1] for row in result.all()}
