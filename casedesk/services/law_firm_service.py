"""
Law firm (tenant) administration.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import (
    InsufficientPermissionsError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
)
from casedesk.core.permissions import AccessScope
from casedesk.models.law_firm import LawFirm
from casedesk.repositories.law_firm_repository import LawFirmRepository
from casedesk.schemas.base import changes
from casedesk.schemas.law_firm import LawFirmCreate, LawFirmResponse, LawFirmUpdate

logger = structlog.get_logger()

CLEARABLE_FIELDS = (
    "email",
    "phone",
    "website",
    "address",
    "city",
    "country",
    "logo_url",
    "description",
)


class LawFirmService:
    """
    Platform administrators manage every firm; everyone else only sees
    their own, and firm admins may edit it.
    """

    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._repo = LawFirmRepository(db)

    async def _with_counts(self, firms: list[LawFirm]) -> list[LawFirmResponse]:
        ids = [firm.id for firm in firms]
        members = await self._repo.member_counts(ids)
        cases = await self._repo.case_counts(ids)
        return [
            LawFirmResponse.model_validate(firm).model_copy(
                update={
                    "member_count": members.get(firm.id, 0),
                    "case_count": cases.get(firm.id, 0),
                }
            )
            for firm in firms
        ]

    async def get(self, law_firm_id: UUID) -> LawFirm:
        if not self._scope.is_platform_admin and law_firm_id != self._scope.law_firm_id:
            raise ResourceNotFoundError("Law firm", law_firm_id)

        firm = await self._repo.get_by_id(law_firm_id)
        if firm is None:
            raise ResourceNotFoundError("Law firm", law_firm_id)
        return firm

    async def get_response(self, law_firm_id: UUID) -> LawFirmResponse:
        firm = await self.get(law_firm_id)
        return (await self._with_counts([firm]))[0]

    async def list_firms(
        self,
        skip: int = 0,
        limit: int = 100,
        is_active: bool | None = None,
    ) -> tuple[list[LawFirmResponse], int]:
        if not self._scope.is_platform_admin:
            if self._scope.law_firm_id is None:
                return [], 0
            return [await self.get_response(self._scope.law_firm_id)], 1

        criteria = []
        if is_active is not None:
            criteria.append(LawFirm.is_active == is_active)
        firms = await self._repo.find(*criteria, order_by=(LawFirm.name,), skip=skip, limit=limit)
        total = await self._repo.count(*criteria)
        return await self._with_counts(firms), total

    async def create(self, data: LawFirmCreate) -> LawFirmResponse:
        self._scope.require_platform_admin("create law firms")

        if await self._repo.get_by_name(data.name):
            raise ResourceAlreadyExistsError("Law firm", "name", data.name)

        firm = await self._repo.create(**data.model_dump())
        logger.info("law firm created", law_firm_id=str(firm.id), name=firm.name)
        return (await self._with_counts([firm]))[0]

    async def update(self, law_firm_id: UUID, data: LawFirmUpdate) -> LawFirmResponse:
        firm = await self.get(law_firm_id)

        if not (self._scope.is_platform_admin or self._scope.is_firm_admin):
            raise InsufficientPermissionsError("update the law firm")

        values = changes(data, clearable=CLEARABLE_FIELDS)
        if "is_active" in values and not self._scope.is_platform_admin:
            raise InsufficientPermissionsError("activate or deactivate law firms")

        if "name" in values and values["name"].lower() != firm.name.lower():
            existing = await self._repo.get_by_name(values["name"])
            if existing and existing.id != firm.id:
                raise ResourceAlreadyExistsError("Law firm", "name", values["name"])

        firm = await self._repo.update(firm, **values)
        logger.info("law firm updated", law_firm_id=str(firm.id), fields=list(values))
        return (await self._with_counts([firm]))[0]

    async def deactivate(self, law_firm_id: UUID) -> LawFirmResponse:
        self._scope.require_platform_admin("deactivate law firms")
        firm = await self.get(law_firm_id)

        firm = await self._repo.soft_delete(firm)
        logger.info("law firm deactivated", law_firm_id=str(firm.id))
        return (await self._with_counts([firm]))[0]
