"""
Generic CRUD repositories.
"""

import re
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import ResourceAlreadyExistsError
from casedesk.db.base import Base, MultiTenantBase

ModelType = TypeVar("ModelType", bound=Base)


def is_unique_violation(error: IntegrityError) -> bool:
    message = str(error.orig).lower()
    return "unique" in message or "duplicate key" in message


@asynccontextmanager
async def unique_conflicts(db: AsyncSession, resource_type: str) -> AsyncIterator[None]:
    """
    Turn a unique constraint violation raised inside the block into a
    conflict error, after rolling the session back.

    Services check uniqueness before writing; this catches the concurrent
    write that slips in between the check and the flush.
    """
    try:
        yield
    except IntegrityError as e:
        await db.rollback()
        if not is_unique_violation(e):
            raise
        raise ResourceAlreadyExistsError(resource_type) from e


async def commit_or_conflict(db: AsyncSession, resource_type: str) -> None:
    async with unique_conflicts(db, resource_type):
        await db.commit()


class BaseRepository(Generic[ModelType]):
    """
    CRUD over one model.

    Usage:
        class LawFirmRepository(BaseRepository[LawFirm]):
            def __init__(self, db: AsyncSession):
                super().__init__(LawFirm, db)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def resource_name(self) -> str:
        """``LawFirm`` -> ``Law firm``, as used in error messages."""
        return re.sub(r"(?<!^)(?=[A-Z])", " ", self.model.__name__).capitalize()

    def _scope(self) -> list[ColumnElement[bool]]:
        """Criteria applied to every query issued by this repository."""
        return []

    def query(self, *criteria: ColumnElement[bool]) -> Select:
        return select(self.model).where(*self._scope(), *criteria)

    async def get_by_id(self, id: UUID) -> ModelType | None:
        result = await self.db.execute(self.query(self.model.id == id))
        return result.scalar_one_or_none()

    async def find(
        self,
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        skip: int = 0,
        limit: int | None = 100,
    ) -> list[ModelType]:
        query = self.query(*criteria).order_by(*order_by).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, *criteria: ColumnElement[bool]) -> int:
        result = await self.db.execute(
            select(func.count())
            .select_from(self.model)
            .where(*self._scope(), *criteria)
        )
        return result.scalar_one()

    async def exists(self, *criteria: ColumnElement[bool]) -> bool:
        return await self.count(*criteria) > 0

    async def create(self, **kwargs: Any) -> ModelType:
        instance = self.model(**kwargs)
        self.db.add(instance)
        await commit_or_conflict(self.db, self.resource_name)
        await self.db.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Apply exactly the given values; callers decide what may be cleared."""
        for key, value in kwargs.items():
            setattr(instance, key, value)

        await commit_or_conflict(self.db, self.resource_name)
        await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        await self.db.delete(instance)
        await self.db.commit()

    async def soft_delete(self, instance: ModelType) -> ModelType:
        return await self.update(instance, is_active=False)


class MultiTenantRepository(BaseRepository[ModelType]):
    """
    Repository confined to a single law firm.

    Rows of other firms are invisible: lookups return None and lists
    never include them.
    """

    def __init__(
        self,
        model: type[ModelType],
        db: AsyncSession,
        law_firm_id: UUID,
    ):
        super().__init__(model, db)
        self.law_firm_id = law_firm_id

    def _scope(self) -> list[ColumnElement[bool]]:
        if not issubclass(self.model, MultiTenantBase):
            return []
        return [self.model.law_firm_id == self.law_firm_id]

    async def create(self, **kwargs: Any) -> ModelType:
        if issubclass(self.model, MultiTenantBase):
            kwargs["law_firm_id"] = self.law_firm_id
        return await super().create(**kwargs)
