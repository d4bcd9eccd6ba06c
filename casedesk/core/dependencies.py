"""
FastAPI dependencies.

Database session, bearer-token authentication, the caller's access
scope and the document storage service.
"""

from functools import lru_cache
from typing import Annotated, AsyncGenerator
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import InvalidTokenError
from casedesk.core.permissions import AccessScope
from casedesk.core.security import verify_token
from casedesk.core.storage import StorageService, build_storage_service
from casedesk.db.session import async_session_maker
from casedesk.models.user import User, UserRole
from casedesk.repositories.client_repository import find_client_for_user
from casedesk.repositories.law_firm_repository import LawFirmRepository
from casedesk.repositories.user_repository import UserRepository

security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request.

    Usage:
        @router.get("/items")
        async def get_items(db: DBSession):
            ...
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        InvalidTokenError: no token, bad signature, expired, unknown or
            disabled account, or a deactivated law firm (all 401).
    """
    if credentials is None:
        raise InvalidTokenError("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise InvalidTokenError()

    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise InvalidTokenError()

    user = await UserRepository(db).get_by_id(user_id)
    if user is None or not user.is_active:
        raise InvalidTokenError()

    if user.law_firm_id is not None:
        firm = await LawFirmRepository(db).get_by_id(user.law_firm_id)
        if firm is None or not firm.is_active:
            raise InvalidTokenError("Law firm is deactivated")

    return user


async def get_access_scope(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccessScope:
    """The caller plus, for client accounts, their client record."""
    if current_user.role != UserRole.CLIENT:
        return AccessScope(user=current_user)

    client = await find_client_for_user(db, current_user.id)
    return AccessScope(user=current_user, client_id=client.id if client else None)


@lru_cache
def get_storage() -> StorageService:
    return build_storage_service()


# Type aliases for route signatures
DBSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
Scope = Annotated[AccessScope, Depends(get_access_scope)]
Storage = Annotated[StorageService, Depends(get_storage)]
