"""
Team management endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, Query

from casedesk.core.dependencies import DBSession, Scope
from casedesk.models.user import UserRole
from casedesk.schemas.base import APIResponse, PaginatedResponse, paginate
from casedesk.schemas.user import UserCreate, UserResponse, UserUpdate
from casedesk.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    db: DBSession,
    scope: Scope,
    role: UserRole | None = None,
    is_active: bool | None = None,
    search: str | None = None,
    law_firm_id: UUID | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """
    Team members of the caller's firm.

    Associates by default; pass ``role`` for the others. Platform
    administrators see every firm, optionally narrowed by ``law_firm_id``.
    """
    users, total = await UserService(db, scope).list_users(
        role=role,
        is_active=is_active,
        search=search,
        law_firm_id=law_firm_id,
        skip=skip,
        limit=limit,
    )
    return PaginatedResponse(
        **paginate([UserResponse.model_validate(u) for u in users], total, skip, limit)
    )


@router.post("", response_model=APIResponse[UserResponse])
async def create_user(data: UserCreate, db: DBSession, scope: Scope):
    user = await UserService(db, scope).register(data)
    return APIResponse(
        success=True,
        data=UserResponse.model_validate(user),
        message="User created",
    )


@router.get("/{user_id}", response_model=APIResponse[UserResponse])
async def get_user(user_id: UUID, db: DBSession, scope: Scope):
    user = await UserService(db, scope).get(user_id)
    return APIResponse(success=True, data=UserResponse.model_validate(user))


@router.put("/{user_id}", response_model=APIResponse[UserResponse])
async def update_user(user_id: UUID, data: UserUpdate, db: DBSession, scope: Scope):
    user = await UserService(db, scope).update(user_id, data)
    return APIResponse(success=True, data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=APIResponse[None])
async def delete_user(user_id: UUID, db: DBSession, scope: Scope):
    """Disable the account; it can no longer sign in."""
    await UserService(db, scope).delete(user_id)
    return APIResponse(success=True, message="User removed")
