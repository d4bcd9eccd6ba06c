"""
Authentication endpoints.
"""

from fastapi import APIRouter

from casedesk.core.dependencies import CurrentUser, DBSession, Scope
from casedesk.schemas.base import APIResponse
from casedesk.schemas.client import ClientResponse
from casedesk.schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    OnboardingRequest,
    OnboardingResponse,
    PasswordChange,
    ProfileUpdate,
    UserCreate,
    UserResponse,
)
from casedesk.services.auth_service import AuthService
from casedesk.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/login", response_model=APIResponse[LoginResponse])
async def login(request: LoginRequest, db: DBSession):
    """Exchange email and password for a bearer token."""
    service = AuthService(db)
    result = await service.login(request.email, request.password)
    return APIResponse(success=True, data=result)


@router.post("/onboarding", response_model=APIResponse[OnboardingResponse])
async def onboarding(request: OnboardingRequest, db: DBSession):
    """
    Create a law firm together with its first administrator.

    Public: this is how a new firm signs up.
    """
    service = AuthService(db)
    result = await service.onboard(request)
    return APIResponse(
        success=True,
        data=result,
        message="Law firm and administrator created",
    )


@router.post("/register", response_model=APIResponse[UserResponse])
async def register(data: UserCreate, db: DBSession, scope: Scope):
    """Register an associate or client account (team managers only)."""
    user = await UserService(db, scope).register(data)
    return APIResponse(
        success=True,
        data=UserResponse.model_validate(user),
        message="User registered",
    )


@router.get("/me", response_model=APIResponse[CurrentUserResponse])
async def me(current_user: CurrentUser, db: DBSession, scope: Scope):
    """The authenticated user, with the client record behind a client account."""
    client = await UserService(db, scope).linked_client(current_user)
    data = CurrentUserResponse.model_validate(current_user).model_copy(
        update={"client": ClientResponse.model_validate(client) if client else None}
    )
    return APIResponse(success=True, data=data)


@router.put("/me", response_model=APIResponse[UserResponse])
async def update_me(data: ProfileUpdate, db: DBSession, scope: Scope):
    user = await UserService(db, scope).update_profile(data)
    return APIResponse(success=True, data=UserResponse.model_validate(user))


@router.post("/change-password", response_model=APIResponse[None])
async def change_password(data: PasswordChange, current_user: CurrentUser, db: DBSession):
    await AuthService(db).change_password(current_user, data)
    return APIResponse(success=True, message="Password changed")
