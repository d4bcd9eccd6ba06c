"""
Authentication service.

Password login, token issuing, firm onboarding and password changes.
"""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.config import settings
from casedesk.core.exceptions import (
    AuthenticationError,
    BusinessRuleError,
    ResourceAlreadyExistsError,
)
from casedesk.core.security import create_access_token, get_password_hash, verify_password
from casedesk.db.base import utcnow
from casedesk.models.law_firm import LawFirm
from casedesk.models.user import User, UserPermission, UserRole
from casedesk.repositories.base import commit_or_conflict
from casedesk.repositories.law_firm_repository import LawFirmRepository
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.user import (
    LoginResponse,
    OnboardingRequest,
    OnboardingResponse,
    PasswordChange,
    UserResponse,
)

logger = structlog.get_logger()


def issue_token(user: User) -> str:
    claims = {"role": user.role.value}
    if user.law_firm_id is not None:
        claims["law_firm_id"] = str(user.law_firm_id)
    return create_access_token(subject=str(user.id), additional_claims=claims)


class AuthService:
    def __init__(self, db: AsyncSession):
        self._db = db
        self._user_repo = UserRepository(db)

    async def login(self, email: str, password: str) -> LoginResponse:
        """
        Email/password login.

        Unknown email, wrong password, disabled accounts and members of a
        deactivated firm all fail the same way so the response does not
        reveal which one it was.
        """
        user = await self._user_repo.get_by_email(email)

        if user is None:
            logger.warning("login failed: unknown email", email=email)
            raise AuthenticationError()

        if not verify_password(password, user.hashed_password):
            logger.warning("login failed: wrong password", user_id=str(user.id))
            raise AuthenticationError()

        if not user.is_active:
            logger.warning("login failed: inactive account", user_id=str(user.id))
            raise AuthenticationError()

        firm = None
        if user.law_firm_id is not None:
            firm = await LawFirmRepository(self._db).get_by_id(user.law_firm_id)
            if firm is None or not firm.is_active:
                logger.warning("login failed: inactive law firm", user_id=str(user.id))
                raise AuthenticationError()

        now = utcnow()
        user.last_login_at = now
        if firm is not None:
            firm.last_active_at = now
        await self._db.commit()
        await self._db.refresh(user)

        logger.info("login succeeded", user_id=str(user.id), role=user.role.value)

        return LoginResponse(
            access_token=issue_token(user),
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        )

    async def onboard(self, data: OnboardingRequest) -> OnboardingResponse:
        """Create a law firm and its first administrator in one transaction."""
        if await self._user_repo.get_by_email(data.email):
            raise ResourceAlreadyExistsError("User", "email", data.email)

        firm = LawFirm(
            name=data.law_firm_name,
            email=data.law_firm_email,
            phone=data.law_firm_phone,
        )
        self._db.add(firm)
        await self._db.flush()

        user = User(
            law_firm_id=firm.id,
            email=data.email,
            full_name=data.full_name,
            hashed_password=get_password_hash(data.password),
            role=UserRole.ADMIN,
            permissions=UserPermission.FULL_ACCESS,
            is_active=True,
        )
        self._db.add(user)
        await commit_or_conflict(self._db, "User")
        await self._db.refresh(firm)
        await self._db.refresh(user)

        logger.info("onboarding completed", law_firm_id=str(firm.id), user_id=str(user.id))

        return OnboardingResponse(
            law_firm_id=firm.id,
            user_id=user.id,
            access_token=issue_token(user),
        )

    async def change_password(self, user: User, data: PasswordChange) -> None:
        if not verify_password(data.current_password, user.hashed_password):
            raise BusinessRuleError("Current password is incorrect", rule="PASSWORD_MISMATCH")

        await self._user_repo.update(user, hashed_password=get_password_hash(data.new_password))
        logger.info("password changed", user_id=str(user.id))
