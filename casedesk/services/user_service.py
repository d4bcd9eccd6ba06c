"""
User and team management.

Team managers (admins, or staff with full access) register, edit and
disable members of their firm. Everyone else may only edit their own
profile.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from casedesk.core.exceptions import (
    BusinessRuleError,
    InsufficientPermissionsError,
    ResourceAlreadyExistsError,
    ResourceNotFoundError,
    SelfDeletionError,
    ValidationError,
)
from casedesk.core.permissions import AccessScope
from casedesk.core.security import get_password_hash
from casedesk.models.client import Client
from casedesk.models.user import DEFAULT_PERMISSIONS, User, UserRole
from casedesk.repositories.base import commit_or_conflict, unique_conflicts
from casedesk.repositories.client_repository import ClientRepository, find_client_for_user
from casedesk.repositories.user_repository import UserRepository
from casedesk.schemas.base import changes
from casedesk.schemas.user import ProfileUpdate, UserCreate, UserUpdate

logger = structlog.get_logger()

PROFILE_FIELDS = {"full_name", "username", "phone"}
MANAGED_FIELDS = {"email", "role", "permissions", "is_active"}


class UserService:
    def __init__(self, db: AsyncSession, scope: AccessScope):
        self._db = db
        self._scope = scope
        self._repo = UserRepository(db)

    async def _ensure_unique(self, email: str | None, username: str | None, user_id: UUID | None = None):
        if email:
            existing = await self._repo.get_by_email(email)
            if existing and existing.id != user_id:
                raise ResourceAlreadyExistsError("User", "email", email)
        if username:
            existing = await self._repo.get_by_username(username)
            if existing and existing.id != user_id:
                raise ResourceAlreadyExistsError("User", "username", username)

    def _target_firm(self, data: UserCreate) -> UUID | None:
        if self._scope.is_platform_admin:
            if data.law_firm_id is None and data.role != UserRole.ADMIN:
                raise ValidationError("law_firm_id is required for firm members", field="law_firm_id")
            return data.law_firm_id
        return self._scope.require_law_firm()

    async def register(self, data: UserCreate) -> User:
        """
        Register a firm member.

        Client accounts are linked to ``client_id`` when given; otherwise a
        client record is created from the account's name and contact data.
        """
        self._scope.require_team_manager("register users")
        if data.role == UserRole.ADMIN and self._scope.role != UserRole.ADMIN:
            raise InsufficientPermissionsError("register administrators")

        law_firm_id = self._target_firm(data)
        await self._ensure_unique(data.email, data.username)

        user = User(
            law_firm_id=law_firm_id,
            email=data.email,
            username=data.username,
            full_name=data.full_name,
            phone=data.phone,
            hashed_password=get_password_hash(data.password),
            role=data.role,
            permissions=data.permissions or DEFAULT_PERMISSIONS[data.role],
            is_active=True,
        )
        async with unique_conflicts(self._db, "User"):
            self._db.add(user)
            await self._db.flush()

        if data.role == UserRole.CLIENT:
            await self._link_client(user, data.client_id)

        await commit_or_conflict(self._db, "Client")
        await self._db.refresh(user)

        logger.info(
            "user registered",
            user_id=str(user.id),
            law_firm_id=str(law_firm_id) if law_firm_id else None,
            role=user.role.value,
            registered_by=str(self._scope.user_id),
        )
        return user

    async def _link_client(self, user: User, client_id: UUID | None) -> None:
        if user.law_firm_id is None:
            raise ValidationError("Client accounts must belong to a law firm", field="law_firm_id")

        clients = ClientRepository(self._db, user.law_firm_id)
        if client_id is None:
            if await clients.get_by_email(user.email):
                raise ResourceAlreadyExistsError("Client", "email", user.email)
            self._db.add(
                Client(
                    law_firm_id=user.law_firm_id,
                    name=user.full_name,
                    email=user.email,
                    phone=user.phone,
                    user_account_id=user.id,
                )
            )
            return

        client = await clients.get_by_id(client_id)
        if client is None:
            raise ResourceNotFoundError("Client", client_id)
        if client.user_account_id is not None:
            raise BusinessRuleError("Client already has a portal account", rule="CLIENT_LINKED")
        client.user_account_id = user.id

    async def get(self, user_id: UUID) -> User:
        """Platform admins see everyone, clients only themselves, staff their firm."""
        user = await self._repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)

        if self._scope.is_platform_admin:
            return user
        if self._scope.is_client and user.id != self._scope.user_id:
            raise ResourceNotFoundError("User", user_id)
        if user.law_firm_id != self._scope.law_firm_id:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def list_users(
        self,
        role: UserRole | None = None,
        is_active: bool | None = None,
        search: str | None = None,
        law_firm_id: UUID | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[User], int]:
        if self._scope.is_platform_admin:
            return await self._repo.search(
                law_firm_id=law_firm_id,
                role=role,
                is_active=is_active,
                search=search,
                skip=skip,
                limit=limit,
            )

        if self._scope.is_client:
            return [self._scope.user], 1

        return await self._repo.search(
            law_firm_id=self._scope.require_law_firm(),
            role=role or UserRole.ASSOCIATE,
            is_active=is_active,
            search=search,
            skip=skip,
            limit=limit,
        )

    async def update(self, user_id: UUID, data: UserUpdate) -> User:
        user = await self.get(user_id)
        values = changes(data, clearable=("phone", "username"))

        is_self = user.id == self._scope.user_id
        if not self._scope.is_team_manager:
            if not is_self:
                raise InsufficientPermissionsError("update other users")
            if MANAGED_FIELDS & values.keys():
                raise InsufficientPermissionsError("change email, role, permissions or status")
        elif is_self and values.get("is_active") is False:
            raise BusinessRuleError("You cannot deactivate your own account", rule="SELF_DEACTIVATION")

        if values.get("role") == UserRole.ADMIN and self._scope.role != UserRole.ADMIN:
            raise InsufficientPermissionsError("grant the admin role")
        if user.role == UserRole.ADMIN and self._scope.role != UserRole.ADMIN and MANAGED_FIELDS & values.keys():
            raise InsufficientPermissionsError("change an administrator's email, role, permissions or status")

        await self._ensure_unique(values.get("email"), values.get("username"), user.id)

        user = await self._repo.update(user, **values)
        logger.info("user updated", user_id=str(user.id), fields=list(values))
        return user

    async def update_profile(self, data: ProfileUpdate) -> User:
        values = changes(data, clearable=("phone", "username"))
        await self._ensure_unique(None, values.get("username"), self._scope.user_id)

        user = await self._repo.update(self._scope.user, **values)
        logger.info("profile updated", user_id=str(user.id), fields=list(values))
        return user

    async def delete(self, user_id: UUID) -> None:
        """
        Remove a member from the team.

        Accounts are disabled rather than erased; the cases, documents and
        notes they touched keep pointing at them.
        """
        self._scope.require_team_manager("delete users")
        user = await self.get(user_id)
        if user.id == self._scope.user_id:
            raise SelfDeletionError()
        if user.role == UserRole.ADMIN and self._scope.role != UserRole.ADMIN:
            raise InsufficientPermissionsError("remove administrators")

        await self._repo.soft_delete(user)
        logger.info("user disabled", user_id=str(user.id), disabled_by=str(self._scope.user_id))

    async def linked_client(self, user: User) -> Client | None:
        if user.role != UserRole.CLIENT:
            return None
        return await find_client_for_user(self._db, user.id)
