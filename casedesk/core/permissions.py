"""
Server-side access rules.

Every request resolves an ``AccessScope`` from the authenticated user;
services consult it before reading or mutating anything. Client-side
gating in the portals is a convenience only; these checks are the
actual boundary.
"""

from dataclasses import dataclass
from uuid import UUID

from casedesk.core.exceptions import InsufficientPermissionsError, LawFirmRequiredError
from casedesk.models.user import User, UserPermission, UserRole


@dataclass(frozen=True)
class AccessScope:
    """
    Who is asking, and which rows they may see.

    ``client_id`` is the client record linked to a client-role user; it
    is None for staff and for client accounts not yet linked.
    """

    user: User
    client_id: UUID | None = None

    @property
    def user_id(self) -> UUID:
        return self.user.id

    @property
    def law_firm_id(self) -> UUID | None:
        return self.user.law_firm_id

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def is_platform_admin(self) -> bool:
        return self.user.is_platform_admin

    @property
    def is_client(self) -> bool:
        return self.user.role == UserRole.CLIENT

    @property
    def is_staff(self) -> bool:
        return self.user.is_staff

    @property
    def is_firm_admin(self) -> bool:
        return self.user.role == UserRole.ADMIN and self.user.law_firm_id is not None

    @property
    def is_team_manager(self) -> bool:
        return self.user.is_team_manager

    @property
    def can_edit_records(self) -> bool:
        """Staff may change firm records unless their permissions are 'no access'."""
        if self.user.role == UserRole.ADMIN:
            return True
        return self.is_staff and self.user.permissions != UserPermission.NO_ACCESS

    def require_law_firm(self) -> UUID:
        if self.law_firm_id is None:
            raise LawFirmRequiredError()
        return self.law_firm_id

    def require_staff(self, action: str) -> None:
        if not self.is_staff:
            raise InsufficientPermissionsError(action)

    def require_editor(self, action: str) -> None:
        if not self.can_edit_records:
            raise InsufficientPermissionsError(action)

    def require_team_manager(self, action: str) -> None:
        if not self.is_team_manager:
            raise InsufficientPermissionsError(action)

    def require_platform_admin(self, action: str) -> None:
        if not self.is_platform_admin:
            raise InsufficientPermissionsError(action)
