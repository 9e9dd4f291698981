"""Audit log repository interface."""

from abc import ABC, abstractmethod

from provision.domain.model.audit import AccessChange, RoleChange
from provision.domain.value import UserId


class AuditLogRepository(ABC):
    """Append-only store of role and access events keyed by user id."""

    @abstractmethod
    async def append_role_change(self, event: RoleChange) -> RoleChange:
        """Append a role event."""
        pass

    @abstractmethod
    async def list_role_changes(self, user_id: UserId) -> list[RoleChange]:
        """List a user's role events, oldest first."""
        pass

    @abstractmethod
    async def append_access_change(self, event: AccessChange) -> AccessChange:
        """Append an access event."""
        pass

    @abstractmethod
    async def list_access_changes(self, user_id: UserId) -> list[AccessChange]:
        """List a user's access events, oldest first."""
        pass
