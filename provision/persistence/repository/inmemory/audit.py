"""Audit events appended to in-memory lists."""

from provision.domain.model import AccessChange, RoleChange
from provision.domain.repository import AuditLogRepository
from provision.domain.value import UserId

from .store import InMemoryStore


class InMemoryAuditLogRepository(AuditLogRepository):
    """Events are kept in append order per user."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def append_role_change(self, event: RoleChange) -> RoleChange:
        await self._store.io()
        self._store.role_changes.append(event)
        return event

    async def list_role_changes(self, user_id: UserId) -> list[RoleChange]:
        await self._store.io()
        # Stable sort keeps append order for equal timestamps
        events = [e for e in self._store.role_changes if e.user_id == user_id]
        return sorted(events, key=lambda e: e.changed_at)

    async def append_access_change(self, event: AccessChange) -> AccessChange:
        await self._store.io()
        self._store.access_changes.append(event)
        return event

    async def list_access_changes(self, user_id: UserId) -> list[AccessChange]:
        await self._store.io()
        events = [e for e in self._store.access_changes if e.user_id == user_id]
        return sorted(events, key=lambda e: e.changed_at)
