"""Role and access events in ``role_events`` and ``access_events``."""

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from provision.domain.model import AccessChange, RoleChange
from provision.domain.repository import AuditLogRepository
from provision.domain.value import UserId
from provision.persistence.mappers import (
    access_change_to_dict,
    role_change_to_dict,
    row_to_access_change,
    row_to_role_change,
)
from provision.persistence.tables import access_events_table, role_events_table


class PostgresAuditLogRepository(AuditLogRepository):
    """Insert-only: events are never updated or deleted."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def append_role_change(self, event: RoleChange) -> RoleChange:
        await self.session.execute(
            insert(role_events_table).values(**role_change_to_dict(event))
        )
        return event

    async def list_role_changes(self, user_id: UserId) -> list[RoleChange]:
        stmt = (
            select(role_events_table)
            .where(role_events_table.c.user_id == user_id)
            .order_by(role_events_table.c.changed_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_role_change(dict(row)) for row in result.mappings().all()]

    async def append_access_change(self, event: AccessChange) -> AccessChange:
        await self.session.execute(
            insert(access_events_table).values(**access_change_to_dict(event))
        )
        return event

    async def list_access_changes(self, user_id: UserId) -> list[AccessChange]:
        stmt = (
            select(access_events_table)
            .where(access_events_table.c.user_id == user_id)
            .order_by(access_events_table.c.changed_at.asc())
        )
        result = await self.session.execute(stmt)
        return [row_to_access_change(dict(row)) for row in result.mappings().all()]
