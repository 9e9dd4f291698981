"""The request session as a unit of work."""

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from provision.domain.repository import UnitOfWork


class PostgresUnitOfWork(UnitOfWork):
    """Commits and rolls back the session the repositories write through."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
        logfire.info("Request transaction rolled back")
