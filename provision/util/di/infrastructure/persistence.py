"""Persistence slot: repositories over one transaction per request scope."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from provision.config import Settings
from provision.domain.repository import (
    AuditLogRepository,
    InvitationRepository,
    UnitOfWork,
    UserRepository,
)
from provision.persistence.database import (
    create_engine,
    create_session_factory,
    transaction,
)
from provision.persistence.repository import (
    PostgresAuditLogRepository,
    PostgresInvitationRepository,
    PostgresUnitOfWork,
    PostgresUserRepository,
)
from provision.util.di.base import ProviderBase
from provision.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Slot for the repositories and the unit of work behind them."""

    slot = "persistence"


class PostgresPersistenceProvider(PersistenceProvider):
    """PostgreSQL via SQLAlchemy Core on asyncpg."""

    is_mock = False

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Pooled engine, disposed when the container closes."""
        engine = create_engine(settings.database, echo=settings.debug)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        async with transaction(session_factory) as session:
            yield session

    users = provide(
        PostgresUserRepository, provides=UserRepository, scope=Scope.REQUEST
    )
    invitations = provide(
        PostgresInvitationRepository, provides=InvitationRepository, scope=Scope.REQUEST
    )
    audit_log = provide(
        PostgresAuditLogRepository, provides=AuditLogRepository, scope=Scope.REQUEST
    )
    unit_of_work = provide(
        PostgresUnitOfWork, provides=UnitOfWork, scope=Scope.REQUEST
    )
