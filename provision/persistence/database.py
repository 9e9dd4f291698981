"""PostgreSQL engine and the per-request transaction boundary."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from provision.config import DatabaseSettings
from provision.domain.error import ExpiredToken


def create_engine(database: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    return create_async_engine(
        database.url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@asynccontextmanager
async def transaction(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    """One unit of work: a session that commits or rolls back on exit.

    A clean exit commits. ``ExpiredToken`` also commits before propagating,
    so the expired mark written during redemption sticks. Any other exception
    rolls back, including domain errors raised after a partial write.
    """
    async with session_factory() as session:
        try:
            yield session
        except ExpiredToken as e:
            await session.commit()
            logfire.info("Transaction committed after domain error", code=e.code)
            raise
        except Exception as e:
            await session.rollback()
            logfire.warn("Transaction rolled back", error_type=type(e).__name__)
            raise
        await session.commit()
