"""Unit of work over the in-memory store."""

from provision.domain.repository import UnitOfWork

from .store import InMemoryStore


class InMemoryUnitOfWork(UnitOfWork):
    """In-memory writes apply immediately; commits and rollbacks are counted.

    A rollback cannot undo writes here, since concurrent requests share the
    store. Tests assert on the counters instead.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def commit(self) -> None:
        self._store.commits += 1

    async def rollback(self) -> None:
        self._store.rollbacks += 1
