"""Unit of work interface."""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """The request's transaction, as seen by the domain.

    Repositories of one request share it. Committing early releases row
    locks before slow side effects; rolling back discards every write made
    so far in the request.
    """

    @abstractmethod
    async def commit(self) -> None:
        """Make the writes so far durable."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Discard the writes since the last commit."""
        pass
