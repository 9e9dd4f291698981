"""Dict-backed repositories sharing one InMemoryStore.

Used by the unit and API tests in place of PostgreSQL.
"""

from .audit import InMemoryAuditLogRepository
from .invitation import InMemoryInvitationRepository
from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork
from .user import InMemoryUserRepository

__all__ = [
    "InMemoryAuditLogRepository",
    "InMemoryInvitationRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemoryUserRepository",
]
