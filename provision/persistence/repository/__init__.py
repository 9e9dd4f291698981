"""PostgreSQL repository implementations."""

from provision.persistence.repository.audit import PostgresAuditLogRepository
from provision.persistence.repository.invitation import PostgresInvitationRepository
from provision.persistence.repository.unit_of_work import PostgresUnitOfWork
from provision.persistence.repository.user import PostgresUserRepository

__all__ = [
    "PostgresAuditLogRepository",
    "PostgresInvitationRepository",
    "PostgresUnitOfWork",
    "PostgresUserRepository",
]
