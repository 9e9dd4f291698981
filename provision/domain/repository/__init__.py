"""Repository interfaces for domain entities."""

from provision.domain.repository.audit import AuditLogRepository
from provision.domain.repository.invitation import InvitationRepository
from provision.domain.repository.unit_of_work import UnitOfWork
from provision.domain.repository.user import UserRepository

__all__ = [
    "AuditLogRepository",
    "InvitationRepository",
    "UnitOfWork",
    "UserRepository",
]
