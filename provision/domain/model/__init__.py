"""Domain models."""

from provision.domain.model.audit import AccessChange, RoleChange
from provision.domain.model.common import DomainModel, utcnow
from provision.domain.model.invitation import Invitation
from provision.domain.model.merge import (
    ManualReview,
    MatchInvitationRole,
    MostRecent,
    SurvivorDecision,
)
from provision.domain.model.user import User

__all__ = [
    "AccessChange",
    "DomainModel",
    "Invitation",
    "ManualReview",
    "MatchInvitationRole",
    "MostRecent",
    "RoleChange",
    "SurvivorDecision",
    "User",
    "utcnow",
]
