"""Audit events for role and access changes.

Events are append-only and keyed by user id. They outlive the user rows they
describe, so merged-away accounts keep their history.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from provision.domain.model.common import DomainModel, utcnow
from provision.domain.value import AccessAction, AuditEventId, Role, UserId


class RoleChange(DomainModel):
    """One entry in a user's role history."""

    id: AuditEventId
    user_id: UserId
    role: Role
    changed_by: str = Field(min_length=1)
    changed_at: datetime = Field(default_factory=utcnow)
    reason: Optional[str] = None


class AccessChange(DomainModel):
    """One entry in a user's access history."""

    id: AuditEventId
    user_id: UserId
    action: AccessAction
    has_access: bool
    changed_by: str = Field(min_length=1)
    changed_at: datetime = Field(default_factory=utcnow)
    reason: Optional[str] = None
