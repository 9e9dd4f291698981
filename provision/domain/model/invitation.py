"""Invitation entity.

An admin-issued, time-limited offer of an account with a preassigned role
and access flag. Redeeming the token creates or merges the account.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from provision.domain.model.common import DomainModel
from provision.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    Role,
)


class Invitation(DomainModel):
    """Invitation entity.

    Business rules:
    - At most one pending, unexpired invitation per email
    - A pending invitation past ``expires_at`` is treated as expired
    - Accepted and expired invitations are never redeemed again
    """

    id: InvitationId
    email: Email
    name: str = Field(min_length=1, max_length=255)
    company: Optional[str] = None
    phone: Optional[str] = None
    role: Role = Role.CLIENT
    has_access: bool = False
    token: InvitationToken
    invited_by: str = Field(min_length=1)
    invited_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None
    status: InvitationStatus = InvitationStatus.PENDING

    def is_expired(self, now: datetime) -> bool:
        """Whether the invitation's lifetime has passed at ``now``."""
        return now > self.expires_at

    def is_active(self, now: datetime) -> bool:
        """Pending and still within its lifetime."""
        return self.status == InvitationStatus.PENDING and not self.is_expired(now)

    def effective_status(self, now: datetime) -> InvitationStatus:
        """Status as observed at ``now``, reporting stale pending as expired."""
        if self.status == InvitationStatus.PENDING and self.is_expired(now):
            return InvitationStatus.EXPIRED
        return self.status
