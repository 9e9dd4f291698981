"""Response items shared by several use cases."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from provision.domain.model import Invitation, User
from provision.domain.value import InvitationStatus, PartialFailure, Role


class DeliveryItem(BaseModel):
    """Outcome of the notification sent by an operation.

    ``next_action`` tells the admin surface to offer a resend rather than
    retrying an operation that already succeeded.
    """

    delivered: bool
    next_action: Literal["none", "resend"] = "none"
    template: str | None = None
    reason: str | None = None

    @classmethod
    def from_failure(cls, failure: PartialFailure | None) -> "DeliveryItem":
        if failure is None:
            return cls(delivered=True)
        return cls(
            delivered=False,
            next_action="resend",
            template=failure.template.value,
            reason=failure.reason,
        )


class InvitationItem(BaseModel):
    """Invitation as shown to admins."""

    id: str
    email: str
    name: str
    company: str | None
    phone: str | None
    role: Role
    has_access: bool
    invited_by: str
    invited_at: datetime
    expires_at: datetime
    accepted_at: datetime | None
    status: InvitationStatus

    @classmethod
    def from_invitation(cls, invitation: Invitation, now: datetime) -> "InvitationItem":
        return cls(
            id=str(invitation.id),
            email=invitation.email.root,
            name=invitation.name,
            company=invitation.company,
            phone=invitation.phone,
            role=invitation.role,
            has_access=invitation.has_access,
            invited_by=invitation.invited_by,
            invited_at=invitation.invited_at,
            expires_at=invitation.expires_at,
            accepted_at=invitation.accepted_at,
            status=invitation.effective_status(now),
        )


class UserItem(BaseModel):
    """User as shown to admins."""

    id: str
    name: str
    email: str
    role: Role
    has_access: bool
    company: str | None
    phone: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserItem":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email.root,
            role=user.role,
            has_access=user.has_access,
            company=user.company,
            phone=user.phone,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )
