"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import logfire

from provision.domain.model import Invitation, User
from provision.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    Role,
    UserId,
)

# Keep test runs off the network and out of the console
logfire.configure(send_to_logfire=False, console=False)


def make_user(
    email: str,
    role: Role = Role.CLIENT,
    has_access: bool = True,
    name: str = "Test User",
    created_at: datetime | None = None,
    **fields,
) -> User:
    """Helper to build a user with sensible defaults."""
    created = created_at or datetime.now(timezone.utc)
    return User(
        id=UserId(uuid4()),
        name=name,
        email=Email(email),
        role=role,
        has_access=has_access,
        created_at=created,
        updated_at=created,
        **fields,
    )


def make_invitation(
    email: str,
    role: Role = Role.CLIENT,
    has_access: bool = True,
    name: str = "Invitee",
    invited_by: str = "admin@example.com",
    invited_at: datetime | None = None,
    ttl: timedelta = timedelta(days=7),
    status: InvitationStatus = InvitationStatus.PENDING,
    token: str | None = None,
    **fields,
) -> Invitation:
    """Helper to build an invitation with sensible defaults."""
    issued = invited_at or datetime.now(timezone.utc)
    return Invitation(
        id=InvitationId(uuid4()),
        email=Email(email),
        name=name,
        role=role,
        has_access=has_access,
        token=InvitationToken(token or uuid4().hex),
        invited_by=invited_by,
        invited_at=issued,
        expires_at=issued + ttl,
        status=status,
        **fields,
    )


