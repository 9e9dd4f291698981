"""Shared state behind the in-memory repositories."""

import asyncio
from dataclasses import dataclass, field

from provision.domain.model import AccessChange, Invitation, RoleChange, User
from provision.domain.value import InvitationId, UserId


@dataclass
class InMemoryStore:
    """Tables for the in-memory repositories.

    One store outlives many request-scoped repositories, the way a database
    outlives sessions, so concurrent requests in tests see each other's writes.

    Args:
        unique_user_email: Enforce one user per email, like the production
            unique index. Disable to seed legacy duplicates.
    """

    unique_user_email: bool = True
    users: dict[UserId, User] = field(default_factory=dict)
    invitations: dict[InvitationId, Invitation] = field(default_factory=dict)
    role_changes: list[RoleChange] = field(default_factory=list)
    access_changes: list[AccessChange] = field(default_factory=list)
    commits: int = 0
    rollbacks: int = 0

    async def io(self) -> None:
        """Yield to the event loop, standing in for a database round trip.

        Reads and check-and-set writes happen after this point with no
        further suspension, so each repository call is atomic.
        """
        await asyncio.sleep(0)
