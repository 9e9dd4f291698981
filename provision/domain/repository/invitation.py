"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from provision.domain.model.invitation import Invitation
from provision.domain.value import Email, InvitationId, InvitationStatus, InvitationToken


class InvitationRepository(ABC):
    """Invitations keyed by id and by token.

    Status transitions out of pending go through the conditional
    ``accept_if_pending`` and ``mark_expired`` so that concurrent redemptions
    of one token cannot both succeed.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        """Find an invitation by token.

        Used when the invitee opens the link or redeems it.

        Args:
            token: The invitation token

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_pending_by_email(self, email: Email) -> Optional[Invitation]:
        """Find the pending invitation for an email, expired or not.

        Args:
            email: Normalized email

        Returns:
            The pending invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_latest_by_email(
        self, email: Email, status: Optional[InvitationStatus] = None
    ) -> Optional[Invitation]:
        """Find the most recently issued invitation for an email.

        Args:
            email: Normalized email
            status: Optional status filter

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, invitation: Invitation) -> Invitation:
        """Save an invitation (create or update).

        Args:
            invitation: Invitation to save

        Returns:
            Saved invitation

        Raises:
            IntegrityError: If another pending invitation exists for the email
                or the token is already in use
        """
        pass

    @abstractmethod
    async def delete(self, invitation_id: InvitationId) -> bool:
        """Delete an invitation.

        Returns:
            True if a row was deleted
        """
        pass

    @abstractmethod
    async def list_invitations(
        self,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        """List invitations, most recently issued first."""
        pass

    @abstractmethod
    async def accept_if_pending(
        self, invitation_id: InvitationId, now: datetime
    ) -> Optional[Invitation]:
        """Atomically move a pending, unexpired invitation to accepted.

        Of any number of concurrent callers for the same invitation, exactly
        one receives the accepted invitation.

        Args:
            invitation_id: Invitation to claim
            now: Acceptance time

        Returns:
            The accepted invitation, or None if it was not claimable
        """
        pass

    @abstractmethod
    async def mark_expired(self, invitation_id: InvitationId) -> bool:
        """Move a pending invitation to expired.

        Returns:
            True if the invitation changed status
        """
        pass

    @abstractmethod
    async def expire_stale(self, now: datetime) -> int:
        """Expire every pending invitation whose lifetime ended before ``now``.

        Returns:
            Number of invitations expired
        """
        pass
