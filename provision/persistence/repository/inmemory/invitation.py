"""Invitations in a dict keyed by id."""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from provision.domain.model import Invitation
from provision.domain.repository import InvitationRepository
from provision.domain.value import Email, InvitationId, InvitationStatus, InvitationToken

from .store import InMemoryStore


class InMemoryInvitationRepository(InvitationRepository):
    """Mirrors the unique token and one-pending-per-email indexes."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        await self._store.io()
        return self._store.invitations.get(invitation_id)

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        await self._store.io()
        for invitation in self._store.invitations.values():
            if invitation.token == token:
                return invitation
        return None

    async def find_pending_by_email(self, email: Email) -> Optional[Invitation]:
        await self._store.io()
        for invitation in self._store.invitations.values():
            if invitation.email == email and invitation.status == InvitationStatus.PENDING:
                return invitation
        return None

    async def find_latest_by_email(
        self, email: Email, status: Optional[InvitationStatus] = None
    ) -> Optional[Invitation]:
        await self._store.io()
        matches = [
            i
            for i in self._store.invitations.values()
            if i.email == email and (status is None or i.status == status)
        ]
        return max(matches, key=lambda i: i.invited_at) if matches else None

    async def save(self, invitation: Invitation) -> Invitation:
        """Save an invitation (create or update).

        Raises:
            IntegrityError: On a second pending invitation for the email or a
                reused token
        """
        await self._store.io()
        for other in self._store.invitations.values():
            if other.id == invitation.id:
                continue
            if other.token == invitation.token:
                raise IntegrityError("Duplicate invitation token", None, Exception())
            if (
                invitation.status == InvitationStatus.PENDING
                and other.status == InvitationStatus.PENDING
                and other.email == invitation.email
            ):
                raise IntegrityError("Duplicate pending invitation", None, Exception())
        self._store.invitations[invitation.id] = invitation
        return invitation

    async def delete(self, invitation_id: InvitationId) -> bool:
        await self._store.io()
        return self._store.invitations.pop(invitation_id, None) is not None

    async def list_invitations(
        self,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        await self._store.io()
        invitations = [
            i
            for i in self._store.invitations.values()
            if status is None or i.status == status
        ]
        invitations.sort(key=lambda i: i.invited_at, reverse=True)
        return invitations[offset : offset + limit]

    async def accept_if_pending(
        self, invitation_id: InvitationId, now: datetime
    ) -> Optional[Invitation]:
        await self._store.io()
        invitation = self._store.invitations.get(invitation_id)
        if invitation is None or not invitation.is_active(now):
            return None
        accepted = invitation.evolve(status=InvitationStatus.ACCEPTED, accepted_at=now)
        self._store.invitations[invitation_id] = accepted
        return accepted

    async def mark_expired(self, invitation_id: InvitationId) -> bool:
        await self._store.io()
        invitation = self._store.invitations.get(invitation_id)
        if invitation is None or invitation.status != InvitationStatus.PENDING:
            return False
        self._store.invitations[invitation_id] = invitation.evolve(
            status=InvitationStatus.EXPIRED,
        )
        return True

    async def expire_stale(self, now: datetime) -> int:
        await self._store.io()
        count = 0
        for invitation_id, invitation in list(self._store.invitations.items()):
            if invitation.status == InvitationStatus.PENDING and invitation.is_expired(now):
                self._store.invitations[invitation_id] = invitation.evolve(
                    status=InvitationStatus.EXPIRED,
                )
                count += 1
        return count
