"""Invitations in the ``invitations`` table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from provision.domain.model import Invitation
from provision.domain.repository import InvitationRepository
from provision.domain.value import Email, InvitationId, InvitationStatus, InvitationToken
from provision.persistence.mappers import invitation_to_dict, row_to_invitation
from provision.persistence.tables import invitations_table


class PostgresInvitationRepository(InvitationRepository):
    """Status changes are conditional updates guarded by the current status."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_by_token(self, token: InvitationToken) -> Optional[Invitation]:
        stmt = select(invitations_table).where(invitations_table.c.token == token.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_pending_by_email(self, email: Email) -> Optional[Invitation]:
        """Find the pending invitation for an email.

        Backed by the partial unique index on pending emails.
        """
        stmt = select(invitations_table).where(
            and_(
                invitations_table.c.email == email.root,
                invitations_table.c.status == InvitationStatus.PENDING.value,
            )
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_latest_by_email(
        self, email: Email, status: Optional[InvitationStatus] = None
    ) -> Optional[Invitation]:
        stmt = (
            select(invitations_table)
            .where(invitations_table.c.email == email.root)
            .order_by(invitations_table.c.invited_at.desc())
            .limit(1)
        )
        if status:
            stmt = stmt.where(invitations_table.c.status == status.value)

        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def save(self, invitation: Invitation) -> Invitation:
        """Save an invitation (create or update).

        Writes inside a savepoint so a unique violation leaves the request
        transaction usable.

        Raises:
            IntegrityError: On a second pending invitation for the email or a
                reused token
        """
        invitation_dict = invitation_to_dict(invitation)

        existing = await self.find_by_id(invitation.id)

        async with self.session.begin_nested():
            if existing:
                stmt = (
                    update(invitations_table)
                    .where(invitations_table.c.id == invitation.id)
                    .values(**invitation_dict)
                )
            else:
                stmt = insert(invitations_table).values(**invitation_dict)
            await self.session.execute(stmt)

        return invitation

    async def delete(self, invitation_id: InvitationId) -> bool:
        stmt = (
            delete(invitations_table)
            .where(invitations_table.c.id == invitation_id)
            .returning(invitations_table.c.id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def list_invitations(
        self,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        stmt = (
            select(invitations_table)
            .order_by(invitations_table.c.invited_at.desc())
            .limit(limit)
            .offset(offset)
        )
        if status:
            stmt = stmt.where(invitations_table.c.status == status.value)

        result = await self.session.execute(stmt)
        return [row_to_invitation(dict(row)) for row in result.mappings().all()]

    async def accept_if_pending(
        self, invitation_id: InvitationId, now: datetime
    ) -> Optional[Invitation]:
        """Claim the invitation with a conditional UPDATE.

        A concurrent claimer blocks on the row lock and then re-evaluates the
        WHERE clause, finding the status no longer pending.
        """
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                    invitations_table.c.expires_at >= now,
                )
            )
            .values(status=InvitationStatus.ACCEPTED.value, accepted_at=now)
            .returning(invitations_table)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def mark_expired(self, invitation_id: InvitationId) -> bool:
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                )
            )
            .values(status=InvitationStatus.EXPIRED.value)
            .returning(invitations_table.c.id)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def expire_stale(self, now: datetime) -> int:
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.status == InvitationStatus.PENDING.value,
                    invitations_table.c.expires_at < now,
                )
            )
            .values(status=InvitationStatus.EXPIRED.value)
            .returning(invitations_table.c.id)
        )
        result = await self.session.execute(stmt)
        return len(result.all())
