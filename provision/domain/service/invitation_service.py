"""Invitation domain service.

Issues, resends, cancels and validates invitations. Redemption lives in
RedemptionService.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from provision.domain.error import (
    DuplicateInvitation,
    ExpiredToken,
    InvalidToken,
    InvitationConflict,
    NotFoundError,
    StatusConflict,
    ValidationError,
)
from provision.domain.model import Invitation, utcnow
from provision.domain.repository import InvitationRepository, UserRepository
from provision.domain.value import (
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    NotificationTemplate,
    PartialFailure,
    Role,
    parse_email,
)

from .access_policy import AccessPolicy
from .notification_service import NotificationService


@dataclass
class IssueResult:
    """An invitation that was recorded, and how its delivery went."""

    invitation: Invitation
    invite_url: str
    delivery: PartialFailure | None = None

    @property
    def delivered(self) -> bool:
        return self.delivery is None


class InvitationService:
    """Domain service for invitation issuance and lifecycle."""

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
        notification_service: NotificationService,
        default_ttl: timedelta,
        token_bytes: int,
        frontend_url: str,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            user_repository: User repository
            access_policy: Role and capability checks
            notification_service: Best-effort message delivery
            default_ttl: Lifetime of an invitation when none is given
            token_bytes: Random bytes behind each token
            frontend_url: Base URL for invitation links
        """
        self.invitation_repository = invitation_repository
        self.user_repository = user_repository
        self.access_policy = access_policy
        self.notification_service = notification_service
        self.default_ttl = default_ttl
        self.token_bytes = token_bytes
        self.frontend_url = frontend_url

    def invite_url(self, token: InvitationToken) -> str:
        return f"{self.frontend_url}/invite?token={token.root}"

    def _new_token(self) -> InvitationToken:
        return InvitationToken(secrets.token_urlsafe(self.token_bytes))

    async def issue(
        self,
        email: str,
        name: str,
        role: Role,
        has_access: bool,
        invited_by_email: str,
        ttl: Optional[timedelta] = None,
        company: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> IssueResult:
        """Issue an invitation and notify the invitee.

        Args:
            email: Invitee email (normalized here)
            name: Invitee display name
            role: Role granted on redemption
            has_access: Access flag granted on redemption
            invited_by_email: Email of the acting admin
            ttl: Invitation lifetime, defaults to the configured TTL
            company: Optional company
            phone: Optional phone

        Returns:
            The stored invitation and delivery outcome

        Raises:
            ValidationError: If email, name or ttl is malformed
            PermissionDenied: If the caller may not issue this invitation
            InvalidRoleAssignment: If admin is offered outside the trusted domains
            InvitationConflict: If an active user already holds the email
            DuplicateInvitation: If a pending, unexpired invitation exists
        """
        with logfire.span(
            "invitation_service.issue",
            email=email,
            role=role.value,
            invited_by=invited_by_email,
        ):
            target = parse_email(email)
            actor_email = parse_email(invited_by_email)
            name = name.strip()
            if not name:
                raise ValidationError("Name is required")
            ttl = ttl if ttl is not None else self.default_ttl
            if ttl <= timedelta(0):
                raise ValidationError("Invitation lifetime must be positive")

            actor = await self.user_repository.find_by_email(actor_email)
            actor = self.access_policy.require_user_manager(
                actor, "issue invitations", actor_email.root
            )
            self.access_policy.require_can_grant(actor, role, "issue admin invitations")
            self.access_policy.require_assignable(role, target)

            existing_users = await self.user_repository.find_all_by_email(target)
            if any(u.has_access for u in existing_users):
                logfire.warn("Active user already exists", email=target.root)
                raise InvitationConflict(target.root)

            now = utcnow()
            await self._clear_pending(target, now)

            invitation = Invitation(
                id=InvitationId(uuid4()),
                email=target,
                name=name,
                company=company or None,
                phone=phone or None,
                role=role,
                has_access=has_access,
                token=self._new_token(),
                invited_by=actor.email.root,
                invited_at=now,
                expires_at=now + ttl,
                status=InvitationStatus.PENDING,
            )
            try:
                saved = await self.invitation_repository.save(invitation)
            except IntegrityError:
                logfire.warn("Concurrent invitation for email", email=target.root)
                raise DuplicateInvitation(target.root)

            logfire.info(
                "Invitation issued",
                invitation_id=str(saved.id),
                email=target.root,
                role=role.value,
                expires_at=saved.expires_at.isoformat(),
            )

            delivery = await self._notify(saved, NotificationTemplate.INVITATION, "issue")
            return IssueResult(
                invitation=saved, invite_url=self.invite_url(saved.token), delivery=delivery
            )

    async def resend(
        self, invitation_id: InvitationId, acting_email: str
    ) -> IssueResult:
        """Refresh an invitation's token and lifetime and send it again.

        Args:
            invitation_id: Invitation to resend
            acting_email: Email of the acting admin

        Returns:
            The refreshed invitation and delivery outcome

        Raises:
            NotFoundError: If the invitation is missing or already accepted
            PermissionDenied: If the caller may not resend it
            DuplicateInvitation: If another active invitation exists for the email
        """
        with logfire.span(
            "invitation_service.resend",
            invitation_id=str(invitation_id),
            acting_email=acting_email,
        ):
            actor_email = parse_email(acting_email)
            actor = await self.user_repository.find_by_email(actor_email)
            actor = self.access_policy.require_user_manager(
                actor, "resend invitations", actor_email.root
            )

            invitation = await self.invitation_repository.find_by_id(invitation_id)
            if not invitation or invitation.status == InvitationStatus.ACCEPTED:
                raise NotFoundError("Invitation", str(invitation_id))
            self.access_policy.require_can_grant(
                actor, invitation.role, "resend admin invitations"
            )

            now = utcnow()
            other = await self.invitation_repository.find_pending_by_email(
                invitation.email
            )
            if other and other.id != invitation.id:
                if other.is_active(now):
                    raise DuplicateInvitation(invitation.email.root)
                await self.invitation_repository.mark_expired(other.id)

            ttl = invitation.expires_at - invitation.invited_at
            if ttl <= timedelta(0):
                ttl = self.default_ttl
            refreshed = invitation.evolve(
                token=self._new_token(),
                invited_by=actor.email.root,
                invited_at=now,
                expires_at=now + ttl,
                status=InvitationStatus.PENDING,
            )
            try:
                saved = await self.invitation_repository.save(refreshed)
            except IntegrityError:
                raise DuplicateInvitation(invitation.email.root)

            logfire.info(
                "Invitation resent",
                invitation_id=str(saved.id),
                email=saved.email.root,
                expires_at=saved.expires_at.isoformat(),
            )

            delivery = await self._notify(
                saved, NotificationTemplate.INVITATION_RESEND, "resend"
            )
            return IssueResult(
                invitation=saved, invite_url=self.invite_url(saved.token), delivery=delivery
            )

    async def cancel(self, invitation_id: InvitationId, acting_email: str) -> Invitation:
        """Delete an invitation that has not been accepted.

        Raises:
            PermissionDenied: If the caller may not manage invitations
            NotFoundError: If the invitation does not exist
            StatusConflict: If the invitation was already accepted
        """
        with logfire.span(
            "invitation_service.cancel",
            invitation_id=str(invitation_id),
            acting_email=acting_email,
        ):
            actor_email = parse_email(acting_email)
            actor = await self.user_repository.find_by_email(actor_email)
            self.access_policy.require_user_manager(
                actor, "cancel invitations", actor_email.root
            )

            invitation = await self.invitation_repository.find_by_id(invitation_id)
            if not invitation:
                raise NotFoundError("Invitation", str(invitation_id))
            if invitation.status == InvitationStatus.ACCEPTED:
                raise StatusConflict(str(invitation_id), invitation.status.value)

            await self.invitation_repository.delete(invitation_id)
            logfire.info(
                "Invitation cancelled",
                invitation_id=str(invitation_id),
                email=invitation.email.root,
            )
            return invitation

    async def validate(self, token: str, now: Optional[datetime] = None) -> Invitation:
        """Look up a redeemable invitation without changing it.

        Raises:
            InvalidToken: If no invitation has the token
            ExpiredToken: If the invitation has expired
            StatusConflict: If the invitation was already accepted
        """
        now = now or utcnow()
        with logfire.span("invitation_service.validate", token=token[:8] + "..."):
            invitation = await self.get_by_token(token)
            if invitation is None:
                raise InvalidToken()
            status = invitation.effective_status(now)
            if status == InvitationStatus.EXPIRED:
                raise ExpiredToken()
            if status != InvitationStatus.PENDING:
                raise StatusConflict(str(invitation.id), status.value)
            return invitation

    async def get_by_token(self, token: str) -> Invitation | None:
        parsed = InvitationToken.try_parse(token)
        if parsed is None:
            return None
        invitation = await self.invitation_repository.find_by_token(parsed)
        if invitation is None:
            logfire.warn("Invitation not found", token=token[:8] + "...")
        return invitation

    async def list_invitations(
        self,
        status: Optional[InvitationStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invitation]:
        return await self.invitation_repository.list_invitations(
            status=status, limit=limit, offset=offset
        )

    async def expire_stale(self, now: Optional[datetime] = None) -> int:
        """Expire every pending invitation past its lifetime.

        Safe to run repeatedly and concurrently.

        Returns:
            Number of invitations expired by this run
        """
        now = now or utcnow()
        with logfire.span("invitation_service.expire_stale", now=now.isoformat()):
            count = await self.invitation_repository.expire_stale(now)
            logfire.info("Stale invitations expired", count=count)
            return count

    async def _clear_pending(self, email: Email, now: datetime) -> None:
        pending = await self.invitation_repository.find_pending_by_email(email)
        if pending is None:
            return
        if pending.is_active(now):
            logfire.warn(
                "Pending invitation already exists",
                email=email.root,
                invitation_id=str(pending.id),
            )
            raise DuplicateInvitation(email.root)
        await self.invitation_repository.mark_expired(pending.id)
        logfire.info("Stale invitation expired", invitation_id=str(pending.id))

    async def _notify(
        self, invitation: Invitation, template: NotificationTemplate, operation: str
    ) -> PartialFailure | None:
        return await self.notification_service.deliver(
            operation,
            invitation.email.root,
            template,
            {
                "name": invitation.name,
                "role": invitation.role.value,
                "invited_by": invitation.invited_by,
                "invite_url": self.invite_url(invitation.token),
                "expires_at": invitation.expires_at.isoformat(),
            },
        )
