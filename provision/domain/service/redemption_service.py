"""Invitation redemption domain service."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from provision.domain.error import (
    ExpiredToken,
    IdentityMismatch,
    InvalidToken,
    StatusConflict,
)
from provision.domain.model import AccessChange, Invitation, RoleChange, User, utcnow
from provision.domain.repository import (
    AuditLogRepository,
    InvitationRepository,
    UserRepository,
)
from provision.domain.value import (
    AccessAction,
    AuditEventId,
    InvitationStatus,
    InvitationToken,
    NotificationTemplate,
    PartialFailure,
    UserId,
    parse_email,
)

from .merge_service import MergeResult, MergeService
from .notification_service import NotificationService

INITIAL_ROLE_REASON = "invitation accepted"
ACCOUNT_CREATED_REASON = "Account created from invitation"


@dataclass
class RedeemResult:
    """A redeemed invitation and the account it produced."""

    user: User
    invitation: Invitation
    merged: bool
    merge: MergeResult | None = None
    delivery: PartialFailure | None = None


class RedemptionService:
    """Domain service turning an invitation into an account, exactly once."""

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
        merge_service: MergeService,
        notification_service: NotificationService,
    ) -> None:
        """Initialize redemption service.

        Args:
            invitation_repository: Invitation repository
            user_repository: User repository
            audit_log_repository: Role and access event log
            merge_service: Applies the invitation to existing users
            notification_service: Best-effort welcome message
        """
        self.invitation_repository = invitation_repository
        self.user_repository = user_repository
        self.audit_log_repository = audit_log_repository
        self.merge_service = merge_service
        self.notification_service = notification_service

    async def redeem(
        self,
        token: str,
        authenticated_email: str,
        now: Optional[datetime] = None,
    ) -> RedeemResult:
        """Redeem an invitation for the signed-in identity.

        Args:
            token: Invitation token from the link
            authenticated_email: Email asserted by the identity provider
            now: Redemption time

        Returns:
            The account and the accepted invitation

        Raises:
            ValidationError: If the authenticated email is malformed
            InvalidToken: If no invitation has the token
            ExpiredToken: If the invitation has expired (it is marked expired)
            StatusConflict: If the invitation is no longer pending
            IdentityMismatch: If the signed-in email differs from the invited one
            MergeConflict: If existing duplicates need manual review
        """
        now = now or utcnow()
        with logfire.span(
            "redemption_service.redeem",
            token=token[:8] + "...",
            authenticated_email=authenticated_email,
        ):
            email = parse_email(authenticated_email)

            parsed = InvitationToken.try_parse(token)
            invitation = None
            if parsed is not None:
                invitation = await self.invitation_repository.find_by_token(parsed)
            if invitation is None:
                logfire.warn("Invitation not found", token=token[:8] + "...")
                raise InvalidToken()

            if invitation.is_expired(now):
                if invitation.status == InvitationStatus.PENDING:
                    await self.invitation_repository.mark_expired(invitation.id)
                    logfire.info(
                        "Invitation expired on redemption",
                        invitation_id=str(invitation.id),
                    )
                raise ExpiredToken()
            if invitation.status == InvitationStatus.EXPIRED:
                raise ExpiredToken()
            if invitation.status != InvitationStatus.PENDING:
                raise StatusConflict(str(invitation.id), invitation.status.value)

            if email != invitation.email:
                logfire.warn(
                    "Redeeming identity does not match invitation",
                    invitation_id=str(invitation.id),
                    authenticated_email=email.root,
                )
                raise IdentityMismatch()

            # Existing accounts must have an automatic survivor before the claim
            existing = await self.user_repository.find_all_by_email(email)
            if existing:
                await self.merge_service.plan(email, invitation, existing)

            accepted = await self.invitation_repository.accept_if_pending(
                invitation.id, now
            )
            if accepted is None:
                logfire.warn(
                    "Invitation claimed concurrently", invitation_id=str(invitation.id)
                )
                raise StatusConflict(str(invitation.id), InvitationStatus.ACCEPTED.value)

            merge: MergeResult | None = None
            user = None
            if not existing:
                user = await self._create_user(accepted, now)

            # Existing account (or one created concurrently) takes the invitation
            if user is None:
                merge = await self.merge_service.merge(
                    email, accepted, accepted.invited_by, now=now
                )
                user = merge.survivor

            logfire.info(
                "Invitation redeemed",
                invitation_id=str(accepted.id),
                user_id=str(user.id),
                merged=merge is not None,
            )

            delivery = await self.notification_service.deliver(
                "redeem",
                user.email.root,
                NotificationTemplate.WELCOME,
                {"name": user.name, "role": user.role.value},
            )
            return RedeemResult(
                user=user,
                invitation=accepted,
                merged=merge is not None,
                merge=merge,
                delivery=delivery,
            )

    async def _create_user(self, invitation: Invitation, now: datetime) -> User | None:
        """Create the account described by the invitation.

        Returns:
            The new user, or None if a user with the email appeared meanwhile
        """
        user = User(
            id=UserId(uuid4()),
            name=invitation.name,
            email=invitation.email,
            role=invitation.role,
            has_access=invitation.has_access,
            company=invitation.company,
            phone=invitation.phone,
            created_at=now,
            updated_at=now,
        )
        try:
            saved = await self.user_repository.save(user)
        except IntegrityError:
            logfire.warn(
                "User created concurrently, merging instead",
                email=invitation.email.root,
            )
            return None

        await self.audit_log_repository.append_role_change(
            RoleChange(
                id=AuditEventId(uuid4()),
                user_id=saved.id,
                role=saved.role,
                changed_by=invitation.invited_by,
                changed_at=now,
                reason=INITIAL_ROLE_REASON,
            )
        )
        await self.audit_log_repository.append_access_change(
            AccessChange(
                id=AuditEventId(uuid4()),
                user_id=saved.id,
                action=AccessAction.CREATED,
                has_access=saved.has_access,
                changed_by=invitation.invited_by,
                changed_at=now,
                reason=ACCOUNT_CREATED_REASON,
            )
        )
        logfire.info("User created from invitation", user_id=str(saved.id))
        return saved
