"""Duplicate identity merge domain service.

Collapses several users sharing one normalized email into a single survivor,
applying the matching invitation's data and recording who did it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4

import logfire

from provision.domain.error import MergeConflict, NotFoundError
from provision.domain.model import (
    AccessChange,
    Invitation,
    ManualReview,
    MatchInvitationRole,
    MostRecent,
    RoleChange,
    SurvivorDecision,
    User,
    utcnow,
)
from provision.domain.repository import (
    AuditLogRepository,
    InvitationRepository,
    UserRepository,
)
from provision.domain.value import (
    AccessAction,
    AuditEventId,
    Email,
    InvitationStatus,
    UserId,
    parse_email,
)


MERGE_REASON = "Cleanup: applied invitation data to merged user"


class SurvivorPolicy(ABC):
    """Chooses which of several duplicate users survives a merge."""

    @abstractmethod
    def decide(
        self, users: list[User], invitation: Optional[Invitation]
    ) -> SurvivorDecision:
        """Choose a survivor.

        Args:
            users: Users sharing one email, at least one
            invitation: The invitation that applies to the email, if any

        Returns:
            The decision; ManualReview when no safe choice exists
        """
        pass


class InvitationRoleSurvivorPolicy(SurvivorPolicy):
    """Prefer the earliest user whose role matches the invitation.

    Without a role match (or without an invitation) the most recently created
    user survives. A tie on ``created_at`` for the chosen candidate cannot be
    resolved automatically.
    """

    def decide(
        self, users: list[User], invitation: Optional[Invitation]
    ) -> SurvivorDecision:
        ordered = sorted(users, key=lambda u: u.created_at)

        if invitation is not None:
            matching = [u for u in ordered if u.role == invitation.role]
            if matching:
                chosen = matching[0]
                tied = [u.id for u in matching if u.created_at == chosen.created_at]
                if len(tied) > 1:
                    return ManualReview(
                        reason="Several users matching the invitation role share the earliest creation time",
                        candidates=tuple(tied),
                    )
                return MatchInvitationRole(user_id=chosen.id, role=invitation.role)

        newest = ordered[-1]
        tied = [u.id for u in ordered if u.created_at == newest.created_at]
        if len(tied) > 1:
            return ManualReview(
                reason="Several users share the latest creation time",
                candidates=tuple(tied),
            )
        return MostRecent(user_id=newest.id)


@dataclass
class MergeResult:
    """Outcome of resolving duplicates for one email."""

    email: Email
    survivor: User
    decision: SurvivorDecision | None = None
    deleted_user_ids: list[UserId] = field(default_factory=list)
    invitation: Invitation | None = None

    @property
    def changed(self) -> bool:
        return self.decision is not None


class MergeService:
    """Domain service for merging duplicate users."""

    def __init__(
        self,
        user_repository: UserRepository,
        invitation_repository: InvitationRepository,
        audit_log_repository: AuditLogRepository,
        survivor_policy: SurvivorPolicy,
        system_actor: str,
    ) -> None:
        """Initialize merge service.

        Args:
            user_repository: User repository
            invitation_repository: Invitation repository
            audit_log_repository: Role and access event log
            survivor_policy: Strategy choosing the surviving user
            system_actor: Attribution for merges run by maintenance jobs
        """
        self.user_repository = user_repository
        self.invitation_repository = invitation_repository
        self.audit_log_repository = audit_log_repository
        self.survivor_policy = survivor_policy
        self.system_actor = system_actor

    async def resolve_duplicates(
        self,
        email: str,
        actor: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> MergeResult:
        """Merge every user holding ``email`` into one.

        A single user still takes the data of a pending invitation for the
        email. Running it again after a successful merge changes nothing.

        Args:
            email: Email to resolve (normalized here)
            actor: Attribution for the audit trail, defaults to the system actor
            now: Reference time for invitation expiry

        Returns:
            The merge outcome; ``changed`` is False when there was nothing to do

        Raises:
            ValidationError: If the email is malformed
            NotFoundError: If no user holds the email
            MergeConflict: If no survivor can be chosen automatically
        """
        target = parse_email(email)
        now = now or utcnow()
        actor = actor or self.system_actor
        with logfire.span(
            "merge_service.resolve_duplicates", email=target.root, actor=actor
        ):
            users = await self.user_repository.find_all_by_email(target)
            if not users:
                raise NotFoundError("User", target.root)

            invitation = await self._find_invitation(target, now)
            # An accepted invitation was applied when it was accepted
            if len(users) < 2 and (
                invitation is None or invitation.status != InvitationStatus.PENDING
            ):
                logfire.info("Nothing to merge", email=target.root)
                return MergeResult(email=target, survivor=users[0])

            return await self.merge(
                target, invitation, actor, now=now, users=users
            )

    async def plan(
        self,
        email: Email,
        invitation: Optional[Invitation],
        users: Optional[list[User]] = None,
    ) -> tuple[list[User], SurvivorDecision]:
        """Load the users for an email and choose a survivor without writing.

        Raises:
            NotFoundError: If no user holds the email
            MergeConflict: If the policy requires manual review
        """
        if users is None:
            users = await self.user_repository.find_all_by_email(email)
        if not users:
            raise NotFoundError("User", email.root)

        decision = self.survivor_policy.decide(users, invitation)
        if isinstance(decision, ManualReview):
            logfire.warn(
                "Merge needs manual review",
                email=email.root,
                reason=decision.reason,
                candidates=[str(c) for c in decision.candidates],
            )
            raise MergeConflict(email.root, decision.reason)
        return users, decision

    async def merge(
        self,
        email: Email,
        invitation: Optional[Invitation],
        actor: str,
        now: Optional[datetime] = None,
        users: Optional[list[User]] = None,
    ) -> MergeResult:
        """Choose a survivor, apply the invitation and delete the other users.

        The survivor update, invitation acceptance and deletions are written
        together in the caller's transaction.

        Args:
            email: Normalized email
            invitation: Invitation whose data is applied, if any
            actor: Attribution for the audit trail
            now: Acceptance time for the invitation
            users: Users already loaded for the email

        Raises:
            NotFoundError: If no user holds the email
            MergeConflict: If the policy requires manual review
        """
        now = now or utcnow()
        with logfire.span(
            "merge_service.merge",
            email=email.root,
            actor=actor,
            invitation_id=str(invitation.id) if invitation else None,
        ):
            users, decision = await self.plan(email, invitation, users)

            original = next(u for u in users if u.id == decision.user_id)
            losers = [u.id for u in users if u.id != original.id]
            survivor = original
            if invitation is not None:
                survivor = self._apply_invitation(original, invitation, now)

            deleted = await self.user_repository.replace_duplicates(survivor, losers)

            if invitation is not None:
                await self.audit_log_repository.append_role_change(
                    RoleChange(
                        id=AuditEventId(uuid4()),
                        user_id=survivor.id,
                        role=survivor.role,
                        changed_by=actor,
                        changed_at=now,
                        reason=MERGE_REASON,
                    )
                )
                if survivor.has_access != original.has_access:
                    await self.audit_log_repository.append_access_change(
                        AccessChange(
                            id=AuditEventId(uuid4()),
                            user_id=survivor.id,
                            action=(
                                AccessAction.ACTIVATED
                                if survivor.has_access
                                else AccessAction.DEACTIVATED
                            ),
                            has_access=survivor.has_access,
                            changed_by=actor,
                            changed_at=now,
                            reason=MERGE_REASON,
                        )
                    )
                if invitation.status == InvitationStatus.PENDING:
                    accepted = await self.invitation_repository.accept_if_pending(
                        invitation.id, now
                    )
                    invitation = accepted or invitation

            logfire.info(
                "Duplicate users merged",
                email=email.root,
                survivor_id=str(survivor.id),
                decision=decision.kind,
                deleted=[str(i) for i in deleted],
            )
            return MergeResult(
                email=email,
                survivor=survivor,
                decision=decision,
                deleted_user_ids=deleted,
                invitation=invitation,
            )

    async def _find_invitation(
        self, email: Email, now: datetime
    ) -> Optional[Invitation]:
        pending = await self.invitation_repository.find_pending_by_email(email)
        if pending and pending.is_active(now):
            return pending
        return await self.invitation_repository.find_latest_by_email(
            email, status=InvitationStatus.ACCEPTED
        )

    @staticmethod
    def _apply_invitation(user: User, invitation: Invitation, now: datetime) -> User:
        return user.evolve(
            role=invitation.role,
            has_access=invitation.has_access,
            name=invitation.name or user.name,
            company=invitation.company or user.company,
            phone=invitation.phone or user.phone,
            updated_at=now,
        )
