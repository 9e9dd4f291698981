"""Role and access control domain service."""

from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

import logfire

from provision.domain.error import NotFoundError, SelfModificationDenied
from provision.domain.model import AccessChange, RoleChange, User, utcnow
from provision.domain.repository import AuditLogRepository, UserRepository
from provision.domain.value import AccessAction, AuditEventId, Role, UserId

from .access_policy import AccessPolicy

DEFAULT_ROLE_REASON = "Role updated by admin"


@dataclass
class AccessResult:
    """User after an access change, and the event it produced."""

    user: User
    event: AccessChange | None = None


class AccessControlService:
    """Domain service for admin changes to roles and access flags.

    Every effective change appends exactly one audit event attributed to the
    acting admin. Requests that change nothing append nothing.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
        access_policy: AccessPolicy,
    ) -> None:
        """Initialize access control service.

        Args:
            user_repository: User repository
            audit_log_repository: Role and access event log
            access_policy: Capability and role checks
        """
        self.user_repository = user_repository
        self.audit_log_repository = audit_log_repository
        self.access_policy = access_policy

    async def set_role(
        self,
        acting_admin_id: UserId,
        target_user_id: UserId,
        new_role: Role,
        reason: Optional[str] = None,
    ) -> User:
        """Change a user's role.

        Args:
            acting_admin_id: Admin performing the change
            target_user_id: User whose role changes
            new_role: Role to assign
            reason: Free-text reason recorded in the history

        Returns:
            The updated user (unchanged if the role was already set)

        Raises:
            PermissionDenied: If the actor cannot manage users
            NotFoundError: If the target does not exist
            InvalidRoleAssignment: If admin is assigned outside the trusted domains
        """
        with logfire.span(
            "access_control_service.set_role",
            acting_admin_id=str(acting_admin_id),
            target_user_id=str(target_user_id),
            new_role=new_role.value,
        ):
            actor = await self._require_admin(acting_admin_id, "change roles")
            target = await self._get_target(target_user_id)
            self.access_policy.require_assignable(new_role, target.email)
            self.access_policy.require_can_grant(actor, new_role, "grant the admin role")

            if target.role == new_role:
                logfire.info("Role unchanged", user_id=str(target.id))
                return target

            now = utcnow()
            updated = target.evolve(role=new_role, updated_at=now)
            await self.user_repository.save(updated)
            await self.audit_log_repository.append_role_change(
                RoleChange(
                    id=AuditEventId(uuid4()),
                    user_id=target.id,
                    role=new_role,
                    changed_by=actor.email.root,
                    changed_at=now,
                    reason=reason or DEFAULT_ROLE_REASON,
                )
            )
            logfire.info(
                "Role changed",
                user_id=str(target.id),
                old_role=target.role.value,
                new_role=new_role.value,
                changed_by=actor.email.root,
            )
            return updated

    async def set_access(
        self,
        acting_admin_id: UserId,
        target_user_id: UserId,
        has_access: bool,
        reason: Optional[str] = None,
    ) -> AccessResult:
        """Grant or revoke a user's access.

        Args:
            acting_admin_id: Admin performing the change
            target_user_id: User whose access changes
            has_access: New access flag
            reason: Optional reason recorded in the history

        Returns:
            The user and the emitted event (None if nothing changed)

        Raises:
            SelfModificationDenied: If the actor targets themselves
            PermissionDenied: If the actor cannot manage users
            NotFoundError: If the target does not exist
        """
        with logfire.span(
            "access_control_service.set_access",
            acting_admin_id=str(acting_admin_id),
            target_user_id=str(target_user_id),
            has_access=has_access,
        ):
            if acting_admin_id == target_user_id:
                logfire.warn("Self access modification", user_id=str(acting_admin_id))
                raise SelfModificationDenied()

            actor = await self._require_admin(acting_admin_id, "change access")
            target = await self._get_target(target_user_id)

            if target.has_access == has_access:
                logfire.info("Access unchanged", user_id=str(target.id))
                return AccessResult(user=target)

            now = utcnow()
            updated = target.evolve(has_access=has_access, updated_at=now)
            await self.user_repository.save(updated)
            event = await self.audit_log_repository.append_access_change(
                AccessChange(
                    id=AuditEventId(uuid4()),
                    user_id=target.id,
                    action=(
                        AccessAction.ACTIVATED if has_access else AccessAction.DEACTIVATED
                    ),
                    has_access=has_access,
                    changed_by=actor.email.root,
                    changed_at=now,
                    reason=reason,
                )
            )
            logfire.info(
                "Access changed",
                user_id=str(target.id),
                has_access=has_access,
                changed_by=actor.email.root,
            )
            return AccessResult(user=updated, event=event)

    async def _require_admin(self, acting_admin_id: UserId, action: str) -> User:
        actor = await self.user_repository.find_by_id(acting_admin_id)
        return self.access_policy.require_user_manager(
            actor, action, str(acting_admin_id)
        )

    async def _get_target(self, user_id: UserId) -> User:
        target = await self.user_repository.find_by_id(user_id)
        if not target:
            raise NotFoundError("User", str(user_id))
        return target
