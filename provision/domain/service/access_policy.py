"""Access policy domain service."""

import logfire

from provision.domain.error import InvalidRoleAssignment, PermissionDenied
from provision.domain.model import User
from provision.domain.value import Email, Permission, Role


class AccessPolicy:
    """Decides who may manage users and who may hold the admin role.

    The admin role is reserved for emails in a trusted operator domain.
    Granting it (by invitation or role change) additionally requires the
    acting user to be a trusted operator themselves.
    """

    def __init__(self, trusted_admin_domains: list[str]) -> None:
        """Initialize access policy.

        Args:
            trusted_admin_domains: Email domains allowed to hold the admin role
        """
        self.trusted_admin_domains = frozenset(
            domain.strip().lower().lstrip("@") for domain in trusted_admin_domains
        )

    def is_trusted_email(self, email: Email) -> bool:
        return email.domain in self.trusted_admin_domains

    def can_manage_users(self, user: User) -> bool:
        return user.role.has_permission(Permission.MANAGE_USERS)

    def is_trusted_operator(self, user: User) -> bool:
        """Admin role held by an email in a trusted domain."""
        return user.role == Role.ADMIN and self.is_trusted_email(user.email)

    def require_user_manager(self, actor: User | None, action: str, actor_ref: str) -> User:
        """Ensure the actor exists and may manage users.

        Args:
            actor: Acting user, or None if unknown
            action: Description of the attempted action
            actor_ref: How to name the actor in the error

        Returns:
            The actor

        Raises:
            PermissionDenied: If the actor is unknown or lacks the capability
        """
        if actor is None or not self.can_manage_users(actor):
            logfire.warn("Permission denied", actor=actor_ref, action=action)
            raise PermissionDenied(actor_ref, action)
        return actor

    def require_can_grant(self, actor: User, role: Role, action: str) -> None:
        """Ensure the actor may hand out ``role``.

        Raises:
            PermissionDenied: If granting admin and the actor is not a trusted operator
        """
        if role == Role.ADMIN and not self.is_trusted_operator(actor):
            logfire.warn(
                "Admin grant denied", actor=actor.email.root, action=action
            )
            raise PermissionDenied(actor.email.root, action)

    def require_assignable(self, role: Role, email: Email) -> None:
        """Ensure ``role`` may be held by ``email``.

        Raises:
            InvalidRoleAssignment: If assigning admin outside the trusted domains
        """
        if role == Role.ADMIN and not self.is_trusted_email(email):
            logfire.warn(
                "Invalid role assignment", email=email.root, role=role.value
            )
            raise InvalidRoleAssignment(email.root, role.value)
