"""User domain service."""

from typing import Optional

import logfire

from provision.domain.error import NotFoundError
from provision.domain.model import AccessChange, RoleChange, User
from provision.domain.repository import AuditLogRepository, UserRepository
from provision.domain.value import Role, UserId


class UserService:
    """Domain service for user lookups and history."""

    def __init__(
        self,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
    ) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
            audit_log_repository: Role and access event log
        """
        self.user_repository = user_repository
        self.audit_log_repository = audit_log_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        return await self.user_repository.find_by_id(user_id)

    async def list_users(
        self,
        role: Optional[Role] = None,
        has_access: Optional[bool] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[User]:
        with logfire.span(
            "user_service.list_users",
            role=role.value if role else None,
            has_access=has_access,
        ):
            return await self.user_repository.list_users(
                role=role, has_access=has_access, limit=limit, offset=offset
            )

    async def role_stats(self) -> dict[Role, int]:
        """Count users per role, including roles nobody holds."""
        counts = await self.user_repository.count_by_role()
        return {role: counts.get(role, 0) for role in Role}

    async def get_role_history(self, user_id: UserId) -> list[RoleChange]:
        """Ordered role history for a user, oldest first."""
        with logfire.span("user_service.get_role_history", user_id=str(user_id)):
            return await self.audit_log_repository.list_role_changes(user_id)

    async def get_access_history(self, user_id: UserId) -> list[AccessChange]:
        """Ordered access history for a user, oldest first."""
        with logfire.span("user_service.get_access_history", user_id=str(user_id)):
            return await self.audit_log_repository.list_access_changes(user_id)
