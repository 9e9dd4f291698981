"""Get user history use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import UserItem
from provision.domain.service import AccessPolicy, UserService
from provision.domain.value import AccessAction, Role, UserId


class GetUserHistoryRequest(BaseModel):
    """Get user history request."""

    acting_admin_id: UUID
    user_id: UUID


class RoleHistoryItem(BaseModel):
    role: Role
    changed_by: str
    changed_at: datetime
    reason: str | None


class AccessHistoryItem(BaseModel):
    action: AccessAction
    has_access: bool
    changed_by: str
    changed_at: datetime
    reason: str | None


class GetUserHistoryResponse(BaseModel):
    """Get user history response."""

    user: UserItem
    role_history: list[RoleHistoryItem]
    access_history: list[AccessHistoryItem]


class GetUserHistoryUseCase(UseCase[GetUserHistoryRequest, GetUserHistoryResponse]):
    """Use case for viewing who changed a user's role and access, and when."""

    def __init__(self, user_service: UserService, access_policy: AccessPolicy) -> None:
        """Initialize get user history use case.

        Args:
            user_service: User domain service
            access_policy: Capability checks
        """
        self.user_service = user_service
        self.access_policy = access_policy

    async def execute(self, request: GetUserHistoryRequest) -> GetUserHistoryResponse:
        """Return the ordered role and access history of a user.

        Raises:
            PermissionDenied: If the actor cannot manage users
            NotFoundError: If the user does not exist
        """
        with logfire.span(
            "get_user_history.execute",
            acting_admin_id=str(request.acting_admin_id),
            user_id=str(request.user_id),
        ):
            actor = await self.user_service.find_by_id(UserId(request.acting_admin_id))
            self.access_policy.require_user_manager(
                actor, "view user history", str(request.acting_admin_id)
            )

            user = await self.user_service.get_by_id(UserId(request.user_id))
            roles = await self.user_service.get_role_history(user.id)
            access = await self.user_service.get_access_history(user.id)

            return GetUserHistoryResponse(
                user=UserItem.from_user(user),
                role_history=[
                    RoleHistoryItem(
                        role=e.role,
                        changed_by=e.changed_by,
                        changed_at=e.changed_at,
                        reason=e.reason,
                    )
                    for e in roles
                ],
                access_history=[
                    AccessHistoryItem(
                        action=e.action,
                        has_access=e.has_access,
                        changed_by=e.changed_by,
                        changed_at=e.changed_at,
                        reason=e.reason,
                    )
                    for e in access
                ],
            )
