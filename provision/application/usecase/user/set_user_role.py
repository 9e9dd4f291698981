"""Set user role use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import UserItem
from provision.domain.service import AccessControlService
from provision.domain.value import Role, UserId


class SetUserRoleRequest(BaseModel):
    """Set user role request."""

    acting_admin_id: UUID
    target_user_id: UUID
    role: Role
    reason: str | None = Field(default=None, max_length=500)


class SetUserRoleResponse(BaseModel):
    """Set user role response."""

    user: UserItem


class SetUserRoleUseCase(UseCase[SetUserRoleRequest, SetUserRoleResponse]):
    """Use case for an admin changing a user's role."""

    def __init__(self, access_control_service: AccessControlService) -> None:
        self.access_control_service = access_control_service

    async def execute(self, request: SetUserRoleRequest) -> SetUserRoleResponse:
        with logfire.span(
            "set_user_role.execute",
            acting_admin_id=str(request.acting_admin_id),
            target_user_id=str(request.target_user_id),
            role=request.role.value,
        ):
            user = await self.access_control_service.set_role(
                UserId(request.acting_admin_id),
                UserId(request.target_user_id),
                request.role,
                request.reason,
            )
            return SetUserRoleResponse(user=UserItem.from_user(user))
