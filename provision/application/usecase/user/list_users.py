"""List users use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import UserItem
from provision.domain.service import AccessPolicy, UserService
from provision.domain.value import Permission, Role, UserId


class ListUsersRequest(BaseModel):
    """List users request."""

    acting_admin_id: UUID
    role: Role | None = None
    has_access: bool | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListUsersResponse(BaseModel):
    """List users response with per-role counts."""

    users: list[UserItem]
    role_stats: dict[Role, int]
    permissions: dict[Role, list[Permission]]
    limit: int
    offset: int


class ListUsersUseCase(UseCase[ListUsersRequest, ListUsersResponse]):
    """Use case for the admin user list."""

    def __init__(self, user_service: UserService, access_policy: AccessPolicy) -> None:
        self.user_service = user_service
        self.access_policy = access_policy

    async def execute(self, request: ListUsersRequest) -> ListUsersResponse:
        with logfire.span(
            "list_users.execute", acting_admin_id=str(request.acting_admin_id)
        ):
            actor = await self.user_service.find_by_id(UserId(request.acting_admin_id))
            self.access_policy.require_user_manager(
                actor, "list users", str(request.acting_admin_id)
            )

            users = await self.user_service.list_users(
                role=request.role,
                has_access=request.has_access,
                limit=request.limit,
                offset=request.offset,
            )
            stats = await self.user_service.role_stats()
            return ListUsersResponse(
                users=[UserItem.from_user(u) for u in users],
                role_stats=stats,
                permissions={
                    role: sorted(role.permissions(), key=lambda p: p.value)
                    for role in Role
                },
                limit=request.limit,
                offset=request.offset,
            )
