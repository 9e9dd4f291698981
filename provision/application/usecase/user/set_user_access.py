"""Set user access use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import UserItem
from provision.domain.service import AccessControlService
from provision.domain.value import AccessAction, UserId


class SetUserAccessRequest(BaseModel):
    """Set user access request."""

    acting_admin_id: UUID
    target_user_id: UUID
    has_access: bool
    reason: str | None = Field(default=None, max_length=500)


class AccessEventItem(BaseModel):
    """Access change as recorded in the history."""

    action: AccessAction
    has_access: bool
    changed_by: str
    changed_at: datetime
    reason: str | None


class SetUserAccessResponse(BaseModel):
    """Set user access response."""

    user: UserItem
    event: AccessEventItem | None = None


class SetUserAccessUseCase(UseCase[SetUserAccessRequest, SetUserAccessResponse]):
    """Use case for an admin granting or revoking a user's access."""

    def __init__(self, access_control_service: AccessControlService) -> None:
        self.access_control_service = access_control_service

    async def execute(self, request: SetUserAccessRequest) -> SetUserAccessResponse:
        with logfire.span(
            "set_user_access.execute",
            acting_admin_id=str(request.acting_admin_id),
            target_user_id=str(request.target_user_id),
            has_access=request.has_access,
        ):
            result = await self.access_control_service.set_access(
                UserId(request.acting_admin_id),
                UserId(request.target_user_id),
                request.has_access,
                request.reason,
            )
            event = None
            if result.event:
                event = AccessEventItem(
                    action=result.event.action,
                    has_access=result.event.has_access,
                    changed_by=result.event.changed_by,
                    changed_at=result.event.changed_at,
                    reason=result.event.reason,
                )
            return SetUserAccessResponse(user=UserItem.from_user(result.user), event=event)
