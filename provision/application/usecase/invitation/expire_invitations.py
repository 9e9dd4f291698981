"""Expire invitations use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.domain.service import InvitationService


class ExpireInvitationsRequest(BaseModel):
    """Expire invitations request."""

    now: datetime | None = None


class ExpireInvitationsResponse(BaseModel):
    """Expire invitations response."""

    expired: int


class ExpireInvitationsUseCase(
    UseCase[ExpireInvitationsRequest, ExpireInvitationsResponse]
):
    """Use case for the periodic sweep of stale pending invitations."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: ExpireInvitationsRequest) -> ExpireInvitationsResponse:
        with logfire.span("expire_invitations.execute"):
            expired = await self.invitation_service.expire_stale(request.now)
            return ExpireInvitationsResponse(expired=expired)
