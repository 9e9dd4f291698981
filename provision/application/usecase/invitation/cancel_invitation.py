"""Cancel invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.domain.service import InvitationService
from provision.domain.value import InvitationId


class CancelInvitationRequest(BaseModel):
    """Cancel invitation request."""

    invitation_id: UUID
    acting_email: str


class CancelInvitationResponse(BaseModel):
    """Cancel invitation response."""

    id: str
    email: str
    cancelled: bool = True


class CancelInvitationUseCase(
    UseCase[CancelInvitationRequest, CancelInvitationResponse]
):
    """Use case for withdrawing an invitation before it is accepted."""

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: CancelInvitationRequest) -> CancelInvitationResponse:
        with logfire.span(
            "cancel_invitation.execute", invitation_id=str(request.invitation_id)
        ):
            invitation = await self.invitation_service.cancel(
                InvitationId(request.invitation_id), request.acting_email
            )
            return CancelInvitationResponse(
                id=str(invitation.id), email=invitation.email.root
            )
