"""Resend invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import DeliveryItem, InvitationItem
from provision.domain.model import utcnow
from provision.domain.service import InvitationService
from provision.domain.value import InvitationId


class ResendInvitationRequest(BaseModel):
    """Resend invitation request."""

    invitation_id: UUID
    acting_email: str


class ResendInvitationResponse(BaseModel):
    """Resend invitation response."""

    invitation: InvitationItem
    invite_url: str
    delivery: DeliveryItem


class ResendInvitationUseCase(
    UseCase[ResendInvitationRequest, ResendInvitationResponse]
):
    """Use case for refreshing and re-sending an invitation.

    The old link stops working: the token is regenerated.
    """

    def __init__(self, invitation_service: InvitationService) -> None:
        self.invitation_service = invitation_service

    async def execute(self, request: ResendInvitationRequest) -> ResendInvitationResponse:
        with logfire.span(
            "resend_invitation.execute",
            invitation_id=str(request.invitation_id),
            acting_email=request.acting_email,
        ):
            result = await self.invitation_service.resend(
                InvitationId(request.invitation_id), request.acting_email
            )
            return ResendInvitationResponse(
                invitation=InvitationItem.from_invitation(result.invitation, utcnow()),
                invite_url=result.invite_url,
                delivery=DeliveryItem.from_failure(result.delivery),
            )
