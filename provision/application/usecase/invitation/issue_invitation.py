"""Issue invitation use case."""

from datetime import timedelta

import logfire
from pydantic import BaseModel, Field

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import DeliveryItem, InvitationItem
from provision.domain.model import utcnow
from provision.domain.service import InvitationService
from provision.domain.value import Role


class IssueInvitationRequest(BaseModel):
    """Issue invitation request."""

    invited_by_email: str
    email: str
    name: str
    role: Role = Role.CLIENT
    has_access: bool = False
    company: str | None = None
    phone: str | None = None
    ttl_days: int | None = Field(default=None, ge=1, le=90)


class IssueInvitationResponse(BaseModel):
    """Issue invitation response."""

    invitation: InvitationItem
    invite_url: str
    delivery: DeliveryItem


class IssueInvitationUseCase(UseCase[IssueInvitationRequest, IssueInvitationResponse]):
    """Use case for an admin inviting someone to create an account."""

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize issue invitation use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(self, request: IssueInvitationRequest) -> IssueInvitationResponse:
        """Issue the invitation and report delivery.

        Args:
            request: Invitation details and the acting admin

        Returns:
            The stored invitation and whether the email went out
        """
        with logfire.span(
            "issue_invitation.execute",
            invited_by=request.invited_by_email,
            email=request.email,
        ):
            result = await self.invitation_service.issue(
                email=request.email,
                name=request.name,
                role=request.role,
                has_access=request.has_access,
                invited_by_email=request.invited_by_email,
                ttl=timedelta(days=request.ttl_days) if request.ttl_days else None,
                company=request.company,
                phone=request.phone,
            )
            return IssueInvitationResponse(
                invitation=InvitationItem.from_invitation(result.invitation, utcnow()),
                invite_url=result.invite_url,
                delivery=DeliveryItem.from_failure(result.delivery),
            )
