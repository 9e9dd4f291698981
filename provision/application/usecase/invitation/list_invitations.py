"""List invitations use case."""

import logfire
from pydantic import BaseModel, Field

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import InvitationItem
from provision.domain.model import utcnow
from provision.domain.repository import UserRepository
from provision.domain.service import AccessPolicy, InvitationService
from provision.domain.value import InvitationStatus, parse_email


class ListInvitationsRequest(BaseModel):
    """List invitations request."""

    acting_email: str
    status: InvitationStatus | None = None
    limit: int = Field(default=50, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListInvitationsResponse(BaseModel):
    """List invitations response."""

    invitations: list[InvitationItem]
    limit: int
    offset: int


class ListInvitationsUseCase(UseCase[ListInvitationsRequest, ListInvitationsResponse]):
    """Use case for the admin invitation list."""

    def __init__(
        self,
        invitation_service: InvitationService,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
    ) -> None:
        self.invitation_service = invitation_service
        self.user_repository = user_repository
        self.access_policy = access_policy

    async def execute(self, request: ListInvitationsRequest) -> ListInvitationsResponse:
        with logfire.span(
            "list_invitations.execute",
            acting_email=request.acting_email,
            status=request.status.value if request.status else None,
        ):
            actor_email = parse_email(request.acting_email)
            actor = await self.user_repository.find_by_email(actor_email)
            self.access_policy.require_user_manager(
                actor, "list invitations", actor_email.root
            )

            invitations = await self.invitation_service.list_invitations(
                status=request.status, limit=request.limit, offset=request.offset
            )
            now = utcnow()
            return ListInvitationsResponse(
                invitations=[InvitationItem.from_invitation(i, now) for i in invitations],
                limit=request.limit,
                offset=request.offset,
            )
