"""Validate invitation use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.domain.error import ExpiredToken, InvalidToken, StatusConflict
from provision.domain.model import utcnow
from provision.domain.service import InvitationService
from provision.domain.value import InvitationStatus, Role


class ValidateInvitationRequest(BaseModel):
    """Validate invitation request."""

    token: str


class ValidateInvitationResponse(BaseModel):
    """Validate invitation response.

    Only what the invitee needs to see before signing in.
    """

    valid: bool
    status: InvitationStatus | None = None
    email: str | None = None
    name: str | None = None
    role: Role | None = None
    expires_at: datetime | None = None
    message: str | None = None


class ValidateInvitationUseCase(
    UseCase[ValidateInvitationRequest, ValidateInvitationResponse]
):
    """Use case for checking an invitation link before sign-in.

    Lets the frontend show a friendly message instead of redirecting to the
    identity provider with a dead link.
    """

    def __init__(self, invitation_service: InvitationService) -> None:
        """Initialize validate invitation use case.

        Args:
            invitation_service: Invitation domain service
        """
        self.invitation_service = invitation_service

    async def execute(
        self, request: ValidateInvitationRequest
    ) -> ValidateInvitationResponse:
        """Validate an invitation token.

        Args:
            request: Validation request with token

        Returns:
            Validation response with invitation details or the reason it is unusable
        """
        with logfire.span(
            "validate_invitation.execute", token=request.token[:8] + "..."
        ):
            try:
                invitation = await self.invitation_service.validate(request.token)
            except InvalidToken:
                return ValidateInvitationResponse(
                    valid=False, message="Invitation not found"
                )
            except ExpiredToken:
                return ValidateInvitationResponse(
                    valid=False,
                    status=InvitationStatus.EXPIRED,
                    message="Invitation has expired",
                )
            except StatusConflict as e:
                return ValidateInvitationResponse(
                    valid=False,
                    status=InvitationStatus(e.status),
                    message="Invitation has already been accepted",
                )

            logfire.info("Valid invitation found", invitation_id=str(invitation.id))
            return ValidateInvitationResponse(
                valid=True,
                status=invitation.effective_status(utcnow()),
                email=invitation.email.root,
                name=invitation.name,
                role=invitation.role,
                expires_at=invitation.expires_at,
                message="Valid invitation",
            )
