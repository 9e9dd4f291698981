"""Invitation use cases."""

from provision.application.usecase.invitation.cancel_invitation import (
    CancelInvitationRequest,
    CancelInvitationResponse,
    CancelInvitationUseCase,
)
from provision.application.usecase.invitation.expire_invitations import (
    ExpireInvitationsRequest,
    ExpireInvitationsResponse,
    ExpireInvitationsUseCase,
)
from provision.application.usecase.invitation.issue_invitation import (
    IssueInvitationRequest,
    IssueInvitationResponse,
    IssueInvitationUseCase,
)
from provision.application.usecase.invitation.list_invitations import (
    ListInvitationsRequest,
    ListInvitationsResponse,
    ListInvitationsUseCase,
)
from provision.application.usecase.invitation.redeem_invitation import (
    RedeemInvitationRequest,
    RedeemInvitationResponse,
    RedeemInvitationUseCase,
)
from provision.application.usecase.invitation.resend_invitation import (
    ResendInvitationRequest,
    ResendInvitationResponse,
    ResendInvitationUseCase,
)
from provision.application.usecase.invitation.validate_invitation import (
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)

__all__ = [
    "CancelInvitationRequest",
    "CancelInvitationResponse",
    "CancelInvitationUseCase",
    "ExpireInvitationsRequest",
    "ExpireInvitationsResponse",
    "ExpireInvitationsUseCase",
    "IssueInvitationRequest",
    "IssueInvitationResponse",
    "IssueInvitationUseCase",
    "ListInvitationsRequest",
    "ListInvitationsResponse",
    "ListInvitationsUseCase",
    "RedeemInvitationRequest",
    "RedeemInvitationResponse",
    "RedeemInvitationUseCase",
    "ResendInvitationRequest",
    "ResendInvitationResponse",
    "ResendInvitationUseCase",
    "ValidateInvitationRequest",
    "ValidateInvitationResponse",
    "ValidateInvitationUseCase",
]
