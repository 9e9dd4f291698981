"""Redeem invitation use case."""

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import DeliveryItem, UserItem
from provision.domain.service import RedemptionService


class RedeemInvitationRequest(BaseModel):
    """Redeem invitation request."""

    token: str
    authenticated_email: str


class RedeemInvitationResponse(BaseModel):
    """Redeem invitation response."""

    user: UserItem
    invitation_id: str
    merged: bool
    deleted_user_ids: list[str] = []
    delivery: DeliveryItem


class RedeemInvitationUseCase(
    UseCase[RedeemInvitationRequest, RedeemInvitationResponse]
):
    """Use case for turning an invitation into an account after sign-in."""

    def __init__(self, redemption_service: RedemptionService) -> None:
        """Initialize redeem invitation use case.

        Args:
            redemption_service: Redemption domain service
        """
        self.redemption_service = redemption_service

    async def execute(self, request: RedeemInvitationRequest) -> RedeemInvitationResponse:
        with logfire.span(
            "redeem_invitation.execute",
            token=request.token[:8] + "...",
            authenticated_email=request.authenticated_email,
        ):
            result = await self.redemption_service.redeem(
                request.token, request.authenticated_email
            )
            return RedeemInvitationResponse(
                user=UserItem.from_user(result.user),
                invitation_id=str(result.invitation.id),
                merged=result.merged,
                deleted_user_ids=(
                    [str(i) for i in result.merge.deleted_user_ids] if result.merge else []
                ),
                delivery=DeliveryItem.from_failure(result.delivery),
            )
