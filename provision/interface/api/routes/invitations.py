"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query, Response, status
from pydantic import BaseModel, Field

from provision.application.usecase.invitation import (
    CancelInvitationRequest,
    CancelInvitationResponse,
    CancelInvitationUseCase,
    IssueInvitationRequest,
    IssueInvitationResponse,
    IssueInvitationUseCase,
    ListInvitationsRequest,
    ListInvitationsResponse,
    ListInvitationsUseCase,
    RedeemInvitationRequest,
    RedeemInvitationResponse,
    RedeemInvitationUseCase,
    ResendInvitationRequest,
    ResendInvitationResponse,
    ResendInvitationUseCase,
    ValidateInvitationRequest,
    ValidateInvitationResponse,
    ValidateInvitationUseCase,
)
from provision.config import Settings
from provision.domain.service import SessionTokenService
from provision.domain.value import InvitationStatus, Role
from provision.interface.api.auth import authenticate

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)


class IssueInvitationAPIRequest(BaseModel):
    """API request for issuing an invitation."""

    email: str
    name: str
    role: Role = Role.CLIENT
    has_access: bool = False
    company: str | None = None
    phone: str | None = None
    ttl_days: int | None = Field(default=None, ge=1, le=90)


class RedeemInvitationAPIRequest(BaseModel):
    """API request for redeeming an invitation."""

    token: str


@router.post(
    "", response_model=IssueInvitationResponse, status_code=status.HTTP_201_CREATED
)
async def issue_invitation(
    request: IssueInvitationAPIRequest,
    use_case: FromDishka[IssueInvitationUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> IssueInvitationResponse:
    """Issue an invitation and email the invite link.

    A failed email does not fail the request; the response's ``delivery``
    section reports it and suggests a resend.
    """
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        IssueInvitationRequest(
            invited_by_email=payload.email,
            **request.model_dump(),
        )
    )


@router.get("", response_model=ListInvitationsResponse)
async def list_invitations(
    use_case: FromDishka[ListInvitationsUseCase],
    session_tokens: FromDishka[SessionTokenService],
    status_filter: InvitationStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    auth_token: str | None = Cookie(default=None),
) -> ListInvitationsResponse:
    """List invitations, newest first."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        ListInvitationsRequest(
            acting_email=payload.email,
            status=status_filter,
            limit=limit,
            offset=offset,
        )
    )


@router.get("/validate", response_model=ValidateInvitationResponse)
async def validate_invitation(
    use_case: FromDishka[ValidateInvitationUseCase],
    token: str = Query(..., min_length=1),
) -> ValidateInvitationResponse:
    """Check an invite link before sign-in. Public, read-only."""
    return await use_case.execute(ValidateInvitationRequest(token=token))


@router.post("/redeem", response_model=RedeemInvitationResponse)
async def redeem_invitation(
    request: RedeemInvitationAPIRequest,
    response: Response,
    use_case: FromDishka[RedeemInvitationUseCase],
    session_tokens: FromDishka[SessionTokenService],
    settings: FromDishka[Settings],
    auth_token: str | None = Cookie(default=None),
) -> RedeemInvitationResponse:
    """Redeem an invitation for the signed-in identity.

    The session cookie is reissued so that it carries the account id.
    """
    payload = authenticate(session_tokens, auth_token)

    result = await use_case.execute(
        RedeemInvitationRequest(
            token=request.token,
            authenticated_email=payload.email,
        )
    )

    is_production = settings.environment == "production"
    response.set_cookie(
        key="auth_token",
        value=session_tokens.issue(email=result.user.email, user_id=result.user.id),
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        path="/",
        max_age=settings.auth.cookie_max_age,
    )
    return result


@router.post("/{invitation_id}/resend", response_model=ResendInvitationResponse)
async def resend_invitation(
    invitation_id: UUID,
    use_case: FromDishka[ResendInvitationUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> ResendInvitationResponse:
    """Rotate the token of a pending invitation and email it again."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        ResendInvitationRequest(invitation_id=invitation_id, acting_email=payload.email)
    )


@router.delete("/{invitation_id}", response_model=CancelInvitationResponse)
async def cancel_invitation(
    invitation_id: UUID,
    use_case: FromDishka[CancelInvitationUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> CancelInvitationResponse:
    """Cancel an invitation that has not been accepted."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        CancelInvitationRequest(invitation_id=invitation_id, acting_email=payload.email)
    )
