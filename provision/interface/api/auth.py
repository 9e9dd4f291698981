"""Cookie authentication helpers for routes."""

from uuid import UUID

from fastapi import HTTPException, status

from provision.domain.service import (
    InvalidSessionToken,
    SessionClaims,
    SessionTokenService,
)


def authenticate(
    session_tokens: SessionTokenService, auth_token: str | None
) -> SessionClaims:
    """Verify the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing or invalid
    """
    if not auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return session_tokens.read(auth_token)
    except InvalidSessionToken as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


def require_user_id(payload: SessionClaims) -> UUID:
    """Account id of an authenticated identity that has redeemed an invitation.

    Raises:
        HTTPException: 401 if the token carries no valid account id
    """
    try:
        return UUID(payload.user_id) if payload.user_id else _no_account()
    except ValueError:
        return _no_account()


def _no_account() -> UUID:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No account for this session",
    )
