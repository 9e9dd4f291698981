"""Signed session tokens carried in the ``auth_token`` cookie."""

from datetime import datetime, timedelta

import jwt
import logfire
from pydantic import BaseModel

from provision.config import AuthSettings
from provision.domain.model.common import utcnow


class SessionClaims(BaseModel):
    """Claims of a verified session token.

    ``user_id`` is absent for an identity that has signed in but not yet
    redeemed an invitation.
    """

    email: str
    user_id: str | None = None
    exp: datetime


class InvalidSessionToken(Exception):
    pass


class SessionTokenService:
    def __init__(self, auth_settings: AuthSettings) -> None:
        self._secret = auth_settings.jwt_secret
        self._algorithm = auth_settings.jwt_algorithm
        self._lifetime = timedelta(days=auth_settings.jwt_expiry_days)

    def issue(self, email: str, user_id: str | None = None) -> str:
        """Sign a token for ``email``, bound to an account once one exists."""
        claims = {"email": email, "user_id": user_id, "exp": utcnow() + self._lifetime}
        logfire.debug("Session token issued", email=email, has_account=bool(user_id))
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def read(self, token: str) -> SessionClaims:
        """Verify a token's signature and expiry and return its claims.

        Raises:
            InvalidSessionToken: If the token is expired, tampered with or malformed
        """
        try:
            decoded = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidSessionToken("Session has expired")
        except jwt.InvalidTokenError:
            logfire.warn("Rejected malformed session token")
            raise InvalidSessionToken("Invalid session token")
        return SessionClaims(**decoded)
