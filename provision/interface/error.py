"""Interface layer error mapping.

Domain errors become JSON bodies of the form
``{"error": <code>, "message": <text>}`` with a status per error kind.
"""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from provision.domain.error import (
    DomainError,
    DuplicateInvitation,
    ExpiredToken,
    IdentityMismatch,
    InvalidRoleAssignment,
    InvalidToken,
    InvitationConflict,
    MergeConflict,
    NotFoundError,
    PermissionDenied,
    SelfModificationDenied,
    StatusConflict,
    ValidationError,
)
from provision.domain.repository import UnitOfWork

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    PermissionDenied: status.HTTP_403_FORBIDDEN,
    InvitationConflict: status.HTTP_409_CONFLICT,
    DuplicateInvitation: status.HTTP_409_CONFLICT,
    InvalidToken: status.HTTP_404_NOT_FOUND,
    ExpiredToken: status.HTTP_410_GONE,
    StatusConflict: status.HTTP_409_CONFLICT,
    IdentityMismatch: status.HTTP_403_FORBIDDEN,
    SelfModificationDenied: status.HTTP_400_BAD_REQUEST,
    InvalidRoleAssignment: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    MergeConflict: status.HTTP_409_CONFLICT,
}


def status_for(error: DomainError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


async def discard_request_writes(request: Request, exc: DomainError) -> None:
    """Roll back the request transaction before the error becomes a response.

    The response ends the request normally, so the request scope would
    otherwise commit. An expired token keeps the expiry mark it recorded.
    """
    if isinstance(exc, ExpiredToken):
        return
    container = getattr(request.state, "dishka_container", None)
    if container is None:
        return
    unit_of_work = await container.get(UnitOfWork)
    await unit_of_work.rollback()


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    await discard_request_writes(request, exc)
    status_code = status_for(exc)
    logfire.info(
        "Domain error response",
        code=exc.code,
        status_code=status_code,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.code, "message": exc.message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses."""
    app.add_exception_handler(DomainError, handle_domain_error)
