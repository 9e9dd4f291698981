"""User administration routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Query
from pydantic import BaseModel, Field

from provision.application.usecase.user import (
    GetUserHistoryRequest,
    GetUserHistoryResponse,
    GetUserHistoryUseCase,
    ListUsersRequest,
    ListUsersResponse,
    ListUsersUseCase,
    ResolveDuplicatesRequest,
    ResolveDuplicatesResponse,
    ResolveDuplicatesUseCase,
    SetUserAccessRequest,
    SetUserAccessResponse,
    SetUserAccessUseCase,
    SetUserRoleRequest,
    SetUserRoleResponse,
    SetUserRoleUseCase,
)
from provision.domain.service import SessionTokenService
from provision.domain.value import Role
from provision.interface.api.auth import authenticate, require_user_id

router = APIRouter(prefix="/users", tags=["users"], route_class=DishkaRoute)


class SetRoleAPIRequest(BaseModel):
    role: Role
    reason: str | None = Field(default=None, max_length=500)


class SetAccessAPIRequest(BaseModel):
    has_access: bool
    reason: str | None = Field(default=None, max_length=500)


class ResolveDuplicatesAPIRequest(BaseModel):
    email: str


@router.get("", response_model=ListUsersResponse)
async def list_users(
    use_case: FromDishka[ListUsersUseCase],
    session_tokens: FromDishka[SessionTokenService],
    role: Role | None = Query(default=None),
    has_access: bool | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    auth_token: str | None = Cookie(default=None),
) -> ListUsersResponse:
    """List users with role statistics and the permission catalog."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        ListUsersRequest(
            acting_admin_id=require_user_id(payload),
            role=role,
            has_access=has_access,
            limit=limit,
            offset=offset,
        )
    )


@router.patch("/{user_id}/role", response_model=SetUserRoleResponse)
async def set_user_role(
    user_id: UUID,
    request: SetRoleAPIRequest,
    use_case: FromDishka[SetUserRoleUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> SetUserRoleResponse:
    """Change a user's role. Recorded in the role history."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        SetUserRoleRequest(
            acting_admin_id=require_user_id(payload),
            target_user_id=user_id,
            role=request.role,
            reason=request.reason,
        )
    )


@router.patch("/{user_id}/access", response_model=SetUserAccessResponse)
async def set_user_access(
    user_id: UUID,
    request: SetAccessAPIRequest,
    use_case: FromDishka[SetUserAccessUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> SetUserAccessResponse:
    """Activate or deactivate a user. Recorded in the access history."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        SetUserAccessRequest(
            acting_admin_id=require_user_id(payload),
            target_user_id=user_id,
            has_access=request.has_access,
            reason=request.reason,
        )
    )


@router.get("/{user_id}/history", response_model=GetUserHistoryResponse)
async def get_user_history(
    user_id: UUID,
    use_case: FromDishka[GetUserHistoryUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> GetUserHistoryResponse:
    """Role and access history of a user, oldest first."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        GetUserHistoryRequest(acting_admin_id=require_user_id(payload), user_id=user_id)
    )


@router.post("/cleanup-duplicates", response_model=ResolveDuplicatesResponse)
async def cleanup_duplicates(
    request: ResolveDuplicatesAPIRequest,
    use_case: FromDishka[ResolveDuplicatesUseCase],
    session_tokens: FromDishka[SessionTokenService],
    auth_token: str | None = Cookie(default=None),
) -> ResolveDuplicatesResponse:
    """Merge the accounts sharing an email into one."""
    payload = authenticate(session_tokens, auth_token)

    return await use_case.execute(
        ResolveDuplicatesRequest(email=request.email, acting_email=payload.email)
    )
