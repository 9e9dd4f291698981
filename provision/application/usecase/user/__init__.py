"""User use cases."""

from provision.application.usecase.user.get_user_history import (
    GetUserHistoryRequest,
    GetUserHistoryResponse,
    GetUserHistoryUseCase,
)
from provision.application.usecase.user.list_users import (
    ListUsersRequest,
    ListUsersResponse,
    ListUsersUseCase,
)
from provision.application.usecase.user.resolve_duplicates import (
    ResolveDuplicatesRequest,
    ResolveDuplicatesResponse,
    ResolveDuplicatesUseCase,
)
from provision.application.usecase.user.set_user_access import (
    SetUserAccessRequest,
    SetUserAccessResponse,
    SetUserAccessUseCase,
)
from provision.application.usecase.user.set_user_role import (
    SetUserRoleRequest,
    SetUserRoleResponse,
    SetUserRoleUseCase,
)

__all__ = [
    "GetUserHistoryRequest",
    "GetUserHistoryResponse",
    "GetUserHistoryUseCase",
    "ListUsersRequest",
    "ListUsersResponse",
    "ListUsersUseCase",
    "ResolveDuplicatesRequest",
    "ResolveDuplicatesResponse",
    "ResolveDuplicatesUseCase",
    "SetUserAccessRequest",
    "SetUserAccessResponse",
    "SetUserAccessUseCase",
    "SetUserRoleRequest",
    "SetUserRoleResponse",
    "SetUserRoleUseCase",
]
