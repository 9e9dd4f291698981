"""Domain value objects for account provisioning."""

from provision.domain.value.identifiers import AuditEventId, InvitationId, UserId
from provision.domain.value.types import (
    AccessAction,
    Email,
    InvitationStatus,
    InvitationToken,
    NotificationTemplate,
    PartialFailure,
    Permission,
    Role,
    ROLE_PERMISSIONS,
    parse_email,
    parse_role,
)

__all__ = [
    # Identifiers
    "UserId",
    "InvitationId",
    "AuditEventId",
    # Types
    "AccessAction",
    "Email",
    "InvitationStatus",
    "InvitationToken",
    "NotificationTemplate",
    "PartialFailure",
    "Permission",
    "Role",
    "ROLE_PERMISSIONS",
    "parse_email",
    "parse_role",
]
