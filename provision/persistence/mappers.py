"""Row dicts from SQLAlchemy Core to frozen domain models and back.

Enum columns store the enum value; emails and tokens are stored as their
normalized strings.
"""

from typing import Any, Dict
from uuid import UUID

from provision.domain.model import AccessChange, Invitation, RoleChange, User
from provision.domain.value import (
    AccessAction,
    AuditEventId,
    Email,
    InvitationId,
    InvitationStatus,
    InvitationToken,
    Role,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Legacy ``user`` roles are read as client.
    """
    return User(
        id=UserId(_uuid(row["id"])),
        name=row["name"],
        email=Email(row["email"]),
        role=Role(row["role"]),
        has_access=row["has_access"],
        company=row.get("company"),
        phone=row.get("phone"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email.root,
        "role": user.role.value,
        "has_access": user.has_access,
        "company": user.company,
        "phone": user.phone,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def row_to_invitation(row: Dict[str, Any]) -> Invitation:
    """Convert database row to Invitation domain model."""
    return Invitation(
        id=InvitationId(_uuid(row["id"])),
        email=Email(row["email"]),
        name=row["name"],
        company=row.get("company"),
        phone=row.get("phone"),
        role=Role(row["role"]),
        has_access=row["has_access"],
        token=InvitationToken(row["token"]),
        invited_by=row["invited_by"],
        invited_at=row["invited_at"],
        expires_at=row["expires_at"],
        accepted_at=row.get("accepted_at"),
        status=InvitationStatus(row["status"]),
    )


def invitation_to_dict(invitation: Invitation) -> Dict[str, Any]:
    """Convert Invitation domain model to database dict."""
    return {
        "id": invitation.id,
        "email": invitation.email.root,
        "name": invitation.name,
        "company": invitation.company,
        "phone": invitation.phone,
        "role": invitation.role.value,
        "has_access": invitation.has_access,
        "token": invitation.token.root,
        "invited_by": invitation.invited_by,
        "invited_at": invitation.invited_at,
        "expires_at": invitation.expires_at,
        "accepted_at": invitation.accepted_at,
        "status": invitation.status.value,
    }


def row_to_role_change(row: Dict[str, Any]) -> RoleChange:
    return RoleChange(
        id=AuditEventId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        role=Role(row["role"]),
        changed_by=row["changed_by"],
        changed_at=row["changed_at"],
        reason=row.get("reason"),
    )


def role_change_to_dict(event: RoleChange) -> Dict[str, Any]:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "role": event.role.value,
        "changed_by": event.changed_by,
        "changed_at": event.changed_at,
        "reason": event.reason,
    }


def row_to_access_change(row: Dict[str, Any]) -> AccessChange:
    return AccessChange(
        id=AuditEventId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        action=AccessAction(row["action"]),
        has_access=row["has_access"],
        changed_by=row["changed_by"],
        changed_at=row["changed_at"],
        reason=row.get("reason"),
    )


def access_change_to_dict(event: AccessChange) -> Dict[str, Any]:
    return {
        "id": event.id,
        "user_id": event.user_id,
        "action": event.action.value,
        "has_access": event.has_access,
        "changed_by": event.changed_by,
        "changed_at": event.changed_at,
        "reason": event.reason,
    }
