"""Domain value objects for account provisioning.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import field_validator

from provision.domain.error import ValidationError
from provision.domain.value.common import RootValueObject, ValueObject

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Permission(str, Enum):
    """Capabilities granted by roles."""

    MANAGE_USERS = "manage_users"
    MANAGE_SETTINGS = "manage_settings"
    VIEW_ANALYTICS = "view_analytics"
    MANAGE_BOOKINGS = "manage_bookings"
    MANAGE_MISSIONS = "manage_missions"
    CREATE_JOBS = "create_jobs"
    MANAGE_OWN_JOBS = "manage_own_jobs"
    VIEW_ASSETS = "view_assets"
    DOWNLOAD_ASSETS = "download_assets"
    VIEW_PROFILE = "view_profile"
    EDIT_PROFILE = "edit_profile"
    UPLOAD_ASSETS = "upload_assets"
    VIEW_FLIGHT_DATA = "view_flight_data"


class Role(str, Enum):
    """User role.

    The legacy ``user`` role is read as ``client`` wherever a role is parsed.
    """

    ADMIN = "admin"
    CLIENT = "client"
    PILOT = "pilot"

    @classmethod
    def _missing_(cls, value: object) -> Optional["Role"]:
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        if normalized == "user":
            return cls.CLIENT
        for member in cls:
            if member.value == normalized:
                return member
        return None

    def permissions(self) -> frozenset[Permission]:
        """Permissions granted by this role."""
        return ROLE_PERMISSIONS[self]

    def has_permission(self, permission: Permission) -> bool:
        return permission in ROLE_PERMISSIONS[self]


ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.CLIENT: frozenset(
        {
            Permission.CREATE_JOBS,
            Permission.MANAGE_OWN_JOBS,
            Permission.VIEW_ASSETS,
            Permission.DOWNLOAD_ASSETS,
            Permission.VIEW_PROFILE,
            Permission.EDIT_PROFILE,
        }
    ),
    Role.PILOT: frozenset(
        {
            Permission.UPLOAD_ASSETS,
            Permission.MANAGE_MISSIONS,
            Permission.VIEW_FLIGHT_DATA,
            Permission.VIEW_PROFILE,
            Permission.EDIT_PROFILE,
        }
    ),
}


class InvitationStatus(str, Enum):
    """Status of an invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


class AccessAction(str, Enum):
    """Kind of change recorded in the access history."""

    CREATED = "created"
    ACTIVATED = "activated"
    DEACTIVATED = "deactivated"


class NotificationTemplate(str, Enum):
    """Messages the notifier knows how to render."""

    INVITATION = "invitation"
    INVITATION_RESEND = "invitation_resend"
    WELCOME = "welcome"


class Email(RootValueObject[str]):
    """Email address, normalized to trimmed lowercase.

    Two emails that differ only in case or surrounding whitespace are equal.
    """

    @field_validator("root")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Trim, lowercase and check the address shape."""
        normalized = v.strip().lower()
        if len(normalized) > 255 or not EMAIL_PATTERN.match(normalized):
            raise ValueError("Email must look like name@domain.tld")
        return normalized

    @property
    def domain(self) -> str:
        return self.root.rsplit("@", 1)[1]


class InvitationToken(RootValueObject[str]):
    """URL-safe invitation token."""

    @field_validator("root")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v

    @property
    def preview(self) -> str:
        """First characters of the token, safe to log."""
        return self.root[:8] + "..."


class PartialFailure(ValueObject):
    """A side effect that failed after the primary change was committed.

    Returned alongside a successful result, never raised. The invitation or
    user change stands; only the named notification needs a resend.
    """

    operation: str
    template: NotificationTemplate
    recipient: str
    reason: str


def parse_email(value: str) -> Email:
    """Parse a raw email into a normalized Email.

    Raises:
        ValidationError: If the address is malformed
    """
    email = Email.try_parse(value)
    if email is None:
        raise ValidationError(f"Invalid email address: {value!r}")
    return email


def parse_role(value: str | Role) -> Role:
    """Parse a raw role, accepting the legacy ``user`` role as client.

    Raises:
        ValidationError: If the role is unknown
    """
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(f"Invalid role: {value!r}")
