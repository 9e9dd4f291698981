"""Domain layer errors.

Every error carries a stable ``code`` so callers can branch on the kind of
failure without parsing messages.
"""


class DomainError(Exception):
    """Base domain error."""

    code = "domain_error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """Malformed input (email, role, name, ttl)."""

    code = "validation_error"


class PermissionDenied(DomainError):
    """Raised when the acting user lacks the capability for an operation."""

    code = "permission_denied"

    def __init__(self, actor: str, action: str):
        self.actor = actor
        self.action = action
        super().__init__(f"{actor} is not allowed to {action}")


class InvitationConflict(DomainError):
    """Raised when inviting an email that already belongs to an active user."""

    code = "invitation_conflict"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"An active user already exists for {email}")


class DuplicateInvitation(DomainError):
    """Raised when a pending, unexpired invitation already exists for the email."""

    code = "duplicate_invitation"

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"A pending invitation already exists for {email}")


class InvalidToken(DomainError):
    """Raised when no invitation matches a token."""

    code = "invalid_token"

    def __init__(self):
        super().__init__("Invitation token is invalid")


class ExpiredToken(DomainError):
    """Raised when an invitation is past its expiry."""

    code = "expired_token"

    def __init__(self):
        super().__init__("Invitation has expired")


class StatusConflict(DomainError):
    """Raised when an invitation is not in the status an operation requires."""

    code = "status_conflict"

    def __init__(self, resource_id: str, status: str):
        self.resource_id = resource_id
        self.status = status
        super().__init__(f"Invitation {resource_id} is {status}")


class IdentityMismatch(DomainError):
    """Raised when the authenticated email differs from the invited email."""

    code = "identity_mismatch"

    def __init__(self):
        super().__init__("Authenticated email does not match the invitation")


class SelfModificationDenied(DomainError):
    """Raised when an admin tries to change their own access flag."""

    code = "self_modification_denied"

    def __init__(self):
        super().__init__("Cannot modify your own access")


class InvalidRoleAssignment(DomainError):
    """Raised when assigning admin to an email outside the trusted domains."""

    code = "invalid_role_assignment"

    def __init__(self, email: str, role: str):
        self.email = email
        self.role = role
        super().__init__(f"Role {role} cannot be assigned to {email}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    code = "not_found"

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class MergeConflict(DomainError):
    """Raised when duplicate users cannot be merged without manual review."""

    code = "merge_conflict"

    def __init__(self, email: str, reason: str):
        self.email = email
        self.reason = reason
        super().__init__(f"Cannot merge users for {email}: {reason}")
