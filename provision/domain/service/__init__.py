"""Domain services."""

from .access_control_service import AccessControlService, AccessResult
from .access_policy import AccessPolicy
from .invitation_service import InvitationService, IssueResult
from .merge_service import (
    InvitationRoleSurvivorPolicy,
    MergeResult,
    MergeService,
    SurvivorPolicy,
)
from .notification_service import NotificationError, NotificationService, Notifier
from .redemption_service import RedeemResult, RedemptionService
from .session_token_service import (
    InvalidSessionToken,
    SessionClaims,
    SessionTokenService,
)
from .user_service import UserService

__all__ = [
    "AccessControlService",
    "AccessPolicy",
    "AccessResult",
    "InvalidSessionToken",
    "InvitationRoleSurvivorPolicy",
    "InvitationService",
    "IssueResult",
    "MergeResult",
    "MergeService",
    "NotificationError",
    "NotificationService",
    "Notifier",
    "RedeemResult",
    "RedemptionService",
    "SessionClaims",
    "SessionTokenService",
    "SurvivorPolicy",
    "UserService",
]
