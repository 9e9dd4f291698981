"""Survivor decisions for duplicate identity merges.

A decision is a tagged variant: callers branch on ``kind`` (or the type)
instead of inspecting loose flags.
"""

from typing import Annotated, Literal, Union

from pydantic import Field

from provision.domain.model.common import DomainModel
from provision.domain.value import Role, UserId


class MatchInvitationRole(DomainModel):
    """Keep the earliest user whose role equals the invitation's role."""

    kind: Literal["match_invitation_role"] = "match_invitation_role"
    user_id: UserId
    role: Role


class MostRecent(DomainModel):
    """Keep the most recently created user."""

    kind: Literal["most_recent"] = "most_recent"
    user_id: UserId


class ManualReview(DomainModel):
    """No survivor can be chosen automatically."""

    kind: Literal["manual_review"] = "manual_review"
    reason: str
    candidates: tuple[UserId, ...]


SurvivorDecision = Annotated[
    Union[MatchInvitationRole, MostRecent, ManualReview],
    Field(discriminator="kind"),
]
