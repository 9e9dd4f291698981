"""Resolve duplicate users use case."""

import logfire
from pydantic import BaseModel

from provision.application.usecase.base import UseCase
from provision.application.usecase.common import UserItem
from provision.domain.repository import UserRepository
from provision.domain.service import AccessPolicy, MergeService
from provision.domain.value import parse_email


class ResolveDuplicatesRequest(BaseModel):
    """Resolve duplicates request.

    Without ``acting_email`` the merge runs as the system actor, which is how
    maintenance scripts call it.
    """

    email: str
    acting_email: str | None = None


class ResolveDuplicatesResponse(BaseModel):
    """Resolve duplicates response."""

    email: str
    changed: bool
    survivor: UserItem
    decision: str | None = None
    deleted_user_ids: list[str] = []
    invitation_id: str | None = None


class ResolveDuplicatesUseCase(
    UseCase[ResolveDuplicatesRequest, ResolveDuplicatesResponse]
):
    """Use case for merging users that share an email."""

    def __init__(
        self,
        merge_service: MergeService,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
    ) -> None:
        self.merge_service = merge_service
        self.user_repository = user_repository
        self.access_policy = access_policy

    async def execute(self, request: ResolveDuplicatesRequest) -> ResolveDuplicatesResponse:
        with logfire.span(
            "resolve_duplicates.execute",
            email=request.email,
            acting_email=request.acting_email,
        ):
            actor = None
            if request.acting_email is not None:
                actor_email = parse_email(request.acting_email)
                admin = await self.user_repository.find_by_email(actor_email)
                admin = self.access_policy.require_user_manager(
                    admin, "resolve duplicate users", actor_email.root
                )
                actor = admin.email.root

            result = await self.merge_service.resolve_duplicates(request.email, actor)
            return ResolveDuplicatesResponse(
                email=result.email.root,
                changed=result.changed,
                survivor=UserItem.from_user(result.survivor),
                decision=result.decision.kind if result.decision else None,
                deleted_user_ids=[str(i) for i in result.deleted_user_ids],
                invitation_id=str(result.invitation.id) if result.invitation else None,
            )
