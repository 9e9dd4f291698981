"""Application layer DI providers."""

from dishka import Scope, provide

from provision.application.usecase.invitation import (
    CancelInvitationUseCase,
    ExpireInvitationsUseCase,
    IssueInvitationUseCase,
    ListInvitationsUseCase,
    RedeemInvitationUseCase,
    ResendInvitationUseCase,
    ValidateInvitationUseCase,
)
from provision.application.usecase.user import (
    GetUserHistoryUseCase,
    ListUsersUseCase,
    ResolveDuplicatesUseCase,
    SetUserAccessUseCase,
    SetUserRoleUseCase,
)
from provision.domain.repository import UserRepository
from provision.domain.service import (
    AccessControlService,
    AccessPolicy,
    InvitationService,
    MergeService,
    RedemptionService,
    UserService,
)
from provision.util.di.base import ProviderBase


class ApplicationProvider(ProviderBase):
    """One use case per API operation and maintenance script."""

    scope = Scope.REQUEST

    # Invitation use cases
    @provide
    def get_issue_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> IssueInvitationUseCase:
        return IssueInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_resend_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> ResendInvitationUseCase:
        return ResendInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_cancel_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> CancelInvitationUseCase:
        return CancelInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_validate_invitation_use_case(
        self, invitation_service: InvitationService
    ) -> ValidateInvitationUseCase:
        return ValidateInvitationUseCase(invitation_service=invitation_service)

    @provide
    def get_list_invitations_use_case(
        self,
        invitation_service: InvitationService,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
    ) -> ListInvitationsUseCase:
        return ListInvitationsUseCase(
            invitation_service=invitation_service,
            user_repository=user_repository,
            access_policy=access_policy,
        )

    @provide
    def get_redeem_invitation_use_case(
        self, redemption_service: RedemptionService
    ) -> RedeemInvitationUseCase:
        return RedeemInvitationUseCase(redemption_service=redemption_service)

    @provide
    def get_expire_invitations_use_case(
        self, invitation_service: InvitationService
    ) -> ExpireInvitationsUseCase:
        return ExpireInvitationsUseCase(invitation_service=invitation_service)

    # User use cases
    @provide
    def get_set_user_role_use_case(
        self, access_control_service: AccessControlService
    ) -> SetUserRoleUseCase:
        return SetUserRoleUseCase(access_control_service=access_control_service)

    @provide
    def get_set_user_access_use_case(
        self, access_control_service: AccessControlService
    ) -> SetUserAccessUseCase:
        return SetUserAccessUseCase(access_control_service=access_control_service)

    @provide
    def get_user_history_use_case(
        self, user_service: UserService, access_policy: AccessPolicy
    ) -> GetUserHistoryUseCase:
        return GetUserHistoryUseCase(
            user_service=user_service, access_policy=access_policy
        )

    @provide
    def get_list_users_use_case(
        self, user_service: UserService, access_policy: AccessPolicy
    ) -> ListUsersUseCase:
        return ListUsersUseCase(user_service=user_service, access_policy=access_policy)

    @provide
    def get_resolve_duplicates_use_case(
        self,
        merge_service: MergeService,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
    ) -> ResolveDuplicatesUseCase:
        return ResolveDuplicatesUseCase(
            merge_service=merge_service,
            user_repository=user_repository,
            access_policy=access_policy,
        )
