"""Domain layer DI providers."""

from datetime import timedelta

from dishka import Scope, provide

from provision.config import AccessSettings, AuthSettings, InvitationSettings, Settings
from provision.domain.repository import (
    AuditLogRepository,
    InvitationRepository,
    UnitOfWork,
    UserRepository,
)
from provision.domain.service import (
    AccessControlService,
    AccessPolicy,
    InvitationRoleSurvivorPolicy,
    InvitationService,
    MergeService,
    NotificationService,
    Notifier,
    RedemptionService,
    SessionTokenService,
    SurvivorPolicy,
    UserService,
)
from provision.util.di.base import ProviderBase


class DomainProvider(ProviderBase):
    """Domain services.

    Services that touch repositories live in REQUEST scope, sharing the
    request's transaction. Stateless policies are built once per container.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_access_policy(self, access_settings: AccessSettings) -> AccessPolicy:
        """Provide the trusted-domain access policy."""
        return AccessPolicy(trusted_admin_domains=access_settings.trusted_admin_domains)

    @provide(scope=Scope.APP)
    def get_survivor_policy(self) -> SurvivorPolicy:
        """Provide the merge survivor policy."""
        return InvitationRoleSurvivorPolicy()

    @provide
    def get_session_token_service(
        self, auth_settings: AuthSettings
    ) -> SessionTokenService:
        """Provide the session cookie signer."""
        return SessionTokenService(auth_settings=auth_settings)

    @provide
    def get_notification_service(
        self,
        notifier: Notifier,
        unit_of_work: UnitOfWork,
        invitation_settings: InvitationSettings,
    ) -> NotificationService:
        """Provide notification service with the configured timeout."""
        return NotificationService(
            notifier=notifier,
            unit_of_work=unit_of_work,
            timeout_seconds=invitation_settings.notifier_timeout_seconds,
        )

    @provide
    def get_user_service(
        self,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
    ) -> UserService:
        """Provide user domain service."""
        return UserService(
            user_repository=user_repository,
            audit_log_repository=audit_log_repository,
        )

    @provide
    def get_invitation_service(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        access_policy: AccessPolicy,
        notification_service: NotificationService,
        settings: Settings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repository=invitation_repository,
            user_repository=user_repository,
            access_policy=access_policy,
            notification_service=notification_service,
            default_ttl=timedelta(days=settings.invitations.ttl_days),
            token_bytes=settings.invitations.token_bytes,
            frontend_url=settings.frontend_url,
        )

    @provide
    def get_merge_service(
        self,
        user_repository: UserRepository,
        invitation_repository: InvitationRepository,
        audit_log_repository: AuditLogRepository,
        survivor_policy: SurvivorPolicy,
        access_settings: AccessSettings,
    ) -> MergeService:
        """Provide duplicate merge domain service."""
        return MergeService(
            user_repository=user_repository,
            invitation_repository=invitation_repository,
            audit_log_repository=audit_log_repository,
            survivor_policy=survivor_policy,
            system_actor=access_settings.system_actor,
        )

    @provide
    def get_redemption_service(
        self,
        invitation_repository: InvitationRepository,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
        merge_service: MergeService,
        notification_service: NotificationService,
    ) -> RedemptionService:
        """Provide invitation redemption domain service."""
        return RedemptionService(
            invitation_repository=invitation_repository,
            user_repository=user_repository,
            audit_log_repository=audit_log_repository,
            merge_service=merge_service,
            notification_service=notification_service,
        )

    @provide
    def get_access_control_service(
        self,
        user_repository: UserRepository,
        audit_log_repository: AuditLogRepository,
        access_policy: AccessPolicy,
    ) -> AccessControlService:
        """Provide role and access control domain service."""
        return AccessControlService(
            user_repository=user_repository,
            audit_log_repository=audit_log_repository,
            access_policy=access_policy,
        )
