"""Settings provider."""

from dishka import Scope, provide

from provision.config import AccessSettings, AuthSettings, InvitationSettings, Settings
from provision.util.di.base import ProviderBase


class ConfigProvider(ProviderBase):
    """Exposes ``Settings`` and the sections that services take directly.

    Settings are read from the environment once per container unless an
    instance is passed in.
    """

    scope = Scope.APP

    def __init__(self, settings: Settings | None = None) -> None:
        super().__init__()
        self._settings = settings

    @provide
    def get_settings(self) -> Settings:
        return self._settings or Settings()

    @provide
    def get_auth_settings(self, settings: Settings) -> AuthSettings:
        return settings.auth

    @provide
    def get_access_settings(self, settings: Settings) -> AccessSettings:
        return settings.access

    @provide
    def get_invitation_settings(self, settings: Settings) -> InvitationSettings:
        return settings.invitations
