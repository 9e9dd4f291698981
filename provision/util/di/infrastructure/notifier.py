"""Notifier slot: where invitation and welcome email goes."""

from collections.abc import AsyncIterator

import httpx
from dishka import Scope, provide

from provision.adapter.notifier import HttpNotifier
from provision.config import Settings
from provision.domain.service import Notifier
from provision.util.di.base import ProviderBase


class NotifierProvider(ProviderBase):
    """Slot for outbound invitation email."""

    slot = "notifier"


class HttpNotifierProvider(NotifierProvider):
    """Sends through the transactional email relay over httpx."""

    is_mock = False

    @provide(scope=Scope.APP)
    async def get_http_client(self, settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
        """Provide the shared outbound HTTP client."""
        async with httpx.AsyncClient(
            timeout=settings.invitations.notifier_timeout_seconds
        ) as client:
            yield client

    @provide(scope=Scope.APP)
    def get_notifier(self, client: httpx.AsyncClient, settings: Settings) -> Notifier:
        """Provide HTTP notifier.

        Raises:
            ValueError: If the notifier API URL is not configured
        """
        if not settings.notifier.api_url:
            raise ValueError("Notifier API URL must be configured")

        return HttpNotifier(
            client=client,
            api_url=settings.notifier.api_url,
            api_key=settings.notifier.api_key,
            sender=settings.notifier.sender,
        )
