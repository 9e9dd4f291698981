"""Email notifier clients.

The HTTP client posts templated messages to the transactional email service.
The mock records messages in memory for tests.
"""

import asyncio
from dataclasses import dataclass

import httpx
import logfire

from provision.adapter.error import NotifierRequestError
from provision.domain.service.notification_service import Notifier
from provision.domain.value import NotificationTemplate


class HttpNotifier(Notifier):
    """Notifier backed by an HTTP email API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_url: str,
        api_key: str,
        sender: str,
    ) -> None:
        """Initialize HTTP notifier.

        Args:
            client: Shared async HTTP client
            api_url: Base URL of the email API
            api_key: Bearer token for the email API
            sender: From address
        """
        self.client = client
        self.messages_url = f"{api_url.rstrip('/')}/messages"
        self.api_key = api_key
        self.sender = sender

    async def send(
        self, email: str, template: NotificationTemplate, variables: dict[str, str]
    ) -> None:
        """Post a templated message.

        Raises:
            NotifierRequestError: On transport errors or a non-2xx response
        """
        payload = {
            "from": self.sender,
            "to": email,
            "template": template.value,
            "variables": variables,
        }
        try:
            response = await self.client.post(
                self.messages_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logfire.error(
                "Notifier request failed", template=template.value, error=str(e)
            )
            raise NotifierRequestError(f"Notifier request failed: {e}") from e

        if response.status_code >= 400:
            logfire.error(
                "Notifier rejected message",
                template=template.value,
                status_code=response.status_code,
                response_text=response.text[:500],
            )
            raise NotifierRequestError(
                f"Notifier responded with {response.status_code}",
                status_code=response.status_code,
            )


@dataclass
class SentMessage:
    email: str
    template: NotificationTemplate
    variables: dict[str, str]


class MockNotifier(Notifier):
    """Mock notifier for testing.

    Records every accepted message. Configure ``fail`` to reject all sends,
    ``fail_for`` to reject specific recipients, and ``delay_seconds`` to
    simulate a slow service.
    """

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.fail = False
        self.fail_for: set[str] = set()
        self.delay_seconds = 0.0

    async def send(
        self, email: str, template: NotificationTemplate, variables: dict[str, str]
    ) -> None:
        await asyncio.sleep(self.delay_seconds)
        if self.fail or email in self.fail_for:
            raise NotifierRequestError("Mock notifier configured to fail", 503)
        self.sent.append(SentMessage(email=email, template=template, variables=variables))

    def sent_to(self, email: str) -> list[SentMessage]:
        return [m for m in self.sent if m.email == email]
