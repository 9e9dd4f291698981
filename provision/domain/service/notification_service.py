"""Notification domain service.

Delivery is best effort: the state change that triggers a message is
committed before the send, so a failed or slow send becomes a PartialFailure
on the result and no row lock is held while waiting on the notifier.
"""

import asyncio
from abc import ABC, abstractmethod

import logfire

from provision.domain.repository import UnitOfWork
from provision.domain.value import NotificationTemplate, PartialFailure


class NotificationError(Exception):
    """Raised by notifiers when a message could not be delivered."""

    pass


class Notifier(ABC):
    """Outbound message channel (email) interface."""

    @abstractmethod
    async def send(
        self, email: str, template: NotificationTemplate, variables: dict[str, str]
    ) -> None:
        """Send a templated message.

        Args:
            email: Recipient address
            template: Message template
            variables: Values substituted into the template

        Raises:
            NotificationError: If the message was not accepted for delivery
        """
        pass


class NotificationService:
    """Domain service that sends notifications under a bounded timeout."""

    def __init__(
        self, notifier: Notifier, unit_of_work: UnitOfWork, timeout_seconds: float
    ) -> None:
        """Initialize notification service.

        Args:
            notifier: Outbound channel
            unit_of_work: Request transaction, committed before each send
            timeout_seconds: Upper bound for a single delivery attempt
        """
        self.notifier = notifier
        self.unit_of_work = unit_of_work
        self.timeout_seconds = timeout_seconds

    async def deliver(
        self,
        operation: str,
        email: str,
        template: NotificationTemplate,
        variables: dict[str, str],
    ) -> PartialFailure | None:
        """Commit the request's writes, then send a message.

        Failure to send is reported instead of raised.

        Args:
            operation: Name of the operation that triggered the message
            email: Recipient address
            template: Message template
            variables: Template values

        Returns:
            None when delivered, otherwise a PartialFailure describing why not
        """
        with logfire.span(
            "notification_service.deliver",
            operation=operation,
            template=template.value,
            recipient=email,
        ):
            await self.unit_of_work.commit()
            try:
                await asyncio.wait_for(
                    self.notifier.send(email, template, variables),
                    timeout=self.timeout_seconds,
                )
            except asyncio.TimeoutError:
                reason = f"Notifier did not respond within {self.timeout_seconds}s"
            except NotificationError as e:
                reason = str(e) or type(e).__name__
            else:
                logfire.info(
                    "Notification sent", template=template.value, recipient=email
                )
                return None

            logfire.warn(
                "Notification failed",
                operation=operation,
                template=template.value,
                recipient=email,
                reason=reason,
            )
            return PartialFailure(
                operation=operation,
                template=template,
                recipient=email,
                reason=reason,
            )
