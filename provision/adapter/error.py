"""Errors raised by outbound adapters."""

from provision.domain.service.notification_service import NotificationError


class NotifierRequestError(NotificationError):
    """The email relay rejected a message or could not be reached.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
