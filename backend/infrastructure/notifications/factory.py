"""Notification dispatcher factory.

NOTIFICATION_BACKEND=logging (default) keeps notifications in the log;
NOTIFICATION_BACKEND=http posts them to NOTIFICATION_ENDPOINT_URL.
"""

from typing import Optional

from domain.shared.ports.notification_dispatcher import INotificationDispatcher
from infrastructure.config import (
    get_notification_backend,
    get_notification_endpoint_url,
    get_notification_timeout_s,
)

from .http_dispatcher import HttpNotificationDispatcher
from .logging_dispatcher import LoggingNotificationDispatcher


def create_notification_dispatcher() -> INotificationDispatcher:
    """
    Raises:
        ValueError: If http selected but NOTIFICATION_ENDPOINT_URL not set
    """
    if get_notification_backend() == "http":
        endpoint_url = get_notification_endpoint_url()
        if not endpoint_url:
            raise ValueError(
                "NOTIFICATION_BACKEND=http but NOTIFICATION_ENDPOINT_URL not set. "
                "Set NOTIFICATION_ENDPOINT_URL or use NOTIFICATION_BACKEND=logging"
            )
        return HttpNotificationDispatcher(endpoint_url, timeout_s=get_notification_timeout_s())
    return LoggingNotificationDispatcher()


_dispatcher: Optional[INotificationDispatcher] = None


def get_notification_dispatcher() -> INotificationDispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = create_notification_dispatcher()
    return _dispatcher


def reset_notification_dispatcher() -> None:
    global _dispatcher
    _dispatcher = None
