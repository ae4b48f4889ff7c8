"""Notification dispatcher adapters."""

from .factory import create_notification_dispatcher, get_notification_dispatcher, reset_notification_dispatcher
from .http_dispatcher import HttpNotificationDispatcher, OrderStatusPayload
from .logging_dispatcher import LoggingNotificationDispatcher

__all__ = [
    "HttpNotificationDispatcher",
    "LoggingNotificationDispatcher",
    "OrderStatusPayload",
    "create_notification_dispatcher",
    "get_notification_dispatcher",
    "reset_notification_dispatcher",
]
