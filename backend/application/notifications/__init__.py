"""Notification side effects of committed status changes."""

from .handlers import (
    OrderStatusNotificationHandler,
    SkipRequestedHandler,
    register_notification_handlers,
)

__all__ = [
    "OrderStatusNotificationHandler",
    "SkipRequestedHandler",
    "register_notification_handlers",
]
