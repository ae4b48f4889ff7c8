"""Domain ports (interfaces for infrastructure adapters)."""

from domain.shared.ports.clock import IClock
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.notification_dispatcher import (
    INotificationDispatcher,
    OrderStatusNotification,
)
from domain.shared.ports.unit_of_work import IUnitOfWork

__all__ = [
    "IClock",
    "IEventBus",
    "INotificationDispatcher",
    "OrderStatusNotification",
    "IUnitOfWork",
]
