"""Notification dispatcher port (interface)."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class OrderStatusNotification:
    """Customer facing message about a daily status change.

    Attributes:
        order_id: Order whose status changed
        customer_id: Recipient
        status: New status value
        date_key: Delivery date (YYYY-MM-DD)
        notes: Admin notes
        skip_reason: Skip label, when the delivery was skipped
    """

    order_id: str
    customer_id: str
    status: str
    date_key: str
    notes: str = ""
    skip_reason: Optional[str] = None


class INotificationDispatcher(Protocol):
    """
    Interface for out-of-band customer notifications.

    Implementations raise NotificationFailureError when delivery fails;
    callers decide whether to swallow it.
    """

    async def send_order_status(self, notification: OrderStatusNotification) -> None:
        """
        Dispatch an order status notification.

        Raises:
            NotificationFailureError: If the notification could not be sent
        """
        ...
