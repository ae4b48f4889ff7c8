"""Development dispatcher: notifications are logged, never sent."""

import logging
from typing import List

from domain.shared.ports.notification_dispatcher import OrderStatusNotification

logger = logging.getLogger(__name__)


class LoggingNotificationDispatcher:
    """Implements INotificationDispatcher by logging each notification.

    Sent notifications are kept in ``sent`` for inspection.
    """

    def __init__(self) -> None:
        self.sent: List[OrderStatusNotification] = []

    async def send_order_status(self, notification: OrderStatusNotification) -> None:
        self.sent.append(notification)
        logger.info(
            "Order status notification (not sent)",
            extra={
                "order_id": notification.order_id,
                "customer_id": notification.customer_id,
                "status": notification.status,
                "date": notification.date_key,
            },
        )
