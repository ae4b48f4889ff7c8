"""Event handlers sending notifications after a unit of work commits.

They run on the event bus, outside any transaction: a failed notification
is logged and never undoes or fails the status change that caused it.
Customer emails are sent from background tasks so dispatcher retries do
not hold up the command that published the event.
"""

import asyncio
import logging
from typing import Set

from domain.meal_selection.core.events.skip_events import SkipRequested
from domain.order.core.events.order_status_changed import OrderStatusChanged
from domain.shared.errors import NotificationFailureError
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.notification_dispatcher import (
    INotificationDispatcher,
    OrderStatusNotification,
)

logger = logging.getLogger(__name__)


class OrderStatusNotificationHandler:
    """Handler for OrderStatusChanged: email the customer when asked to."""

    def __init__(self, dispatcher: INotificationDispatcher):
        self._dispatcher = dispatcher
        self._pending: Set["asyncio.Task[None]"] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def schedule(self, event: OrderStatusChanged) -> None:
        """Start the dispatch in a tracked background task and return."""
        if not event.notify_customer:
            return
        task = asyncio.create_task(self.handle(event))
        self._pending.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: "asyncio.Task[None]") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(
                "Customer notification task crashed",
                extra={"error": str(error)},
                exc_info=error,
            )

    async def drain(self) -> None:
        """Wait for every scheduled dispatch to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def handle(self, event: OrderStatusChanged) -> None:
        """Dispatch the customer notification, swallowing delivery failures.

        Args:
            event: OrderStatusChanged domain event
        """
        if not event.notify_customer:
            return

        notification = OrderStatusNotification(
            order_id=event.order_id,
            customer_id=event.customer_id,
            status=event.new_status.value,
            date_key=event.date_key,
            notes=event.notes,
            skip_reason=event.skip_reason,
        )

        try:
            await self._dispatcher.send_order_status(notification)
        except NotificationFailureError as e:
            logger.warning(
                "Customer notification failed",
                extra={
                    "event_id": str(event.event_id),
                    "order_id": event.order_id,
                    "date": event.date_key,
                    "status": event.new_status.value,
                    "error": str(e),
                },
                exc_info=True,
            )
            return

        logger.info(
            "Customer notification sent",
            extra={
                "order_id": event.order_id,
                "customer_id": event.customer_id,
                "status": event.new_status.value,
            },
        )


class SkipRequestedHandler:
    """Handler for SkipRequested: put the request in front of an admin.

    Log-only; the admin panel polls pending requests.
    """

    async def handle(self, event: SkipRequested) -> None:
        logger.info(
            "skip_requested",
            extra={
                "event_type": "SkipRequested",
                "event_id": str(event.event_id),
                "occurred_at": event.occurred_at.isoformat(),
                "order_id": event.order_id,
                "selection_id": event.selection_id,
                "user_id": event.user_id,
                "date": event.date_key,
                "reason": event.reason,
            },
        )


def register_notification_handlers(
    event_bus: IEventBus, dispatcher: INotificationDispatcher
) -> OrderStatusNotificationHandler:
    """Subscribe the notification handlers to the bus.

    Returns the customer notification handler so the owner can drain its
    background dispatches on shutdown.
    """
    status_handler = OrderStatusNotificationHandler(dispatcher)
    event_bus.subscribe(OrderStatusChanged, status_handler.schedule)
    event_bus.subscribe(SkipRequested, SkipRequestedHandler().handle)
    return status_handler
