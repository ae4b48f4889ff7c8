"""OrderStatusChanged domain event."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.shared.events.base import DomainEvent
from domain.order.core.value_objects.order_status import OrderStatus


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Domain event: the delivery status of an order changed for a date.

    Published after the unit of work commits. ``notify_customer`` tells the
    notification handler whether the actor asked for a customer email.

    Attributes:
        order_id: Order whose status changed
        customer_id: Customer owning the order
        date_key: Delivery date (YYYY-MM-DD)
        previous_status: Status before the change
        new_status: Status after the change
        actor_id: Admin id or "system"
        notes: Notes written with the status
        skip_reason: Skip label for delivery_skipped
        notify_customer: Whether a customer notification was requested
    """

    order_id: str
    customer_id: str
    date_key: str
    previous_status: OrderStatus
    new_status: OrderStatus
    actor_id: str
    notes: str
    skip_reason: Optional[str]
    notify_customer: bool

    @staticmethod
    def create(
        order_id: str,
        customer_id: str,
        date_key: str,
        previous_status: OrderStatus,
        new_status: OrderStatus,
        actor_id: str,
        occurred_at: datetime,
        notes: str = "",
        skip_reason: Optional[str] = None,
        notify_customer: bool = False,
    ) -> "OrderStatusChanged":
        """Factory method to create event."""
        return OrderStatusChanged(
            event_id=DomainEvent._generate_event_id(),
            occurred_at=occurred_at,
            order_id=order_id,
            customer_id=customer_id,
            date_key=date_key,
            previous_status=previous_status,
            new_status=new_status,
            actor_id=actor_id,
            notes=notes,
            skip_reason=skip_reason,
            notify_customer=notify_customer,
        )
