"""Skip request domain events."""

from dataclasses import dataclass
from datetime import datetime

from domain.meal_selection.core.value_objects.skip_request import SkipAction
from domain.shared.events.base import DomainEvent


@dataclass(frozen=True)
class SkipRequested(DomainEvent):
    """Domain event: a customer asked to skip a delivery date.

    Drives the admin notification queue; the order status is untouched.
    """

    selection_id: str
    order_id: str
    user_id: str
    date_key: str
    reason: str

    @staticmethod
    def create(
        selection_id: str,
        order_id: str,
        user_id: str,
        date_key: str,
        reason: str,
        occurred_at: datetime,
    ) -> "SkipRequested":
        """Factory method to create event."""
        return SkipRequested(
            event_id=DomainEvent._generate_event_id(),
            occurred_at=occurred_at,
            selection_id=selection_id,
            order_id=order_id,
            user_id=user_id,
            date_key=date_key,
            reason=reason,
        )


@dataclass(frozen=True)
class SkipRequestResolved(DomainEvent):
    """Domain event: an admin approved or rejected a pending skip request."""

    selection_id: str
    order_id: str
    date_key: str
    action: SkipAction
    admin_id: str
    admin_notes: str

    @staticmethod
    def create(
        selection_id: str,
        order_id: str,
        date_key: str,
        action: SkipAction,
        admin_id: str,
        admin_notes: str,
        occurred_at: datetime,
    ) -> "SkipRequestResolved":
        """Factory method to create event."""
        return SkipRequestResolved(
            event_id=DomainEvent._generate_event_id(),
            occurred_at=occurred_at,
            selection_id=selection_id,
            order_id=order_id,
            date_key=date_key,
            action=action,
            admin_id=admin_id,
            admin_notes=admin_notes,
        )
