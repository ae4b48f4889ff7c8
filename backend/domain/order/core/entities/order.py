"""Order entity - aggregate root."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from domain.order.core.entities.status_record import (
    MIGRATION_ACTOR,
    StatusRecord,
)
from domain.order.core.events.order_status_changed import OrderStatusChanged
from domain.order.core.exceptions.domain_errors import InvalidTransitionError
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.value_objects.date_key import DateLike, date_key_for, weekday_name


@dataclass
class Order:
    """Order aggregate root.

    One per customer subscription schedule. Holds the per-date delivery
    status map; orders are never deleted, only deactivated.

    Invariants:
    - a date whose status is terminal accepts only the same-status no-op
    - ``daily_statuses`` keys are ISO dates (YYYY-MM-DD)

    Examples:
        >>> order = Order(order_id="O1", customer_id="C1")
        >>> record, created = order.ensure_daily_status("2025-03-10", now)
        >>> created, record.status.value, record.updated_by
        (True, 'pending', 'system')
    """

    order_id: str
    customer_id: str
    selected_days: List[str] = field(default_factory=list)
    is_active: bool = True
    package_id: Optional[str] = None
    daily_statuses: Dict[str, StatusRecord] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 0
    _events: List[Any] = field(default_factory=list, init=False, repr=False)

    def status_record(self, date: DateLike) -> Optional[StatusRecord]:
        """Stored record for the date, or None if never materialized."""
        return self.daily_statuses.get(date_key_for(date))

    def current_status(self, date: DateLike) -> OrderStatus:
        """Normalized status for the date (PENDING when missing)."""
        record = self.status_record(date)
        return record.status if record else OrderStatus.PENDING

    def allowed_next_statuses(self, date: DateLike) -> FrozenSet[OrderStatus]:
        """Statuses reachable from the current one; empty means final."""
        return self.current_status(date).allowed_next()

    def is_scheduled_on(self, date: DateLike) -> bool:
        """True when the date's weekday is one of the delivery days."""
        return weekday_name(date) in self.selected_days

    def ensure_daily_status(self, date: DateLike, now: datetime) -> Tuple[StatusRecord, bool]:
        """Return the record for the date, creating a default one if absent.

        Returns:
            (record, created) - created is False when the record existed
        """
        key = date_key_for(date)
        existing = self.daily_statuses.get(key)
        if existing is not None:
            return existing, False

        record = StatusRecord.default_pending(now)
        self.daily_statuses[key] = record
        self.updated_at = now
        return record, True

    def change_daily_status(
        self,
        date: DateLike,
        new_status: OrderStatus,
        actor_id: str,
        now: datetime,
        notes: str = "",
        skip_reason: Optional[str] = None,
        skip_request_approved_at: Optional[datetime] = None,
        notify_customer: bool = False,
    ) -> StatusRecord:
        """Apply a validated status transition for the date.

        Materializes the default record first, then checks the transition
        table. Emits OrderStatusChanged.

        Raises:
            InvalidTransitionError: If new_status is not reachable
        """
        key = date_key_for(date)
        self.ensure_daily_status(key, now)
        current = self.current_status(key)

        if not current.can_transition_to(new_status):
            raise InvalidTransitionError(self.order_id, key, current.value, new_status.value)

        record = StatusRecord(
            status=new_status,
            updated_at=now,
            updated_by=actor_id,
            notes=notes,
            skip_reason=skip_reason if new_status is OrderStatus.DELIVERY_SKIPPED else None,
            skip_request_approved_at=skip_request_approved_at,
        )
        self.daily_statuses[key] = record
        self.updated_at = now

        self._add_event(
            OrderStatusChanged.create(
                order_id=self.order_id,
                customer_id=self.customer_id,
                date_key=key,
                previous_status=current,
                new_status=new_status,
                actor_id=actor_id,
                occurred_at=now,
                notes=notes,
                skip_reason=record.skip_reason,
                notify_customer=notify_customer,
            )
        )
        return record

    def migrate_legacy_status(self, date: DateLike, now: datetime) -> Optional[StatusRecord]:
        """Permanently rewrite a stored legacy status for the date.

        Returns:
            The rewritten record, or None when there is nothing to migrate
        """
        key = date_key_for(date)
        record = self.daily_statuses.get(key)
        if record is None or record.legacy_status is None:
            return None

        migrated = StatusRecord(
            status=record.status,
            updated_at=now,
            updated_by=MIGRATION_ACTOR,
            notes=f"Migrated from legacy status: {record.legacy_status}",
        )
        self.daily_statuses[key] = migrated
        self.updated_at = now
        return migrated

    def prune_statuses_before(self, cutoff: DateLike, now: datetime) -> int:
        """Drop status records older than the cutoff date.

        Returns:
            Number of records removed
        """
        cutoff_key = date_key_for(cutoff)
        stale = [key for key in self.daily_statuses if key < cutoff_key]
        for key in stale:
            del self.daily_statuses[key]
        if stale:
            self.updated_at = now
        return len(stale)

    def deactivate(self, now: datetime) -> None:
        """Deactivate the order (orders are never deleted)."""
        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = now

    def _add_event(self, event: Any) -> None:
        """Add domain event to internal list."""
        self._events.append(event)

    def collect_events(self) -> List[Any]:
        """Collect and clear domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    def __eq__(self, other: object) -> bool:
        """Equality based on order_id (aggregate identity)."""
        if not isinstance(other, Order):
            return False
        return self.order_id == other.order_id

    def __hash__(self) -> int:
        """Hash based on order_id (aggregate identity)."""
        return hash(self.order_id)
