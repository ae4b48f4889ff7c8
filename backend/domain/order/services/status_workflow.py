"""Status workflow service.

Pure read-side helpers over orders and the transition table: what an admin
may do next with a date, and per-status breakdowns for dashboards.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, FrozenSet, Iterable, List

from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import StatusRecord, SYSTEM_ACTOR
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.value_objects.date_key import DateLike


@dataclass(frozen=True)
class StatusCount:
    """Number of orders in a status and the rounded share of the total."""

    count: int
    percentage: int


@dataclass(frozen=True)
class StatusStatistics:
    """Per-status breakdown of a set of orders for one date."""

    total: int
    by_status: Dict[OrderStatus, StatusCount]


def get_allowed_next_statuses(order: Order, date: DateLike) -> FrozenSet[OrderStatus]:
    """Allowed next statuses for the date.

    An empty set signals that the date is final and no action is available.

    Example:
        >>> get_allowed_next_statuses(order, "2025-03-10")
        frozenset({<OrderStatus.OUT_FOR_DELIVERY: ...>, ...})
    """
    return order.allowed_next_statuses(date)


def is_status_change_allowed(order: Order, date: DateLike, new_status: OrderStatus) -> bool:
    """True when new_status is a real (non no-op) allowed transition."""
    return new_status in get_allowed_next_statuses(order, date)


def get_status_history_for_date(order: Order, date: DateLike) -> StatusRecord:
    """Stored record for the date, or a synthetic pending one (not persisted)."""
    record = order.status_record(date)
    if record is not None:
        return record

    return StatusRecord(
        status=OrderStatus.PENDING,
        updated_at=order.created_at or datetime.now(timezone.utc),
        updated_by=SYSTEM_ACTOR,
        notes="Default status (dailyStatuses not found)",
    )


def group_orders_by_status(
    orders: Iterable[Order], date: DateLike
) -> Dict[OrderStatus, List[Order]]:
    """Group orders by their normalized status for the date.

    Every status has a (possibly empty) group.
    """
    grouped: Dict[OrderStatus, List[Order]] = {status: [] for status in OrderStatus}
    for order in orders:
        grouped[order.current_status(date)].append(order)
    return grouped


def get_status_statistics(orders: Iterable[Order], date: DateLike) -> StatusStatistics:
    """Count and percentage of orders per status for the date."""
    grouped = group_orders_by_status(orders, date)
    total = sum(len(group) for group in grouped.values())

    by_status = {
        status: StatusCount(
            count=len(group),
            percentage=round(len(group) / total * 100) if total > 0 else 0,
        )
        for status, group in grouped.items()
    }
    return StatusStatistics(total=total, by_status=by_status)
