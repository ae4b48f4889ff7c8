"""Missing daily status analysis (read only, no writes)."""

from dataclasses import dataclass, field
from typing import List, Sequence

from domain.order.core.entities.order import Order
from domain.shared.value_objects.date_key import DateLike, date_key_for


@dataclass(frozen=True)
class OrderMissingStatuses:
    order_id: str
    customer_id: str
    missing_dates: List[str]

    @property
    def missing_count(self) -> int:
        return len(self.missing_dates)


@dataclass
class StatusAnalysis:
    """Which orders lack a status record for which dates."""

    total_orders: int
    total_dates: int
    orders_with_missing_statuses: List[OrderMissingStatuses] = field(default_factory=list)
    missing_status_count: int = 0
    complete_orders: int = 0


def analyze_order_statuses(orders: Sequence[Order], dates: Sequence[DateLike]) -> StatusAnalysis:
    """Report missing status records without creating them.

    Example:
        >>> analysis = analyze_order_statuses(orders, ["2025-03-10"])
        >>> analysis.missing_status_count
        3
    """
    date_keys = [date_key_for(date) for date in dates]
    analysis = StatusAnalysis(total_orders=len(orders), total_dates=len(date_keys))

    for order in orders:
        missing = [key for key in date_keys if order.status_record(key) is None]
        if not missing:
            analysis.complete_orders += 1
            continue
        analysis.orders_with_missing_statuses.append(
            OrderMissingStatuses(
                order_id=order.order_id,
                customer_id=order.customer_id,
                missing_dates=missing,
            )
        )
        analysis.missing_status_count += len(missing)

    return analysis
