"""Order domain services."""

from domain.order.services.status_workflow import (
    StatusCount,
    StatusStatistics,
    get_allowed_next_statuses,
    get_status_history_for_date,
    get_status_statistics,
    group_orders_by_status,
    is_status_change_allowed,
)

__all__ = [
    "StatusCount",
    "StatusStatistics",
    "get_allowed_next_statuses",
    "is_status_change_allowed",
    "get_status_history_for_date",
    "group_orders_by_status",
    "get_status_statistics",
]
