"""Migration queries."""

from .analyze_order_statuses import (
    OrderMissingStatuses,
    StatusAnalysis,
    analyze_order_statuses,
)

__all__ = ["OrderMissingStatuses", "StatusAnalysis", "analyze_order_statuses"]
