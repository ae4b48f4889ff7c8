"""Queries for daily order statuses."""

from .get_allowed_next_statuses import (
    GetAllowedNextStatusesQuery,
    GetAllowedNextStatusesQueryHandler,
)
from .get_complete_orders import (
    CompleteOrder,
    GetCompleteOrdersQuery,
    GetCompleteOrdersQueryHandler,
    PreparationInfo,
    PreparationStatus,
    determine_preparation,
)
from .get_status_statistics import (
    GetStatusStatisticsQuery,
    GetStatusStatisticsQueryHandler,
)

__all__ = [
    "CompleteOrder",
    "GetCompleteOrdersQuery",
    "GetCompleteOrdersQueryHandler",
    "PreparationInfo",
    "PreparationStatus",
    "determine_preparation",
    "GetAllowedNextStatusesQuery",
    "GetAllowedNextStatusesQueryHandler",
    "GetStatusStatisticsQuery",
    "GetStatusStatisticsQueryHandler",
]
