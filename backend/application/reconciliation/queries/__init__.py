"""Queries for the skip request workflow."""

from .skip_requests import (
    GetPendingSkipRequestsQuery,
    GetPendingSkipRequestsQueryHandler,
    GetSkipRequestDetailsQuery,
    GetSkipRequestDetailsQueryHandler,
    SkipRequestDetails,
    SkipRequestStats,
    get_skip_request_stats,
)
from .validate_consistency import (
    ConsistencyReport,
    Inconsistency,
    ValidateDataConsistencyQuery,
    ValidateDataConsistencyQueryHandler,
)

__all__ = [
    "SkipRequestDetails",
    "SkipRequestStats",
    "get_skip_request_stats",
    "GetSkipRequestDetailsQuery",
    "GetSkipRequestDetailsQueryHandler",
    "GetPendingSkipRequestsQuery",
    "GetPendingSkipRequestsQueryHandler",
    "Inconsistency",
    "ConsistencyReport",
    "ValidateDataConsistencyQuery",
    "ValidateDataConsistencyQueryHandler",
]
