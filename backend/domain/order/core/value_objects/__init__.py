"""Order value objects."""

from domain.order.core.value_objects.order_status import (
    LEGACY_STATUS_MAP,
    STATUS_DISPLAY,
    STATUS_WORKFLOW,
    OrderStatus,
    StatusDisplay,
)
from domain.order.core.value_objects.skip_reason import SkipReason

__all__ = [
    "OrderStatus",
    "StatusDisplay",
    "STATUS_WORKFLOW",
    "STATUS_DISPLAY",
    "LEGACY_STATUS_MAP",
    "SkipReason",
]
