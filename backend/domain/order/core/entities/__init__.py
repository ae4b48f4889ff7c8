"""Order entities."""

from domain.order.core.entities.order import Order
from domain.order.core.entities.status_record import (
    DEFAULT_STATUS_NOTE,
    MIGRATION_ACTOR,
    SYSTEM_ACTOR,
    StatusRecord,
)

__all__ = [
    "Order",
    "StatusRecord",
    "SYSTEM_ACTOR",
    "MIGRATION_ACTOR",
    "DEFAULT_STATUS_NOTE",
]
