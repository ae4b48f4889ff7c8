"""OrderStatus value object - daily delivery status vocabulary."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

from domain.order.core.exceptions.domain_errors import InvalidStatusError


class OrderStatus(str, Enum):
    """Delivery status of an order for one calendar date.

    - PENDING: order received, waiting for delivery
    - OUT_FOR_DELIVERY: on the way to the customer
    - DELIVERED, CANCELLED, DELIVERY_SKIPPED: terminal

    Example:
        >>> OrderStatus.PENDING.can_transition_to(OrderStatus.OUT_FOR_DELIVERY)
        True
        >>> OrderStatus.DELIVERED.is_terminal
        True
    """

    PENDING = "pending"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    DELIVERY_SKIPPED = "delivery_skipped"

    @classmethod
    def parse(cls, raw: object) -> "OrderStatus":
        """Parse a stored or caller-supplied status string.

        Legacy statuses are normalized through LEGACY_STATUS_MAP.

        Raises:
            InvalidStatusError: If the value is not a known status

        Example:
            >>> OrderStatus.parse("ready_for_pickup")
            <OrderStatus.OUT_FOR_DELIVERY: 'out_for_delivery'>
        """
        if isinstance(raw, OrderStatus):
            return raw
        if isinstance(raw, str):
            if raw in LEGACY_STATUS_MAP:
                return LEGACY_STATUS_MAP[raw]
            try:
                return cls(raw)
            except ValueError:
                pass
        raise InvalidStatusError(raw)

    @classmethod
    def parse_stored(cls, raw: str) -> Tuple["OrderStatus", Optional[str]]:
        """Parse a stored status, keeping the literal legacy value if any.

        Returns:
            (normalized status, legacy string or None)
        """
        legacy = raw if raw in LEGACY_STATUS_MAP else None
        return cls.parse(raw), legacy

    @property
    def is_terminal(self) -> bool:
        """True when no further transition is allowed for the date."""
        return not STATUS_WORKFLOW[self]

    def allowed_next(self) -> FrozenSet["OrderStatus"]:
        """Statuses reachable from this one (same-status no-op excluded)."""
        return STATUS_WORKFLOW[self]

    def can_transition_to(self, other: "OrderStatus") -> bool:
        """Check a transition; the same-status no-op is always allowed."""
        return other is self or other in STATUS_WORKFLOW[self]

    @property
    def display(self) -> "StatusDisplay":
        """Label, color, icon and description for dashboards and handouts."""
        return STATUS_DISPLAY[self]


@dataclass(frozen=True)
class StatusDisplay:
    """Presentation data associated with a status."""

    label: str
    color: str
    icon: str
    description: str


STATUS_WORKFLOW: Mapping[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.OUT_FOR_DELIVERY,
            OrderStatus.CANCELLED,
            OrderStatus.DELIVERY_SKIPPED,
        }
    ),
    OrderStatus.OUT_FOR_DELIVERY: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.DELIVERY_SKIPPED: frozenset(),
}

STATUS_DISPLAY: Mapping[OrderStatus, StatusDisplay] = {
    OrderStatus.PENDING: StatusDisplay(
        label="Pending",
        color="default",
        icon="⏳",
        description="Order received, waiting for delivery",
    ),
    OrderStatus.OUT_FOR_DELIVERY: StatusDisplay(
        label="Out for Delivery",
        color="primary",
        icon="🚚",
        description="Order is on the way to customer",
    ),
    OrderStatus.DELIVERED: StatusDisplay(
        label="Delivered",
        color="success",
        icon="✅",
        description="Order successfully delivered to customer",
    ),
    OrderStatus.CANCELLED: StatusDisplay(
        label="Cancelled",
        color="error",
        icon="❌",
        description="Order was cancelled",
    ),
    OrderStatus.DELIVERY_SKIPPED: StatusDisplay(
        label="Delivery Skipped",
        color="warning",
        icon="⏭️",
        description="Delivery was skipped for this day",
    ),
}

# Single canonical mapping, used at read time and by the permanent migration.
LEGACY_STATUS_MAP: Dict[str, OrderStatus] = {
    "in_preparation": OrderStatus.PENDING,
    "ready_for_pickup": OrderStatus.OUT_FOR_DELIVERY,
}
