"""StatusRecord value object - delivery status of one order on one date."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from domain.order.core.value_objects.order_status import OrderStatus

SYSTEM_ACTOR = "system"
MIGRATION_ACTOR = "system_migration"

DEFAULT_STATUS_NOTE = "Auto-created default status for legacy order"


@dataclass(frozen=True)
class StatusRecord:
    """Daily status record embedded in ``Order.daily_statuses``.

    Attributes:
        status: Normalized delivery status
        updated_at: When the record was written (UTC)
        updated_by: Admin id, ``"system"`` or ``"system_migration"``
        notes: Free-text notes from the actor
        skip_reason: Skip label, only for DELIVERY_SKIPPED
        skip_request_approved_at: Set when an admin approved a customer skip
        legacy_status: Literal legacy value read from storage, if any
    """

    status: OrderStatus
    updated_at: datetime
    updated_by: str
    notes: str = ""
    skip_reason: Optional[str] = None
    skip_request_approved_at: Optional[datetime] = None
    legacy_status: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.skip_reason and self.status is not OrderStatus.DELIVERY_SKIPPED:
            raise ValueError(
                f"skip_reason is only allowed for delivery_skipped, got {self.status.value}"
            )

    @classmethod
    def default_pending(cls, now: datetime) -> "StatusRecord":
        """Synthetic record created when a date has never been touched."""
        return cls(
            status=OrderStatus.PENDING,
            updated_at=now,
            updated_by=SYSTEM_ACTOR,
            notes=DEFAULT_STATUS_NOTE,
        )

    @property
    def is_terminal(self) -> bool:
        """True when the date accepts no further transition."""
        return self.status.is_terminal

    @property
    def stored_status(self) -> str:
        """Status string to persist; untouched legacy values round-trip."""
        return self.legacy_status or self.status.value
