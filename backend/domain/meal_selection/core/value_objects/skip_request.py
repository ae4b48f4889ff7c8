"""Skip request vocabulary."""

from enum import Enum


class SkipRequestStatus(str, Enum):
    """Lifecycle of a skip request on a daily selection.

    ``pending`` resolves to ``approved`` or ``rejected`` by an admin;
    ``auto_applied`` is an admin initiated skip, terminal on creation.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    AUTO_APPLIED = "auto_applied"


class SkipAction(str, Enum):
    """Admin decision on a pending customer skip request."""

    APPROVE = "approve"
    REJECT = "reject"


class SkipState(str, Enum):
    """Reconciliation state of one order/date pair, derived from the selection."""

    ACTIVE = "active"
    USER_REQUESTED_PENDING = "user_requested_pending"
    ADMIN_APPROVED = "admin_approved"
    ADMIN_REJECTED = "admin_rejected"
    ADMIN_DIRECT_SKIP = "admin_direct_skip"

    @property
    def is_terminal(self) -> bool:
        """Approved and direct skips end the date's workflow."""
        return self in (SkipState.ADMIN_APPROVED, SkipState.ADMIN_DIRECT_SKIP)
