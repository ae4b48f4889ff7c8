"""DailySelection value object - meals and skip flags for one date."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional

from domain.meal_selection.core.value_objects.skip_request import (
    SkipRequestStatus,
    SkipState,
)
from domain.order.core.value_objects.skip_reason import SkipReason


@dataclass(frozen=True)
class DailySelection:
    """Entry of ``MealSelection.daily_selections``.

    Either populated with meals per meal type or marked skipped with the
    skip request metadata. Updates produce a new instance.

    Invariants:
    - a pending skip request keeps ``admin_action_required`` set until an
      admin resolves it
    """

    meals: Dict[str, List[str]] = field(default_factory=dict)
    chef_selection_note: Optional[str] = None
    is_skipped: bool = False
    skip_request_type: Optional[SkipReason] = None
    skip_request_status: Optional[SkipRequestStatus] = None
    skip_requested_by: Optional[str] = None
    skip_requested_at: Optional[datetime] = None
    skip_applied_by: Optional[str] = None
    skip_applied_at: Optional[datetime] = None
    skip_approved_by: Optional[str] = None
    skip_approved_at: Optional[datetime] = None
    skip_rejected_by: Optional[str] = None
    skip_rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    skip_reason: Optional[str] = None
    admin_action_required: bool = False
    admin_notified: bool = False

    def __post_init__(self) -> None:
        """Validate invariants."""
        if (
            self.is_skipped
            and self.skip_request_status is SkipRequestStatus.PENDING
            and not self.admin_action_required
        ):
            raise ValueError("A pending skip request requires admin_action_required=True")

    @property
    def skip_state(self) -> SkipState:
        """Reconciliation state for the date.

        A skipped entry without request status predates skip requests and
        reads as an admin skip.
        """
        if not self.is_skipped:
            if self.skip_request_status is SkipRequestStatus.REJECTED:
                return SkipState.ADMIN_REJECTED
            return SkipState.ACTIVE

        if self.skip_request_status is SkipRequestStatus.PENDING:
            return SkipState.USER_REQUESTED_PENDING
        if self.skip_request_status is SkipRequestStatus.APPROVED:
            return SkipState.ADMIN_APPROVED
        return SkipState.ADMIN_DIRECT_SKIP

    @property
    def has_meals(self) -> bool:
        """True when at least one meal type has been chosen or assigned."""
        return bool(self.meals)

    def with_changes(self, **changes) -> "DailySelection":
        """Copy with the given fields replaced (invariants re-checked)."""
        return replace(self, **changes)
