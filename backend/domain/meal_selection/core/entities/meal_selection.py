"""MealSelection entity - aggregate root."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.meal_selection.core.events.skip_events import (
    SkipRequested,
    SkipRequestResolved,
)
from domain.meal_selection.core.exceptions.domain_errors import (
    MissingRejectionNoteError,
    SkipRequestStateError,
)
from domain.meal_selection.core.value_objects.skip_request import (
    SkipAction,
    SkipRequestStatus,
    SkipState,
)
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.value_objects.date_key import DateLike, date_key_for

DEFAULT_USER_SKIP_REASON = "User requested to skip this day"
CONSISTENCY_SYNC_REASON = "Synchronized with order delivery status"


@dataclass
class MealSelection:
    """Meal selection aggregate root.

    One per order, linked through ``order_id``. Holds the subscription
    validity window and the per-date meal and skip entries.

    Skip transitions per date:
        Active/AdminRejected --request_skip--> UserRequestedPending
        UserRequestedPending --approve_skip--> AdminApproved
        UserRequestedPending --reject_skip--> AdminRejected
        any but AdminApproved --apply_direct_skip--> AdminDirectSkip

    Example:
        >>> selection = MealSelection(selection_id="S2", order_id="O2", user_id="user42")
        >>> entry = selection.request_skip("2025-03-11", "user42", now, "traveling")
        >>> entry.skip_state
        <SkipState.USER_REQUESTED_PENDING: 'user_requested_pending'>
    """

    selection_id: str
    order_id: str
    user_id: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    is_active: bool = True
    daily_selections: Dict[str, DailySelection] = field(default_factory=dict)
    updated_at: Optional[datetime] = None
    version: int = 0
    _events: List[Any] = field(default_factory=list, init=False, repr=False)

    def daily_selection(self, date: DateLike) -> Optional[DailySelection]:
        """Entry for the date, or None when never touched."""
        return self.daily_selections.get(date_key_for(date))

    def skip_state(self, date: DateLike) -> SkipState:
        """Reconciliation state for the date (ACTIVE when no entry)."""
        entry = self.daily_selection(date)
        return entry.skip_state if entry else SkipState.ACTIVE

    def request_skip(
        self, date: DateLike, user_id: str, now: datetime, reason: str = ""
    ) -> DailySelection:
        """Record a customer skip request pending admin review.

        Chosen meals stay on the entry so a rejection restores them.

        Raises:
            SkipRequestStateError: If the date is already finally skipped
        """
        key = date_key_for(date)
        state = self.skip_state(key)
        if state.is_terminal:
            raise SkipRequestStateError(key, state.value, "request skip")

        existing = self.daily_selections.get(key) or DailySelection()
        reason = reason or DEFAULT_USER_SKIP_REASON
        entry = DailySelection(
            meals=existing.meals,
            chef_selection_note=existing.chef_selection_note,
            is_skipped=True,
            skip_request_type=SkipReason.USER_REQUEST,
            skip_request_status=SkipRequestStatus.PENDING,
            skip_requested_by=user_id,
            skip_requested_at=now,
            skip_reason=reason,
            admin_action_required=True,
            admin_notified=False,
        )
        self._write(key, entry, now)

        self._add_event(
            SkipRequested.create(
                selection_id=self.selection_id,
                order_id=self.order_id,
                user_id=user_id,
                date_key=key,
                reason=reason,
                occurred_at=now,
            )
        )
        return entry

    def approve_skip(
        self, date: DateLike, admin_id: str, now: datetime, admin_notes: str = ""
    ) -> DailySelection:
        """Approve the pending customer request for the date.

        Raises:
            SkipRequestStateError: If no request is pending
        """
        key = date_key_for(date)
        pending = self._require_pending(key, SkipAction.APPROVE)

        entry = pending.with_changes(
            skip_request_status=SkipRequestStatus.APPROVED,
            skip_approved_by=admin_id,
            skip_approved_at=now,
            admin_action_required=False,
            admin_notes=admin_notes,
        )
        self._write(key, entry, now)
        self._resolved(key, SkipAction.APPROVE, admin_id, admin_notes, now)
        return entry

    def reject_skip(
        self, date: DateLike, admin_id: str, now: datetime, rejection_note: str
    ) -> DailySelection:
        """Reject the pending customer request; delivery continues.

        Raises:
            MissingRejectionNoteError: If the note is empty
            SkipRequestStateError: If no request is pending
        """
        key = date_key_for(date)
        if not rejection_note or not rejection_note.strip():
            raise MissingRejectionNoteError()
        pending = self._require_pending(key, SkipAction.REJECT)

        entry = pending.with_changes(
            is_skipped=False,
            skip_request_status=SkipRequestStatus.REJECTED,
            skip_rejected_by=admin_id,
            skip_rejected_at=now,
            admin_action_required=False,
            admin_notes=rejection_note,
            rejection_reason=rejection_note,
        )
        self._write(key, entry, now)
        self._resolved(key, SkipAction.REJECT, admin_id, rejection_note, now)
        return entry

    def apply_direct_skip(
        self,
        date: DateLike,
        admin_id: str,
        now: datetime,
        skip_type: SkipReason,
        reason: str,
    ) -> DailySelection:
        """Skip the date on the admin's initiative.

        Re-applying over an existing direct skip is allowed and overwrites
        the reason. A pending request is superseded.

        Raises:
            SkipRequestStateError: If a customer request was already approved
        """
        key = date_key_for(date)
        state = self.skip_state(key)
        if state is SkipState.ADMIN_APPROVED:
            raise SkipRequestStateError(key, state.value, "apply direct skip")

        existing = self.daily_selections.get(key) or DailySelection()
        entry = existing.with_changes(
            is_skipped=True,
            skip_request_type=skip_type,
            skip_request_status=SkipRequestStatus.AUTO_APPLIED,
            skip_applied_by=admin_id,
            skip_applied_at=now,
            skip_reason=reason,
            admin_action_required=False,
        )
        self._write(key, entry, now)
        return entry

    def sync_skip_from_order(self, date: DateLike, actor_id: str, now: datetime) -> bool:
        """Mark the date skipped to match an order already delivery_skipped.

        A pending request is taken as approved by the order status.

        Returns:
            False when the entry was already skipped
        """
        key = date_key_for(date)
        existing = self.daily_selections.get(key) or DailySelection()
        if existing.is_skipped and existing.skip_request_status is not SkipRequestStatus.PENDING:
            return False

        if existing.skip_request_status is SkipRequestStatus.PENDING:
            entry = existing.with_changes(
                is_skipped=True,
                skip_request_status=SkipRequestStatus.APPROVED,
                skip_approved_by=actor_id,
                skip_approved_at=now,
                admin_action_required=False,
            )
        else:
            entry = existing.with_changes(
                is_skipped=True,
                skip_request_status=SkipRequestStatus.AUTO_APPLIED,
                skip_applied_by=actor_id,
                skip_applied_at=now,
                skip_reason=existing.skip_reason or CONSISTENCY_SYNC_REASON,
                admin_action_required=False,
            )
        self._write(key, entry, now)
        return True

    def _require_pending(self, key: str, action: SkipAction) -> DailySelection:
        entry = self.daily_selections.get(key)
        state = entry.skip_state if entry else SkipState.ACTIVE
        if entry is None or state is not SkipState.USER_REQUESTED_PENDING:
            raise SkipRequestStateError(key, state.value, f"{action.value} skip request")
        return entry

    def _write(self, key: str, entry: DailySelection, now: datetime) -> None:
        self.daily_selections[key] = entry
        self.updated_at = now

    def _resolved(
        self, key: str, action: SkipAction, admin_id: str, notes: str, now: datetime
    ) -> None:
        self._add_event(
            SkipRequestResolved.create(
                selection_id=self.selection_id,
                order_id=self.order_id,
                date_key=key,
                action=action,
                admin_id=admin_id,
                admin_notes=notes,
                occurred_at=now,
            )
        )

    def _add_event(self, event: Any) -> None:
        """Add domain event to internal list."""
        self._events.append(event)

    def collect_events(self) -> List[Any]:
        """Collect and clear domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    def __eq__(self, other: object) -> bool:
        """Equality based on selection_id (aggregate identity)."""
        if not isinstance(other, MealSelection):
            return False
        return self.selection_id == other.selection_id

    def __hash__(self) -> int:
        """Hash based on selection_id (aggregate identity)."""
        return hash(self.selection_id)
