"""Update daily status command and handler.

Admin (or system) status change for one order on one date. A change to
``delivery_skipped`` also skips the linked meal selection in the same
transaction.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union
import logging

from application.reconciliation.skip_sync import (
    load_order,
    load_order_and_selection,
    resolve_skip_type,
    stage_direct_skip,
)
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.order.core.entities.status_record import SYSTEM_ACTOR, StatusRecord
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.ports.clock import IClock
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateDailyStatusCommand:
    """
    Command: Change the delivery status of an order for a date.

    Attributes:
        order_id: Order to update
        date: Delivery date
        new_status: Target status (legacy names are accepted)
        actor_id: Admin id, or ``"system"`` for automated writes
        notes: Free-text notes stored on the record
        notify: Ask for a customer notification (never sent for ``"system"``)
        skip_reason: Reason type, label or free text when skipping; guessed
            from notes if omitted
    """

    order_id: str
    date: DateLike
    new_status: Union[OrderStatus, str]
    actor_id: str
    notes: str = ""
    notify: bool = True
    skip_reason: Optional[Union[SkipReason, str]] = None


def _resolve_skip(command: UpdateDailyStatusCommand) -> Tuple[SkipReason, str]:
    """Skip type and notes for a change to delivery_skipped.

    ``skip_reason`` may be a stored value, a label or free text. Free text
    is classified by keyword and kept as the notes when none were given.
    Without ``skip_reason`` the notes are classified instead.
    """
    raw = command.skip_reason
    if raw is None or SkipReason.lookup(raw) is not None:
        return resolve_skip_type(raw, command.notes), command.notes

    text = str(raw).strip()
    notes = command.notes or text
    inferred = SkipReason.infer_from_text(text)
    logger.info(
        "Skip type inferred from skip reason text",
        extra={"order_id": command.order_id, "reason": text, "skip_type": inferred.value},
    )
    return resolve_skip_type(inferred, notes), notes


class UpdateDailyStatusCommandHandler:
    """Handler for UpdateDailyStatusCommand."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        event_bus: IEventBus,
        clock: IClock,
        max_transaction_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        """
        Initialize handler.

        Args:
            uow_factory: Builds one unit of work per transaction attempt
            event_bus: Receives OrderStatusChanged after commit
            clock: Time source for ``updated_at`` stamps
            max_transaction_attempts: Retries on write conflicts
        """
        self._uow_factory = uow_factory
        self._event_bus = event_bus
        self._clock = clock
        self._max_attempts = max_transaction_attempts

    async def handle(self, command: UpdateDailyStatusCommand) -> StatusRecord:
        """
        Execute update command.

        Flow:
        1. Validate the status against the vocabulary
        2. In one transaction: materialize the current status, check the
           transition, write the record (and the selection on a skip)
        3. After commit, publish the events; notification failures never
           reach the caller

        Returns:
            The record written for the date

        Raises:
            InvalidStatusError: If new_status is not a known status
            InvalidTransitionError: If new_status is not reachable
            OrderNotFoundError: If the order does not exist
            MissingSkipNoteError: If skip reason ``other`` has no notes
        """
        new_status = OrderStatus.parse(command.new_status)
        date_key = date_key_for(command.date)
        notify_customer = command.notify and command.actor_id != SYSTEM_ACTOR
        skip_type: Optional[SkipReason] = None
        skip_notes = command.notes
        if new_status is OrderStatus.DELIVERY_SKIPPED:
            skip_type, skip_notes = _resolve_skip(command)

        logger.info(
            "Updating daily status",
            extra={
                "order_id": command.order_id,
                "date": date_key,
                "new_status": new_status.value,
                "actor_id": command.actor_id,
            },
        )

        async def work(uow: IUnitOfWork) -> Tuple[StatusRecord, List[Any]]:
            now = self._clock.now()

            if skip_type is not None:
                order, selection = await load_order_and_selection(
                    uow, command.order_id, None, require_selection=False
                )
                if selection is not None and selection.skip_state(date_key).is_terminal:
                    # Selection already skipped for good; only the order is written.
                    selection = None
                outcome = await stage_direct_skip(
                    uow,
                    order,
                    selection,
                    date_key,
                    command.actor_id,
                    skip_type,
                    skip_notes,
                    now,
                    notify_customer=notify_customer,
                )
                return outcome.record, outcome.events

            order = await load_order(uow, command.order_id)
            record = order.change_daily_status(
                date_key,
                new_status,
                command.actor_id,
                now,
                notes=command.notes,
                notify_customer=notify_customer,
            )
            await uow.orders.save(order)
            return record, order.collect_events()

        record, events = await run_in_transaction(self._uow_factory, work, self._max_attempts)

        logger.info(
            "Daily status updated",
            extra={
                "order_id": command.order_id,
                "date": date_key,
                "status": record.status.value,
            },
        )

        for event in events:
            await self._event_bus.publish(event)

        return record
