"""Admin skip action command and handler.

Approve or reject a pending customer skip request. Approval skips the
delivery on the order; rejection only clears the selection flag.
"""

from dataclasses import dataclass
from typing import Any, List, Tuple, Union
import logging

from application.reconciliation.skip_sync import load_order_and_selection
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.meal_selection.core.value_objects.skip_request import SkipAction
from domain.order.core.value_objects.order_status import OrderStatus
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.ports.clock import IClock
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSkipActionCommand:
    """
    Command: Admin resolves a pending customer skip request.

    Attributes:
        order_id: Order the request is about
        selection_id: Meal selection holding the request
        date: Delivery date
        admin_id: Acting admin
        action: ``approve`` or ``reject``
        admin_notes: Notes; mandatory for a rejection
    """

    order_id: str
    selection_id: str
    date: DateLike
    admin_id: str
    action: Union[SkipAction, str]
    admin_notes: str = ""


@dataclass(frozen=True)
class SkipActionResult:
    """Outcome of an admin skip action."""

    action: SkipAction
    order_status_updated: bool


class AdminSkipActionCommandHandler:
    """Handler for AdminSkipActionCommand."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        event_bus: IEventBus,
        clock: IClock,
        max_transaction_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._uow_factory = uow_factory
        self._event_bus = event_bus
        self._clock = clock
        self._max_attempts = max_transaction_attempts

    async def handle(self, command: AdminSkipActionCommand) -> SkipActionResult:
        """
        Execute admin action in one transaction.

        Raises:
            SkipRequestStateError: If no request is pending for the date
            MissingRejectionNoteError: If rejecting without notes
            InvalidTransitionError: If approving while the order cannot be skipped
            ValueError: If action is not approve or reject
        """
        action = SkipAction(command.action)
        date_key = date_key_for(command.date)

        async def work(uow: IUnitOfWork) -> Tuple[bool, List[Any]]:
            now = self._clock.now()
            order, selection = await load_order_and_selection(
                uow, command.order_id, command.selection_id
            )

            if action is SkipAction.REJECT:
                selection.reject_skip(date_key, command.admin_id, now, command.admin_notes)
                await uow.meal_selections.save(selection)
                return False, selection.collect_events()

            selection.approve_skip(date_key, command.admin_id, now, command.admin_notes)
            order.change_daily_status(
                date_key,
                OrderStatus.DELIVERY_SKIPPED,
                command.admin_id,
                now,
                notes=f"Approved user skip request. {command.admin_notes}".rstrip(),
                skip_reason=SkipReason.USER_REQUEST.label,
                skip_request_approved_at=now,
            )
            await uow.orders.save(order)
            await uow.meal_selections.save(selection)
            return True, order.collect_events() + selection.collect_events()

        order_updated, events = await run_in_transaction(
            self._uow_factory, work, self._max_attempts
        )

        logger.info(
            "Skip request resolved",
            extra={
                "order_id": command.order_id,
                "selection_id": command.selection_id,
                "date": date_key,
                "action": action.value,
                "admin_id": command.admin_id,
            },
        )

        for event in events:
            await self._event_bus.publish(event)

        return SkipActionResult(action=action, order_status_updated=order_updated)
