"""User skip request command and handler.

A customer asks not to receive a delivery. Only the meal selection is
written; the order status stays for an admin to decide.
"""

from dataclasses import dataclass
from typing import Any, List, Tuple
import logging

from application.reconciliation.skip_sync import load_order_and_selection
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.meal_selection.core.entities.daily_selection import DailySelection
from domain.order.core.exceptions.domain_errors import InvalidTransitionError
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.ports.clock import IClock
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserSkipRequestCommand:
    """
    Command: Customer requests to skip a delivery date.

    Attributes:
        order_id: Order the request is about
        selection_id: Meal selection linked to the order
        date: Delivery date to skip
        user_id: Requesting customer
        reason: Optional free text shown to the admin
    """

    order_id: str
    selection_id: str
    date: DateLike
    user_id: str
    reason: str = ""


class UserSkipRequestCommandHandler:
    """Handler for UserSkipRequestCommand."""

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

    async def handle(self, command: UserSkipRequestCommand) -> DailySelection:
        """
        Execute skip request.

        The order is read (not written) to check the date is still open.

        Returns:
            The pending daily selection

        Raises:
            InvalidTransitionError: If the date's order status is terminal
            SkipRequestStateError: If the date is already finally skipped
            OrderNotFoundError, MealSelectionNotFoundError,
            OrderSelectionMismatchError: On missing or unlinked documents
        """
        date_key = date_key_for(command.date)

        async def work(uow: IUnitOfWork) -> Tuple[DailySelection, List[Any]]:
            order, selection = await load_order_and_selection(
                uow, command.order_id, command.selection_id
            )
            current = order.current_status(date_key)
            if current.is_terminal:
                raise InvalidTransitionError(
                    order.order_id,
                    date_key,
                    current.value,
                    OrderStatus.DELIVERY_SKIPPED.value,
                )

            entry = selection.request_skip(
                date_key, command.user_id, self._clock.now(), command.reason
            )
            await uow.meal_selections.save(selection)
            return entry, selection.collect_events()

        entry, events = await run_in_transaction(self._uow_factory, work, self._max_attempts)

        logger.info(
            "Skip request submitted",
            extra={
                "order_id": command.order_id,
                "selection_id": command.selection_id,
                "date": date_key,
                "user_id": command.user_id,
            },
        )

        for event in events:
            await self._event_bus.publish(event)

        return entry
