"""Admin direct skip command and handler.

Skip a delivery on the admin's initiative (holiday, weather, ...) without
a prior customer request. Both documents are written in one transaction.
"""

from dataclasses import dataclass
from typing import Optional, Union
import logging

from application.reconciliation.skip_sync import (
    DirectSkipOutcome,
    load_order_and_selection,
    resolve_skip_type,
    stage_direct_skip,
)
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.order.core.value_objects.skip_reason import SkipReason
from domain.shared.ports.clock import IClock
from domain.shared.ports.event_bus import IEventBus
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminDirectSkipCommand:
    """
    Command: Admin skips an order's delivery for a date.

    Attributes:
        order_id: Order to skip
        selection_id: Linked meal selection; looked up by order when None
        date: Delivery date
        admin_id: Acting admin
        skip_type: Reason type; guessed from ``reason`` when None
        reason: Free text stored as notes (required for ``other``)
    """

    order_id: str
    selection_id: Optional[str]
    date: DateLike
    admin_id: str
    skip_type: Optional[Union[SkipReason, str]] = None
    reason: str = ""


class AdminDirectSkipCommandHandler:
    """Handler for AdminDirectSkipCommand.

    Re-applying a direct skip is idempotent. An approved customer request
    or a date whose order can no longer be skipped is rejected unchanged.
    """

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

    async def handle(self, command: AdminDirectSkipCommand) -> DirectSkipOutcome:
        """
        Execute direct skip.

        Raises:
            SkipRequestStateError: If a customer request was already approved
            InvalidTransitionError: If the order status cannot become skipped
            MissingSkipNoteError: If ``other`` is passed without a reason
            OrderNotFoundError, MealSelectionNotFoundError,
            OrderSelectionMismatchError: On missing or unlinked documents
        """
        skip_type = resolve_skip_type(command.skip_type, command.reason)
        date_key = date_key_for(command.date)

        async def work(uow: IUnitOfWork) -> DirectSkipOutcome:
            order, selection = await load_order_and_selection(
                uow, command.order_id, command.selection_id, require_selection=False
            )
            return await stage_direct_skip(
                uow,
                order,
                selection,
                date_key,
                command.admin_id,
                skip_type,
                command.reason,
                self._clock.now(),
            )

        outcome = await run_in_transaction(self._uow_factory, work, self._max_attempts)

        logger.info(
            "Direct skip applied",
            extra={
                "order_id": command.order_id,
                "date": date_key,
                "skip_type": skip_type.value,
                "admin_id": command.admin_id,
                "selection_updated": outcome.selection_updated,
            },
        )

        for event in outcome.events:
            await self._event_bus.publish(event)

        return outcome
