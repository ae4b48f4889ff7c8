"""Fix data inconsistencies command and handler."""

from dataclasses import dataclass
from typing import Sequence
import logging

from application.reconciliation.commands.bulk_direct_skip import (
    BulkItemFailure,
    BulkOperationResult,
)
from application.reconciliation.queries.validate_consistency import Inconsistency
from application.reconciliation.skip_sync import load_order_and_selection
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.order.core.entities.status_record import SYSTEM_ACTOR
from domain.order.core.value_objects.order_status import OrderStatus
from domain.shared.ports.clock import IClock
from domain.shared.ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixDataInconsistenciesCommand:
    """Command: mark selections skipped where the order is already skipped."""

    inconsistencies: Sequence[Inconsistency]


class FixDataInconsistenciesCommandHandler:
    """Handler for FixDataInconsistenciesCommand.

    Each fix is its own transaction and re-reads both documents, so an
    entry repaired meanwhile is left alone.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: IClock,
        max_transaction_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._uow_factory = uow_factory
        self._clock = clock
        self._max_attempts = max_transaction_attempts

    async def handle(self, command: FixDataInconsistenciesCommand) -> BulkOperationResult:
        result = BulkOperationResult()

        for item in command.inconsistencies:

            async def work(uow: IUnitOfWork, item: Inconsistency = item) -> bool:
                order, selection = await load_order_and_selection(
                    uow, item.order_id, item.selection_id
                )
                if order.current_status(item.date_key) is not OrderStatus.DELIVERY_SKIPPED:
                    return False
                changed = selection.sync_skip_from_order(
                    item.date_key, SYSTEM_ACTOR, self._clock.now()
                )
                if changed:
                    await uow.meal_selections.save(selection)
                return changed

            try:
                changed = await run_in_transaction(self._uow_factory, work, self._max_attempts)
            except Exception as e:
                logger.error(
                    "Failed to fix inconsistency",
                    extra={"order_id": item.order_id, "date": item.date_key, "error": str(e)},
                    exc_info=True,
                )
                result.failed.append(BulkItemFailure(order_id=item.order_id, error=str(e)))
                continue

            result.succeeded.append(item.order_id)
            logger.info(
                "Inconsistency fixed" if changed else "Inconsistency already resolved",
                extra={"order_id": item.order_id, "date": item.date_key},
            )

        return result
