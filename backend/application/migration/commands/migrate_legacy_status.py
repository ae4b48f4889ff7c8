"""Permanent rewrite of legacy status strings."""

from dataclasses import dataclass
from typing import Optional, Tuple
import logging

from application.reconciliation.skip_sync import load_order
from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.order.core.entities.status_record import StatusRecord
from domain.shared.ports.clock import IClock
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrateLegacyStatusCommand:
    """
    Command: rewrite a stored ``in_preparation``/``ready_for_pickup`` status.

    Attributes:
        order_id: Order to migrate
        date: Date whose record holds the legacy value
    """

    order_id: str
    date: DateLike


class MigrateLegacyStatusCommandHandler:
    """Handler for MigrateLegacyStatusCommand.

    Uses the same legacy mapping as reads, so the stored result equals
    what every reader already saw.
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

    async def handle(self, command: MigrateLegacyStatusCommand) -> bool:
        """
        Returns:
            True if a legacy value was rewritten, False if nothing to migrate

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        date_key = date_key_for(command.date)

        async def work(uow: IUnitOfWork) -> Tuple[Optional[StatusRecord], Optional[str]]:
            order = await load_order(uow, command.order_id)
            stored = order.status_record(date_key)
            migrated = order.migrate_legacy_status(date_key, self._clock.now())
            if migrated is not None:
                await uow.orders.save(order)
            return migrated, stored.legacy_status if stored else None

        migrated, legacy_value = await run_in_transaction(
            self._uow_factory, work, self._max_attempts
        )
        if migrated is None:
            return False

        logger.info(
            "Legacy status migrated",
            extra={
                "order_id": command.order_id,
                "date": date_key,
                "from": legacy_value,
                "to": migrated.status.value,
            },
        )
        return True
