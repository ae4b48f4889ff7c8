"""Ensure daily status command and handler.

Materializes the default ``pending`` record for an order/date that has
never been touched, so every read sees a concrete status.
"""

from dataclasses import dataclass
from typing import Tuple
import logging

from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.order.core.entities.status_record import StatusRecord
from domain.order.core.exceptions.domain_errors import OrderNotFoundError
from domain.shared.ports.clock import IClock
from domain.shared.ports.unit_of_work import IUnitOfWork
from domain.shared.value_objects.date_key import DateLike, date_key_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnsureDailyStatusCommand:
    """
    Command: Ensure an order has a status record for a date.

    Attributes:
        order_id: Order to check
        date: Delivery date (``YYYY-MM-DD`` or ``date``)
    """

    order_id: str
    date: DateLike


@dataclass(frozen=True)
class EnsureDailyStatusResult:
    """Existing or newly created record; ``created`` is False on re-runs."""

    record: StatusRecord
    created: bool


class EnsureDailyStatusCommandHandler:
    """Handler for EnsureDailyStatusCommand.

    Idempotent: a second call returns the stored record unchanged, and
    concurrent callers converge on a single default record because the
    losing transaction is retried against the winner's write.
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

    async def handle(self, command: EnsureDailyStatusCommand) -> EnsureDailyStatusResult:
        """
        Execute ensure command.

        Raises:
            OrderNotFoundError: If the order does not exist
            InvalidDateKeyError: If the date is malformed
        """
        date_key = date_key_for(command.date)

        async def work(uow: IUnitOfWork) -> Tuple[StatusRecord, bool]:
            order = await uow.orders.get(command.order_id)
            if order is None:
                raise OrderNotFoundError(command.order_id)

            record, created = order.ensure_daily_status(date_key, self._clock.now())
            if created:
                await uow.orders.save(order)
            return record, created

        record, created = await run_in_transaction(self._uow_factory, work, self._max_attempts)

        if created:
            logger.info(
                "Default daily status created",
                extra={"order_id": command.order_id, "date": date_key},
            )

        return EnsureDailyStatusResult(record=record, created=created)
