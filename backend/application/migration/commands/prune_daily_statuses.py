"""Prune old daily status records.

Status maps grow by one entry per delivery day; entries older than the
retention window are only noise for the dashboard.
"""

from dataclasses import dataclass
from datetime import timedelta
import logging

from application.shared.transaction import (
    DEFAULT_MAX_ATTEMPTS,
    UnitOfWorkFactory,
    run_in_transaction,
)
from domain.shared.ports.clock import IClock
from domain.shared.ports.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7


@dataclass(frozen=True)
class PruneDailyStatusesCommand:
    """Command: drop status records older than ``retention_days`` days."""

    retention_days: int = DEFAULT_RETENTION_DAYS


@dataclass(frozen=True)
class PruneReport:
    cutoff_date: str
    orders_scanned: int
    orders_updated: int
    records_removed: int
    failures: int


class PruneDailyStatusesCommandHandler:
    """Handler for PruneDailyStatusesCommand. One transaction per order."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: IClock,
        max_transaction_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self._uow_factory = uow_factory
        self._clock = clock
        self._max_attempts = max_transaction_attempts

    async def handle(self, command: PruneDailyStatusesCommand) -> PruneReport:
        now = self._clock.now()
        cutoff = (now.date() - timedelta(days=command.retention_days)).isoformat()

        async with self._uow_factory() as uow:
            order_ids = [order.order_id for order in await uow.orders.list_all()]

        orders_updated = records_removed = failures = 0
        for order_id in order_ids:

            async def work(uow: IUnitOfWork, order_id: str = order_id) -> int:
                order = await uow.orders.get(order_id)
                if order is None:
                    return 0
                removed = order.prune_statuses_before(cutoff, now)
                if removed:
                    await uow.orders.save(order)
                return removed

            try:
                removed = await run_in_transaction(self._uow_factory, work, self._max_attempts)
            except Exception:
                logger.error(
                    "Failed to prune daily statuses",
                    extra={"order_id": order_id, "cutoff": cutoff},
                    exc_info=True,
                )
                failures += 1
                continue

            if removed:
                orders_updated += 1
                records_removed += removed

        report = PruneReport(
            cutoff_date=cutoff,
            orders_scanned=len(order_ids),
            orders_updated=orders_updated,
            records_removed=records_removed,
            failures=failures,
        )
        logger.info(
            "Daily status cleanup completed",
            extra={
                "cutoff": cutoff,
                "orders_updated": orders_updated,
                "records_removed": records_removed,
            },
        )
        return report
