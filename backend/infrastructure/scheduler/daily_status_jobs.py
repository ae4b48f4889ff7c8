"""
Daily status background jobs.

The backfill job gives every active order a status record for today and
tomorrow (business timezone) so the kitchen dashboard never renders a
missing day. The prune job drops records past the retention window.
"""

import logging
from datetime import datetime
from typing import List

from application.migration.commands.migrate_order_statuses import (
    MigrateOrderStatusesCommand,
    MigrateOrderStatusesCommandHandler,
    MigrationReport,
)
from application.migration.commands.prune_daily_statuses import (
    PruneDailyStatusesCommand,
    PruneDailyStatusesCommandHandler,
    PruneReport,
)
from application.shared.transaction import UnitOfWorkFactory
from domain.shared.ports.clock import IClock
from domain.shared.value_objects.date_key import operational_dates, weekday_name

logger = logging.getLogger(__name__)


class DailyStatusBackfillJob:
    """Backfill today and tomorrow for orders delivering on those days."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        migrate_handler: MigrateOrderStatusesCommandHandler,
        clock: IClock,
        timezone_name: str,
    ):
        self.uow_factory = uow_factory
        self.migrate_handler = migrate_handler
        self.clock = clock
        self.timezone_name = timezone_name

    async def run(self) -> List[MigrationReport]:
        """Main entry point called by scheduler."""
        start_time = datetime.now()
        reports: List[MigrationReport] = []

        for date_key in operational_dates(self.clock.now(), self.timezone_name):
            async with self.uow_factory() as uow:
                orders = await uow.orders.list_active_for_weekday(weekday_name(date_key))
            report = await self.migrate_handler.handle(
                MigrateOrderStatusesCommand(orders=orders, dates=(date_key,))
            )
            reports.append(report)

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Daily status backfill job completed: "
            f"{sum(r.statuses_created for r in reports)} created, "
            f"{sum(len(r.errors) for r in reports)} errors, "
            f"duration: {elapsed:.2f}s"
        )
        return reports


class DailyStatusPruneJob:
    """Remove status records older than the retention window."""

    def __init__(self, prune_handler: PruneDailyStatusesCommandHandler, retention_days: int):
        self.prune_handler = prune_handler
        self.retention_days = retention_days

    async def run(self) -> PruneReport:
        return await self.prune_handler.handle(
            PruneDailyStatusesCommand(retention_days=self.retention_days)
        )
