"""Backfill missing daily statuses.

Best-effort sweep run when the dashboard loads (today/tomorrow) and by
the scheduler. Safe to re-run and to run concurrently with itself.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence
import asyncio
import logging

from application.order_status.commands.ensure_daily_status import (
    EnsureDailyStatusCommand,
    EnsureDailyStatusCommandHandler,
)
from domain.order.core.entities.order import Order
from domain.shared.errors import DomainError
from domain.shared.ports.clock import IClock
from domain.shared.value_objects.date_key import DateLike, date_key_for, operational_dates

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MigrationError:
    """A single (order, date) the sweep could not backfill."""

    order_id: str
    date_key: str
    error: str


@dataclass
class MigrationReport:
    """Outcome of a backfill sweep.

    Attributes:
        total_orders: Orders considered
        total_dates: Dates considered
        orders_affected: Orders that received at least one new record
        statuses_created: Records actually created by this run
        errors: Per (order, date) failures
    """

    total_orders: int
    total_dates: int
    orders_affected: int = 0
    statuses_created: int = 0
    errors: List[MigrationError] = field(default_factory=list)


@dataclass(frozen=True)
class MigrateOrderStatusesCommand:
    """
    Command: ensure every order has a status record for every date.

    Attributes:
        orders: Orders as last read by the caller
        dates: Dates to backfill
    """

    orders: Sequence[Order]
    dates: Sequence[DateLike]


class MigrateOrderStatusesCommandHandler:
    """Handler for MigrateOrderStatusesCommand.

    Pairs the caller's snapshot already shows a record for are skipped;
    the rest go through the idempotent ensure, fanned out per order.
    Never raises for individual failures.
    """

    def __init__(self, ensure_handler: EnsureDailyStatusCommandHandler):
        self._ensure = ensure_handler

    async def handle(self, command: MigrateOrderStatusesCommand) -> MigrationReport:
        date_keys = [date_key_for(date) for date in command.dates]
        report = MigrationReport(
            total_orders=len(command.orders),
            total_dates=len(date_keys),
        )

        async def backfill(order: Order) -> int:
            created = 0
            for date_key in date_keys:
                if order.status_record(date_key) is not None:
                    continue
                try:
                    result = await self._ensure.handle(
                        EnsureDailyStatusCommand(order_id=order.order_id, date=date_key)
                    )
                except DomainError as e:
                    logger.warning(
                        "Daily status backfill failed",
                        extra={"order_id": order.order_id, "date": date_key, "error": str(e)},
                    )
                    report.errors.append(
                        MigrationError(order_id=order.order_id, date_key=date_key, error=str(e))
                    )
                    continue
                except Exception as e:
                    logger.error(
                        "Daily status backfill crashed",
                        extra={"order_id": order.order_id, "date": date_key, "error": str(e)},
                        exc_info=True,
                    )
                    report.errors.append(
                        MigrationError(
                            order_id=order.order_id,
                            date_key=date_key,
                            error=f"{type(e).__name__}: {e}",
                        )
                    )
                    continue
                if result.created:
                    created += 1
            return created

        created_per_order = await asyncio.gather(*(backfill(order) for order in command.orders))

        report.statuses_created = sum(created_per_order)
        report.orders_affected = sum(1 for created in created_per_order if created)

        logger.info(
            "Daily status backfill completed",
            extra={
                "total_orders": report.total_orders,
                "statuses_created": report.statuses_created,
                "errors": len(report.errors),
            },
        )
        return report


class MigrateCurrentOperationalStatusesHandler:
    """Backfill today and tomorrow in the business timezone."""

    def __init__(
        self,
        migrate_handler: MigrateOrderStatusesCommandHandler,
        clock: IClock,
        timezone_name: str,
    ):
        self._migrate = migrate_handler
        self._clock = clock
        self._timezone_name = timezone_name

    async def handle(
        self, orders: Sequence[Order], now: Optional[datetime] = None
    ) -> MigrationReport:
        today, tomorrow = operational_dates(now or self._clock.now(), self._timezone_name)
        return await self._migrate.handle(
            MigrateOrderStatusesCommand(orders=orders, dates=(today, tomorrow))
        )
