"""Daily status maintenance from the command line.

Commands:
    analyze   report orders missing a status record (no writes)
    backfill  create missing records (default: today and tomorrow)
    legacy    rewrite legacy status strings for the given dates
    prune     drop records older than the retention window
    check     report and optionally fix skipped orders whose selection is not skipped

Usage:
    python scripts/manage_daily_statuses.py analyze --date 2025-03-10
    python scripts/manage_daily_statuses.py backfill
    python scripts/manage_daily_statuses.py check --date 2025-03-10 --fix

Uses the same environment as the service (REPOSITORY_BACKEND, MONGODB_URI, ...).
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from app import Services, build_services  # noqa: E402
from application.migration.commands import (  # noqa: E402
    MigrateLegacyStatusCommand,
    MigrateOrderStatusesCommand,
    PruneDailyStatusesCommand,
)
from application.migration.queries import analyze_order_statuses  # noqa: E402
from application.reconciliation.commands.fix_inconsistencies import (  # noqa: E402
    FixDataInconsistenciesCommand,
)
from application.reconciliation.queries.validate_consistency import (  # noqa: E402
    ValidateDataConsistencyQuery,
)
from domain.order.core.entities.order import Order  # noqa: E402
from infrastructure.config import configure_logging  # noqa: E402
from infrastructure.persistence.factory import get_unit_of_work_factory  # noqa: E402

logger = logging.getLogger("manage_daily_statuses")


async def _load_orders() -> List[Order]:
    async with get_unit_of_work_factory()() as uow:
        return await uow.orders.list_all()


async def analyze(dates: Sequence[str]) -> int:
    analysis = analyze_order_statuses(await _load_orders(), dates)
    for item in analysis.orders_with_missing_statuses:
        print(f"{item.order_id}: missing {', '.join(item.missing_dates)}")
    print(
        f"{analysis.total_orders} orders, {analysis.complete_orders} complete, "
        f"{analysis.missing_status_count} missing records"
    )
    return 0


async def backfill(services: Services, dates: Sequence[str]) -> int:
    orders = await _load_orders()
    if dates:
        report = await services.migrate_order_statuses.handle(
            MigrateOrderStatusesCommand(orders=orders, dates=dates)
        )
    else:
        report = await services.migrate_operational_statuses.handle(orders)
    print(
        f"{report.statuses_created} records created on {report.orders_affected} orders, "
        f"{len(report.errors)} errors"
    )
    return 1 if report.errors else 0


async def migrate_legacy(services: Services, dates: Sequence[str]) -> int:
    migrated = 0
    for order in await _load_orders():
        for date_key in dates:
            if await services.migrate_legacy_status.handle(
                MigrateLegacyStatusCommand(order_id=order.order_id, date=date_key)
            ):
                migrated += 1
    print(f"{migrated} legacy statuses migrated")
    return 0


async def prune(services: Services, retention_days: int) -> int:
    report = await services.prune_daily_statuses.handle(
        PruneDailyStatusesCommand(retention_days=retention_days)
    )
    print(
        f"{report.records_removed} records removed from {report.orders_updated} orders "
        f"(cutoff {report.cutoff_date}, {report.failures} failures)"
    )
    return 1 if report.failures else 0


async def check(services: Services, dates: Sequence[str], fix: bool) -> int:
    report = await services.validate_consistency.handle(ValidateDataConsistencyQuery(dates=dates))
    for item in report.inconsistencies:
        print(f"{item.order_id}/{item.selection_id} {item.date_key}: {item.issue}")
    print(f"{report.inconsistencies_found} inconsistencies")

    if fix and report.inconsistencies:
        result = await services.fix_inconsistencies.handle(
            FixDataInconsistenciesCommand(inconsistencies=report.inconsistencies)
        )
        print(f"{len(result.succeeded)} fixed, {len(result.failed)} failed")
        return 0 if result.all_succeeded else 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("analyze", "backfill", "legacy", "check"):
        cmd = sub.add_parser(name)
        cmd.add_argument("--date", dest="dates", action="append", default=[], help="YYYY-MM-DD")
        if name == "check":
            cmd.add_argument("--fix", action="store_true")

    prune_cmd = sub.add_parser("prune")
    prune_cmd.add_argument("--retention-days", type=int, default=7)
    return parser


async def run(args: argparse.Namespace) -> int:
    if args.command == "analyze":
        return await analyze(args.dates)

    services = build_services()
    if args.command == "backfill":
        return await backfill(services, args.dates)
    if args.command == "legacy":
        return await migrate_legacy(services, args.dates)
    if args.command == "check":
        return await check(services, args.dates, args.fix)
    return await prune(services, args.retention_days)


def main() -> None:
    configure_logging()
    args = build_parser().parse_args()
    if args.command in ("analyze", "legacy", "check") and not args.dates:
        print("--date is required for this command", file=sys.stderr)
        sys.exit(2)

    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
