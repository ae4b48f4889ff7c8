"""Composition root of the order status backend.

Wires repositories, handlers, notifications and scheduled jobs from the
environment (see ``infrastructure/config.py``). The admin dashboard and
the customer app call the handlers on ``Services``; running this module
directly starts the background jobs.
"""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from application.migration.commands import (
    MigrateCurrentOperationalStatusesHandler,
    MigrateLegacyStatusCommandHandler,
    MigrateOrderStatusesCommandHandler,
    PruneDailyStatusesCommandHandler,
)
from application.notifications.handlers import (
    OrderStatusNotificationHandler,
    register_notification_handlers,
)
from application.order_status.commands.ensure_daily_status import (
    EnsureDailyStatusCommandHandler,
)
from application.order_status.commands.update_daily_status import (
    UpdateDailyStatusCommandHandler,
)
from application.order_status.queries.get_allowed_next_statuses import (
    GetAllowedNextStatusesQueryHandler,
)
from application.order_status.queries.get_complete_orders import (
    GetCompleteOrdersQueryHandler,
)
from application.order_status.queries.get_status_statistics import (
    GetStatusStatisticsQueryHandler,
)
from application.reconciliation.commands.admin_direct_skip import (
    AdminDirectSkipCommandHandler,
)
from application.reconciliation.commands.admin_skip_action import (
    AdminSkipActionCommandHandler,
)
from application.reconciliation.commands.bulk_direct_skip import (
    BulkDirectSkipCommandHandler,
)
from application.reconciliation.commands.fix_inconsistencies import (
    FixDataInconsistenciesCommandHandler,
)
from application.reconciliation.commands.user_skip_request import (
    UserSkipRequestCommandHandler,
)
from application.reconciliation.queries.skip_requests import (
    GetPendingSkipRequestsQueryHandler,
    GetSkipRequestDetailsQueryHandler,
)
from application.reconciliation.queries.validate_consistency import (
    ValidateDataConsistencyQueryHandler,
)
from application.shared.transaction import UnitOfWorkFactory
from domain.shared.ports.clock import IClock
from domain.shared.ports.notification_dispatcher import INotificationDispatcher
from infrastructure.cache.allergy_name_cache import AllergyNameCache
from infrastructure.clock import SystemClock
from infrastructure.config import (
    configure_logging,
    get_allergy_cache_ttl_seconds,
    get_business_timezone,
    get_daily_status_retention_days,
    get_transaction_max_attempts,
)
from infrastructure.events.in_memory_bus import InMemoryEventBus
from infrastructure.notifications.factory import get_notification_dispatcher
from infrastructure.notifications.http_dispatcher import HttpNotificationDispatcher
from infrastructure.persistence.factory import (
    get_allergy_repository,
    get_unit_of_work_factory,
)
from infrastructure.scheduler import (
    DailyStatusBackfillJob,
    DailyStatusPruneJob,
    SchedulerManager,
)

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Every use case handler, built once per process."""

    event_bus: InMemoryEventBus
    dispatcher: INotificationDispatcher
    notifications: OrderStatusNotificationHandler
    allergy_cache: AllergyNameCache
    scheduler: SchedulerManager

    ensure_daily_status: EnsureDailyStatusCommandHandler
    update_daily_status: UpdateDailyStatusCommandHandler
    allowed_next_statuses: GetAllowedNextStatusesQueryHandler
    status_statistics: GetStatusStatisticsQueryHandler
    complete_orders: GetCompleteOrdersQueryHandler

    user_skip_request: UserSkipRequestCommandHandler
    admin_skip_action: AdminSkipActionCommandHandler
    admin_direct_skip: AdminDirectSkipCommandHandler
    bulk_direct_skip: BulkDirectSkipCommandHandler
    skip_request_details: GetSkipRequestDetailsQueryHandler
    pending_skip_requests: GetPendingSkipRequestsQueryHandler
    validate_consistency: ValidateDataConsistencyQueryHandler
    fix_inconsistencies: FixDataInconsistenciesCommandHandler

    migrate_order_statuses: MigrateOrderStatusesCommandHandler
    migrate_operational_statuses: MigrateCurrentOperationalStatusesHandler
    migrate_legacy_status: MigrateLegacyStatusCommandHandler
    prune_daily_statuses: PruneDailyStatusesCommandHandler


def build_services(
    uow_factory: Optional[UnitOfWorkFactory] = None,
    clock: Optional[IClock] = None,
    dispatcher: Optional[INotificationDispatcher] = None,
) -> Services:
    """Build the handler graph; arguments override the environment defaults."""
    uow_factory = uow_factory or get_unit_of_work_factory()
    clock = clock or SystemClock()
    dispatcher = dispatcher or get_notification_dispatcher()
    attempts = get_transaction_max_attempts()
    timezone_name = get_business_timezone()

    event_bus = InMemoryEventBus()
    notifications = register_notification_handlers(event_bus, dispatcher)

    ensure = EnsureDailyStatusCommandHandler(uow_factory, clock, attempts)
    migrate = MigrateOrderStatusesCommandHandler(ensure)
    prune = PruneDailyStatusesCommandHandler(uow_factory, clock, attempts)
    direct_skip = AdminDirectSkipCommandHandler(uow_factory, event_bus, clock, attempts)

    scheduler = SchedulerManager()
    scheduler.initialize(
        DailyStatusBackfillJob(uow_factory, migrate, clock, timezone_name),
        DailyStatusPruneJob(prune, get_daily_status_retention_days()),
        business_timezone=timezone_name,
    )

    return Services(
        event_bus=event_bus,
        dispatcher=dispatcher,
        notifications=notifications,
        allergy_cache=AllergyNameCache(
            get_allergy_repository(), clock, get_allergy_cache_ttl_seconds()
        ),
        scheduler=scheduler,
        ensure_daily_status=ensure,
        update_daily_status=UpdateDailyStatusCommandHandler(
            uow_factory, event_bus, clock, attempts
        ),
        allowed_next_statuses=GetAllowedNextStatusesQueryHandler(uow_factory),
        status_statistics=GetStatusStatisticsQueryHandler(uow_factory),
        complete_orders=GetCompleteOrdersQueryHandler(uow_factory),
        user_skip_request=UserSkipRequestCommandHandler(uow_factory, event_bus, clock, attempts),
        admin_skip_action=AdminSkipActionCommandHandler(uow_factory, event_bus, clock, attempts),
        admin_direct_skip=direct_skip,
        bulk_direct_skip=BulkDirectSkipCommandHandler(direct_skip),
        skip_request_details=GetSkipRequestDetailsQueryHandler(uow_factory),
        pending_skip_requests=GetPendingSkipRequestsQueryHandler(uow_factory),
        validate_consistency=ValidateDataConsistencyQueryHandler(uow_factory),
        fix_inconsistencies=FixDataInconsistenciesCommandHandler(uow_factory, clock, attempts),
        migrate_order_statuses=migrate,
        migrate_operational_statuses=MigrateCurrentOperationalStatusesHandler(
            migrate, clock, timezone_name
        ),
        migrate_legacy_status=MigrateLegacyStatusCommandHandler(uow_factory, clock, attempts),
        prune_daily_statuses=prune,
    )


@asynccontextmanager
async def lifespan(services: Services) -> AsyncIterator[Services]:
    """Open the notification client, backfill once, run the scheduler."""
    logger.info("lifespan.startup", extra={"phase": "scheduler_start"})

    async with AsyncExitStack() as stack:
        if isinstance(services.dispatcher, HttpNotificationDispatcher):
            await stack.enter_async_context(services.dispatcher)

        services.scheduler.start()
        stack.callback(services.scheduler.shutdown, False)

        await services.scheduler.trigger_backfill_now()
        logger.info("lifespan.ready", extra={"jobs": len(services.scheduler.get_jobs())})
        yield services
        logger.info(
            "lifespan.shutdown",
            extra={"status": "cleanup", "pending_notifications": services.notifications.pending_count},
        )
        await services.notifications.drain()


async def main() -> None:  # pragma: no cover
    configure_logging()
    async with lifespan(build_services()):
        await asyncio.Event().wait()


if __name__ == "__main__":  # pragma: no cover
    asyncio.run(main())
