"""Migration commands."""

from .migrate_legacy_status import (
    MigrateLegacyStatusCommand,
    MigrateLegacyStatusCommandHandler,
)
from .migrate_order_statuses import (
    MigrateCurrentOperationalStatusesHandler,
    MigrateOrderStatusesCommand,
    MigrateOrderStatusesCommandHandler,
    MigrationError,
    MigrationReport,
)
from .prune_daily_statuses import (
    DEFAULT_RETENTION_DAYS,
    PruneDailyStatusesCommand,
    PruneDailyStatusesCommandHandler,
    PruneReport,
)

__all__ = [
    "MigrateOrderStatusesCommand",
    "MigrateOrderStatusesCommandHandler",
    "MigrateCurrentOperationalStatusesHandler",
    "MigrationError",
    "MigrationReport",
    "MigrateLegacyStatusCommand",
    "MigrateLegacyStatusCommandHandler",
    "DEFAULT_RETENTION_DAYS",
    "PruneDailyStatusesCommand",
    "PruneDailyStatusesCommandHandler",
    "PruneReport",
]
