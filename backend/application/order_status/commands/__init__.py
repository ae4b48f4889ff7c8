"""Commands for daily order statuses."""

from .ensure_daily_status import (
    EnsureDailyStatusCommand,
    EnsureDailyStatusCommandHandler,
    EnsureDailyStatusResult,
)
from .update_daily_status import (
    UpdateDailyStatusCommand,
    UpdateDailyStatusCommandHandler,
)

__all__ = [
    "EnsureDailyStatusCommand",
    "EnsureDailyStatusCommandHandler",
    "EnsureDailyStatusResult",
    "UpdateDailyStatusCommand",
    "UpdateDailyStatusCommandHandler",
]
