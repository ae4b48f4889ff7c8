"""
Scheduler infrastructure for background jobs.
"""

from .daily_status_jobs import DailyStatusBackfillJob, DailyStatusPruneJob
from .scheduler_config import SchedulerManager

__all__ = ["DailyStatusBackfillJob", "DailyStatusPruneJob", "SchedulerManager"]
