"""
APScheduler configuration and management.

Provides centralized scheduler configuration for the daily status
background jobs.
"""

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .daily_status_jobs import DailyStatusBackfillJob, DailyStatusPruneJob

logger = logging.getLogger(__name__)

BACKFILL_JOB_ID = "daily_status_backfill"
PRUNE_JOB_ID = "daily_status_prune"


class SchedulerManager:
    """
    Manages APScheduler lifecycle and job registration.

    Example:
        >>> manager = SchedulerManager()
        >>> manager.initialize(backfill_job, prune_job)
        >>> manager.start()
    """

    def __init__(self) -> None:
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._backfill_job: Optional[DailyStatusBackfillJob] = None
        self._prune_job: Optional[DailyStatusPruneJob] = None

    def initialize(
        self,
        backfill_job: DailyStatusBackfillJob,
        prune_job: DailyStatusPruneJob,
        backfill_cron: str = "5 0 * * *",
        prune_cron: str = "0 2 * * *",
        business_timezone: str = "Asia/Dubai",
    ) -> None:
        """
        Initialize and configure scheduler with jobs.

        Args:
            backfill_job: Today/tomorrow status backfill
            prune_job: Retention cleanup
            backfill_cron: Cron for the backfill, in the business timezone
                (default: 00:05 every day)
            prune_cron: Cron for the cleanup, in UTC (default: 02:00 every day)
            business_timezone: Timezone the backfill cron is evaluated in
        """
        if self.scheduler is not None:
            logger.warning("Scheduler already initialized")
            return

        self._backfill_job = backfill_job
        self._prune_job = prune_job

        self.scheduler = AsyncIOScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,  # Combine missed runs
                "max_instances": 1,
                "misfire_grace_time": 3600,
            },
        )

        self.scheduler.add_job(
            backfill_job.run,
            trigger=CronTrigger.from_crontab(backfill_cron, timezone=business_timezone),
            id=BACKFILL_JOB_ID,
            name="Daily Status Backfill",
            replace_existing=True,
        )
        self.scheduler.add_job(
            prune_job.run,
            trigger=CronTrigger.from_crontab(prune_cron, timezone="UTC"),
            id=PRUNE_JOB_ID,
            name="Daily Status Cleanup",
            replace_existing=True,
        )

        logger.info(
            "Scheduler initialized",
            extra={"backfill_cron": backfill_cron, "prune_cron": prune_cron},
        )

    def start(self) -> None:
        """Start scheduler (begin executing jobs)."""
        if self.scheduler is None:
            raise RuntimeError("Scheduler not initialized")

        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler is None or not self.scheduler.running:
            logger.warning("Scheduler not running")
            return

        self.scheduler.shutdown(wait=wait)
        logger.info(f"Scheduler shutdown (wait={wait})")

    def get_jobs(self) -> list[dict[str, str]]:
        if self.scheduler is None:
            return []

        return [
            {
                "id": job.id,
                "name": job.name,
                "trigger": str(job.trigger),
            }
            for job in self.scheduler.get_jobs()
        ]

    async def trigger_backfill_now(self) -> None:
        """Run the backfill immediately (manual trigger from the dashboard)."""
        if self._backfill_job is None:
            raise RuntimeError("Backfill job not initialized")

        logger.info("Manually triggering daily status backfill")
        await self._backfill_job.run()
