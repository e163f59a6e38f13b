# papercatcher/scheduler/scheduler_service.py

import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from papercatcher.config import Config
from papercatcher.jobs.fetch_papers import IngestionPipeline

logger = logging.getLogger(__name__)

FETCH_JOB_ID = "fetch_papers"


async def scheduled_fetch() -> None:
    result = await IngestionPipeline().run()
    logger.info(f"⏱ Scheduled fetch finished: {result.message}")


class SchedulerService:
    """
    Runs the ingestion pipeline on a cron schedule inside the API's event loop.

    - Started / stopped from the FastAPI lifespan
    - Cron expression comes from settings.yaml (scheduler.fetch_job)
    """

    def __init__(self, timezone: Optional[str] = None):
        self.scheduler = AsyncIOScheduler(timezone=timezone or Config.scheduler.timezone)
        self._started = False

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------

    def start(self) -> None:
        """
        Start scheduler (idempotent).
        """
        if self._started:
            return

        if not Config.scheduler.enabled:
            logger.info("⏸ Scheduler disabled by config")
            return

        logger.info("⏱ Starting SchedulerService...")
        self.scheduler.start()
        self.reload()
        self._started = True

    def shutdown(self) -> None:
        if not self._started:
            return

        logger.info("🛑 Stopping SchedulerService...")
        self.scheduler.shutdown(wait=False)
        self._started = False

    # --------------------------------------------------
    # Job registration
    # --------------------------------------------------

    def reload(self) -> None:
        """
        Re-register jobs from config. Safe to call multiple times.
        """
        self.scheduler.remove_all_jobs()
        self.add_fetch_job(Config.scheduler.fetch_job)
        self._log_jobs()

    def add_fetch_job(self, cron_expr: str) -> None:
        trigger = CronTrigger.from_crontab(cron_expr)

        self.scheduler.add_job(
            scheduled_fetch,
            trigger=trigger,
            id=FETCH_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=300,
        )

        logger.info(f"✅ Job registered: {FETCH_JOB_ID} ({cron_expr})")

    def _log_jobs(self) -> None:
        jobs = self.scheduler.get_jobs()
        if not jobs:
            logger.warning("⚠️ No scheduled jobs")
            return

        for job in jobs:
            logger.info(f"📅 {job.id} | next run at {getattr(job, 'next_run_time', None)}")
