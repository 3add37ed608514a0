"""
Process-owned cron scheduler for background tasks.

main.py builds one TaskScheduler, registers the job-alert triggers, starts it
on startup and shuts it down on exit. Handlers are plain functions, so
APScheduler runs them on its thread pool and DB / SMTP / LLM calls never
block the event loop.
"""
import asyncio
from typing import Any, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from hiresphere.app.core.config import settings
from hiresphere.app.core.logging_config import get_logger
from hiresphere.app.services.alert_processor import process_job_alerts

logger = get_logger("tasks.scheduler")

# (frequency, settings attribute holding its crontab expression)
ALERT_SCHEDULES: tuple[tuple[str, str], ...] = (
    ("daily", "alert_daily_cron"),
    ("weekly", "alert_weekly_cron"),
    ("immediate", "alert_immediate_cron"),  # hourly poll
)


class TaskScheduler:
    """Holds (crontab expression, handler) registrations on an AsyncIOScheduler."""

    def __init__(self, timezone: str | None = None):
        self.timezone = timezone or settings.scheduler_timezone
        self._scheduler = AsyncIOScheduler(timezone=self.timezone)
        self._registrations: dict[str, str] = {}

    def add_cron(self, job_id: str, expression: str, handler: Callable[..., Any], *args: Any) -> None:
        trigger = CronTrigger.from_crontab(expression, timezone=self.timezone)
        self._scheduler.add_job(
            handler,
            trigger,
            args=args,
            id=job_id,
            name=job_id,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        self._registrations[job_id] = expression
        logger.info("Scheduled job_id=%s cron=%r", job_id, expression)

    @property
    def jobs(self) -> list[dict]:
        return [{"id": job_id, "cron": expr} for job_id, expr in self._registrations.items()]

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Scheduler started jobs=%d timezone=%s", len(self._registrations), self.timezone)

    async def shutdown(self) -> None:
        """Stop the scheduler. Awaited on the loop it was started on."""
        if self._scheduler.running:
            # AsyncIOScheduler queues the stop on the event loop; let it run
            self._scheduler.shutdown(wait=False)
            await asyncio.sleep(0)
            logger.info("Scheduler stopped")


def run_job_alerts(process: Callable[[str], Any], frequency: str) -> None:
    """Trigger body: one alert batch. Errors are logged so the timer keeps firing."""
    logger.info("Triggering %s job alert processing", frequency.upper())
    try:
        process(frequency)
    except Exception:
        logger.exception("Job alert processing failed frequency=%s", frequency)


def init_job_alert_schedulers(
    scheduler: TaskScheduler | None = None,
    process: Callable[[str], Any] = process_job_alerts,
) -> TaskScheduler:
    """Register the daily, weekly and hourly ("immediate") alert triggers."""
    scheduler = scheduler or TaskScheduler()
    for frequency, setting_name in ALERT_SCHEDULES:
        scheduler.add_cron(
            f"job_alerts_{frequency}",
            getattr(settings, setting_name),
            run_job_alerts,
            process,
            frequency,
        )
    return scheduler
