"""
Periodic reminder tick.

APScheduler runs the tick inside the API process when
REMINDER_SCHEDULER_ENABLED is set. Deployments that prefer cron call
`python manage.py tick` instead.
"""

from datetime import datetime, timedelta

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from renewals.config import get_logger, get_settings

logger = get_logger(__name__)

TICK_JOB_ID = "process_renewal_reminders"

_scheduler: AsyncIOScheduler | None = None


async def run_reminder_tick() -> None:
    """Job body. Business logic stays in the use case."""
    from renewals.application.use_cases import ProcessRenewalRemindersUseCase

    summary = await ProcessRenewalRemindersUseCase().execute()
    if summary.skipped:
        logger.info("scheduled_tick_skipped")


def start_scheduler() -> AsyncIOScheduler | None:
    """
    Start the scheduler once per process.

    Returns None when disabled in settings.
    """
    global _scheduler

    settings = get_settings().reminders
    if not settings.scheduler_enabled:
        logger.info("scheduler_disabled")
        return None

    if _scheduler is not None:
        logger.info("scheduler_already_running")
        return _scheduler

    scheduler = AsyncIOScheduler(timezone=settings.timezone)
    scheduler.add_job(
        run_reminder_tick,
        trigger="interval",
        hours=settings.tick_interval_hours,
        id=TICK_JOB_ID,
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        # First run shortly after startup rather than one interval later
        next_run_time=datetime.now().astimezone() + timedelta(seconds=30),
    )
    scheduler.start()
    _scheduler = scheduler

    logger.info(
        "scheduler_started",
        job_id=TICK_JOB_ID,
        interval_hours=settings.tick_interval_hours,
        timezone=settings.timezone,
    )
    return scheduler


def shutdown_scheduler() -> None:
    global _scheduler
    if _scheduler is not None:
        _scheduler.shutdown(wait=False)
        _scheduler = None
        logger.info("scheduler_stopped")


def next_tick_time() -> datetime | None:
    """When the tick job fires next, or None if no scheduler is running."""
    if _scheduler is None:
        return None
    job = _scheduler.get_job(TICK_JOB_ID)
    return job.next_run_time if job else None
