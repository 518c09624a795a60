"""
APScheduler job that runs the batch export on a fixed interval.

Runs inside the FastAPI process (one event loop). max_instances=1 keeps runs
from overlapping within this process; the deployment is expected to run a
single app instance with the scheduler enabled.
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from .archive.batch import run_batch
from .clock import SystemClock
from .config import ExportConfig, get_export_config
from .services import get_archive_builder

logger = logging.getLogger(__name__)

EXPORT_JOB_ID = "export_all"

_scheduler: AsyncIOScheduler | None = None


async def run_export_job() -> dict:
    """Run one export batch with the database-backed collaborators."""
    config = get_export_config()
    clock = SystemClock()
    builder = get_archive_builder(config, clock)

    result = await run_batch(
        builder,
        provider=builder.provider,
        store=builder.store,
        clock=clock,
        config=config,
    )
    return {
        "processed": len(result.processed),
        "failed": len(result.failed),
        "remaining": result.remaining,
    }


def init_scheduler(config: ExportConfig | None = None) -> AsyncIOScheduler:
    """
    Start the scheduler and register the export job.

    Call this during app startup (in FastAPI lifespan).
    """
    global _scheduler

    if _scheduler is not None:
        return _scheduler

    config = config or get_export_config()

    _scheduler = AsyncIOScheduler(
        job_defaults={
            "coalesce": True,  # Combine missed runs into one
            "max_instances": 1,
            "misfire_grace_time": 60 * config.interval_minutes,
        },
    )
    _scheduler.add_job(
        run_export_job,
        trigger="interval",
        minutes=config.interval_minutes,
        id=EXPORT_JOB_ID,
        replace_existing=True,
    )
    _scheduler.start()
    logger.info(f"Export scheduler started (every {config.interval_minutes} min)")

    return _scheduler


def shutdown_scheduler() -> None:
    """Shutdown the scheduler. Call this during app shutdown."""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=True)
        _scheduler = None
