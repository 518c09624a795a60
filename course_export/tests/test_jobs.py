"""Tests for the scheduled export job."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from course_export import jobs
from course_export.archive.batch import BatchResult
from course_export.config import ExportConfig


@pytest.fixture(autouse=True)
def reset_scheduler():
    jobs._scheduler = None
    yield
    jobs._scheduler = None


@pytest.mark.asyncio
async def test_run_export_job_reports_counts():
    config = ExportConfig(salt="s")
    builder = MagicMock()

    with patch("course_export.jobs.get_export_config", return_value=config), patch(
        "course_export.jobs.get_archive_builder", return_value=builder
    ), patch("course_export.jobs.run_batch", new_callable=AsyncMock) as mock_batch:
        mock_batch.return_value = BatchResult(processed=[1, 2], failed=[3], remaining=4)

        summary = await jobs.run_export_job()

    assert summary == {"processed": 2, "failed": 1, "remaining": 4}
    kwargs = mock_batch.await_args.kwargs
    assert kwargs["provider"] is builder.provider
    assert kwargs["store"] is builder.store
    assert kwargs["config"] is config


def test_init_scheduler_registers_interval_job():
    with patch("course_export.jobs.AsyncIOScheduler") as mock_scheduler_cls:
        scheduler = jobs.init_scheduler(ExportConfig(salt="s", interval_minutes=10))

        mock_scheduler_cls.assert_called_once()
        job_defaults = mock_scheduler_cls.call_args.kwargs["job_defaults"]
        assert job_defaults["max_instances"] == 1
        assert job_defaults["coalesce"] is True

        scheduler.add_job.assert_called_once()
        args, kwargs = scheduler.add_job.call_args
        assert args[0] is jobs.run_export_job
        assert kwargs["trigger"] == "interval"
        assert kwargs["minutes"] == 10
        assert kwargs["id"] == jobs.EXPORT_JOB_ID
        scheduler.start.assert_called_once()

        # Second call reuses the running scheduler
        assert jobs.init_scheduler() is scheduler
        mock_scheduler_cls.assert_called_once()


def test_shutdown_scheduler():
    with patch("course_export.jobs.AsyncIOScheduler"):
        scheduler = jobs.init_scheduler(ExportConfig(salt="s"))

    jobs.shutdown_scheduler()

    scheduler.shutdown.assert_called_once_with(wait=True)
    assert jobs._scheduler is None
