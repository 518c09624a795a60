"""
Time-boxed batch export.

Runs courses one at a time, oldest pending first, until the worklist is empty
or the time limit has passed. The limit is only checked between courses, so a
run can overrun by up to one course. Safe to re-run on a fixed schedule: each
run recomputes the worklist from scratch.
"""

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import sentry_sdk

from ..clock import Clock
from ..config import ExportConfig
from ..provider import CourseProvider
from ..storage import ArchiveStore
from .builder import ArchiveBuilder
from .changes import list_courses_for_update_and_delete_old_files

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    processed: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    remaining: int = 0


async def run_batch(
    builder: ArchiveBuilder,
    provider: CourseProvider,
    store: ArchiveStore,
    clock: Clock,
    config: ExportConfig,
    temp_root: Path | None = None,
) -> BatchResult:
    """
    Export pending courses until done or out of time.

    A failure in one course is logged and reported, then the next course is
    tried; nothing in a single course can stop the batch.
    """
    start = clock.time()
    result = BatchResult()

    worklist = await list_courses_for_update_and_delete_old_files(provider, store)

    own_temp = None
    if worklist and temp_root is None:
        own_temp = Path(tempfile.mkdtemp(prefix="course-export-"))
        temp_root = own_temp

    try:
        while worklist and clock.time() - start < config.time_limit_seconds:
            course_id = worklist.pop(0)
            try:
                await builder.process_course(course_id, temp_root)
                result.processed.append(course_id)
            except Exception as e:
                logger.error(f"Error processing {course_id}: {e}")
                sentry_sdk.capture_exception(e)
                result.failed.append(course_id)
    finally:
        if own_temp is not None:
            shutil.rmtree(own_temp, ignore_errors=True)

    result.remaining = len(worklist)
    logger.info(f"{result.remaining} course(s) still due for processing")
    return result
