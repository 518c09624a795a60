#!/usr/bin/env python
"""
Export course archives from the command line.

Export one course (with progress output):
    python scripts/export_course.py --course-id 123

Run one time-boxed batch, as the scheduled job does:
    python scripts/export_course.py --batch

List courses that are waiting for export (nothing is changed except that
archives of deleted courses are removed):
    python scripts/export_course.py --pending
"""

import argparse
import asyncio
import sys
import tempfile
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv(".env")
load_dotenv(".env.local", override=True)

from course_export.archive.batch import run_batch
from course_export.archive.changes import list_courses_for_update_and_delete_old_files
from course_export.clock import SystemClock
from course_export.config import get_export_config
from course_export.database import close_engine
from course_export.services import get_archive_builder


async def export_one(course_id: int) -> None:
    builder = get_archive_builder()
    with tempfile.TemporaryDirectory(prefix="course-export-") as temp_root:
        archive = await builder.process_course(course_id, Path(temp_root), output=True)
    print(f"Stored {archive.filename} ({archive.size} bytes)")


async def export_batch() -> None:
    config = get_export_config()
    clock = SystemClock()
    builder = get_archive_builder(config, clock)
    result = await run_batch(builder, builder.provider, builder.store, clock, config)
    print(f"Processed: {len(result.processed)}")
    print(f"Failed:    {len(result.failed)} {result.failed or ''}")
    print(f"Remaining: {result.remaining}")


async def show_pending() -> None:
    builder = get_archive_builder()
    pending = await list_courses_for_update_and_delete_old_files(
        builder.provider, builder.store
    )
    print(f"{len(pending)} course(s) due for processing")
    for course_id in pending:
        print(f"  {course_id}")


async def run(args: argparse.Namespace) -> None:
    try:
        if args.course_id is not None:
            await export_one(args.course_id)
        elif args.batch:
            await export_batch()
        else:
            await show_pending()
    finally:
        await close_engine()


def main():
    parser = argparse.ArgumentParser(description="Export course archives")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--course-id", type=int, help="Export a single course")
    group.add_argument("--batch", action="store_true", help="Run one export batch")
    group.add_argument(
        "--pending", action="store_true", help="List courses waiting for export"
    )
    args = parser.parse_args()

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
