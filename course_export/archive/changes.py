"""Work out which courses need a fresh export."""

import logging

from ..provider import CourseProvider
from ..storage import ArchiveStore

logger = logging.getLogger(__name__)


def plan_updates(
    published: dict[int, int],
    archived: dict[int, int],
) -> tuple[list[int], list[int]]:
    """
    Compare source publish times with stored archive times.

    Args:
        published: Course id -> newest publish time of its content
        archived: Course id -> timestamp of its stored archive

    Returns:
        (pending, orphaned): course ids needing export, oldest publish time
        first; and archive course ids with no matching course
    """
    orphaned = sorted(course_id for course_id in archived if course_id not in published)
    pending = [
        course_id
        for course_id, published_at in published.items()
        if course_id not in archived or published_at > archived[course_id]
    ]
    # Oldest publish time first; ties by course id
    pending.sort(key=lambda course_id: (published[course_id], course_id))
    return pending, orphaned


async def list_courses_for_update_and_delete_old_files(
    provider: CourseProvider,
    store: ArchiveStore,
) -> list[int]:
    """
    Get the courses needing export in oldest-first order.

    Also deletes any stored archive whose course no longer has content.
    """
    published = await provider.list_published_courses()
    archives = await store.list_archives()

    pending, orphaned = plan_updates(
        published,
        {course_id: archive.time_modified for course_id, archive in archives.items()},
    )
    for course_id in orphaned:
        logger.info(f"Deleting export archive for removed course {course_id}")
        await store.delete(course_id)

    return pending
