"""
Course provider: where course listings and structure snapshots come from.

The export pipeline only depends on the CourseProvider protocol;
DatabaseCourseProvider reads the courses / course_sections / course_modules /
content_documents tables.
"""

import logging
from typing import Protocol

from .availability import (
    AvailabilityFormatError,
    Condition,
    ConditionTree,
    parse_availability,
)
from .database import get_connection
from .queries import courses as course_queries
from .structure import (
    CourseNotFoundError,
    CourseRef,
    CourseStructure,
    ModuleInfo,
    SectionInfo,
)

logger = logging.getLogger(__name__)

# Stands in for an availability value that could not be parsed. It is
# user-dependent, so the item is treated as restricted.
UNREADABLE_AVAILABILITY = ConditionTree(op="&", children=(Condition(type="unreadable"),))


class CourseProvider(Protocol):
    async def list_published_courses(self) -> dict[int, int]:
        """Course id -> newest document publish time, for courses with content."""
        ...

    async def get_course_structure(self, course_id: int) -> CourseStructure: ...

    async def get_published_times(self, course_id: int) -> dict[int, int]:
        """Content id -> publish time for one course."""
        ...


def section_display_name(number: int, name: str | None) -> str:
    """Name shown for a section, with a default for unnamed ones."""
    if name:
        return name
    return "General" if number == 0 else f"Section {number}"


def _availability(value, what: str) -> ConditionTree | None:
    try:
        return parse_availability(value)
    except AvailabilityFormatError as e:
        logger.warning(f"Unreadable availability for {what}: {e}")
        return UNREADABLE_AVAILABILITY


class DatabaseCourseProvider:
    """CourseProvider backed by the course tables."""

    async def list_published_courses(self) -> dict[int, int]:
        async with get_connection() as conn:
            return await course_queries.get_max_published_by_course(conn)

    async def get_course_structure(self, course_id: int) -> CourseStructure:
        async with get_connection() as conn:
            course = await course_queries.get_course(conn, course_id)
            if not course:
                raise CourseNotFoundError(f"Course {course_id} not found")
            section_rows = await course_queries.get_course_sections(conn, course_id)
            module_rows = await course_queries.get_course_modules(conn, course_id)

        sections = {
            row["section_id"]: SectionInfo(
                id=row["section_id"],
                number=row["section_number"],
                name=section_display_name(row["section_number"], row["name"]),
                availability=_availability(
                    row["availability"], f"section {row['section_id']}"
                ),
            )
            for row in section_rows
        }
        modules = [
            ModuleInfo(
                id=row["cm_id"],
                content_id=row["content_id"],
                name=row["name"],
                section_id=row["section_id"],
                visible=bool(row["visible"]),
                availability=_availability(row["availability"], f"module {row['cm_id']}"),
            )
            for row in module_rows
        ]

        return CourseStructure(
            course=CourseRef(
                id=course["course_id"],
                shortname=course["shortname"],
                fullname=course["fullname"],
                visible=bool(course["visible"]),
                category_id=course["category_id"] or 0,
            ),
            sections=sections,
            modules=modules,
        )

    async def get_published_times(self, course_id: int) -> dict[int, int]:
        async with get_connection() as conn:
            return await course_queries.get_published_times(conn, course_id)
