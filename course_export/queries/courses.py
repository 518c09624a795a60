"""Course structure and content queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import content_documents, course_modules, course_sections, courses

# A document's effective publish time falls back to when it was last converted
_published = func.coalesce(
    content_documents.c.published_at, content_documents.c.converted_at
)


async def get_max_published_by_course(conn: AsyncConnection) -> dict[int, int]:
    """
    Get every course with at least one content document, mapped to the newest
    publish time among its documents.
    """
    result = await conn.execute(
        select(
            content_documents.c.course_id,
            func.max(_published).label("published_at"),
        )
        .where(content_documents.c.course_id != 0)
        .group_by(content_documents.c.course_id)
        .order_by(func.max(_published))
    )
    return {
        row.course_id: int(row.published_at or 0) for row in result
    }


async def get_course(conn: AsyncConnection, course_id: int) -> dict[str, Any] | None:
    result = await conn.execute(select(courses).where(courses.c.course_id == course_id))
    row = result.mappings().first()
    return dict(row) if row else None


async def get_courses_by_ids(
    conn: AsyncConnection, course_ids: list[int]
) -> dict[int, dict[str, Any]]:
    """Get basic course rows for several courses, keyed by course id."""
    if not course_ids:
        return {}
    result = await conn.execute(
        select(courses).where(courses.c.course_id.in_(course_ids))
    )
    return {row["course_id"]: dict(row) for row in result.mappings()}


async def get_course_sections(
    conn: AsyncConnection, course_id: int
) -> list[dict[str, Any]]:
    result = await conn.execute(
        select(course_sections)
        .where(course_sections.c.course_id == course_id)
        .order_by(course_sections.c.section_number)
    )
    return [dict(row) for row in result.mappings()]


async def get_course_modules(
    conn: AsyncConnection, course_id: int
) -> list[dict[str, Any]]:
    """
    Get content modules on a course in page order.

    Modules in sections that no longer exist are still returned (sorted last),
    so the export can report them as errors instead of silently dropping them.
    """
    result = await conn.execute(
        select(course_modules)
        .select_from(
            course_modules.outerjoin(
                course_sections,
                course_sections.c.section_id == course_modules.c.section_id,
            )
        )
        .where(course_modules.c.course_id == course_id)
        .where(course_modules.c.content_id.isnot(None))
        .order_by(
            course_sections.c.section_number.asc().nulls_last(),
            course_modules.c.position,
            course_modules.c.cm_id,
        )
    )
    return [dict(row) for row in result.mappings()]


async def get_published_times(conn: AsyncConnection, course_id: int) -> dict[int, int]:
    """Map content id to effective publish time for one course."""
    result = await conn.execute(
        select(content_documents.c.content_id, _published.label("published_at"))
        .where(content_documents.c.course_id == course_id)
        .where(_published.isnot(None))
    )
    return {row.content_id: int(row.published_at) for row in result}


async def get_content_document(
    conn: AsyncConnection, content_id: int
) -> dict[str, Any] | None:
    result = await conn.execute(
        select(content_documents).where(content_documents.c.content_id == content_id)
    )
    row = result.mappings().first()
    return dict(row) if row else None
