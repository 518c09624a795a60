"""Stored export archive queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import export_archives

# Everything except the (potentially large) content column
_summary_columns = (
    export_archives.c.course_id,
    export_archives.c.filename,
    export_archives.c.size,
    export_archives.c.time_created,
    export_archives.c.time_modified,
)


async def get_archive(conn: AsyncConnection, course_id: int) -> dict[str, Any] | None:
    """Get archive details (without content) for a course."""
    result = await conn.execute(
        select(*_summary_columns).where(export_archives.c.course_id == course_id)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def list_archives(conn: AsyncConnection) -> list[dict[str, Any]]:
    """List all stored archives (without content)."""
    result = await conn.execute(
        select(*_summary_columns).order_by(export_archives.c.course_id)
    )
    return [dict(row) for row in result.mappings()]


async def get_archive_content(conn: AsyncConnection, course_id: int) -> bytes | None:
    """Get the raw zip bytes for a course."""
    result = await conn.execute(
        select(export_archives.c.content).where(
            export_archives.c.course_id == course_id
        )
    )
    row = result.first()
    return row.content if row else None


async def delete_archive(conn: AsyncConnection, course_id: int) -> bool:
    """Delete a course's archive. Returns True if a row was removed."""
    result = await conn.execute(
        delete(export_archives).where(export_archives.c.course_id == course_id)
    )
    return result.rowcount > 0


async def create_archive(
    conn: AsyncConnection,
    course_id: int,
    content: bytes,
    timestamp: int,
) -> dict[str, Any]:
    """Insert an archive; created and modified times are both `timestamp`."""
    result = await conn.execute(
        insert(export_archives)
        .values(
            course_id=course_id,
            filename=f"{course_id}.zip",
            content=content,
            size=len(content),
            time_created=timestamp,
            time_modified=timestamp,
        )
        .returning(*_summary_columns)
    )
    return dict(result.mappings().first())
