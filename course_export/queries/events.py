"""Audit events for archive downloads."""

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import export_download_events


async def record_download(conn: AsyncConnection, course_id: int, user_id: int) -> None:
    """Record that an admin downloaded a course export (security-sensitive)."""
    await conn.execute(
        insert(export_download_events).values(course_id=course_id, user_id=user_id)
    )
