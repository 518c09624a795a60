"""User-related database queries using SQLAlchemy Core."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncConnection

from ..tables import users


async def get_user_by_id(conn: AsyncConnection, user_id: int) -> dict[str, Any] | None:
    """Get an active (not deleted) user by id."""
    result = await conn.execute(
        select(users)
        .where(users.c.user_id == user_id)
        .where(users.c.deleted_at.is_(None))
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def is_admin(conn: AsyncConnection, user_id: int) -> bool:
    """Check if user currently has the admin role."""
    result = await conn.execute(
        select(users.c.is_admin)
        .where(users.c.user_id == user_id)
        .where(users.c.deleted_at.is_(None))
    )
    row = result.first()
    return row is not None and row.is_admin is True
