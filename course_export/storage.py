"""
Stored export archives: one zip per course, keyed by course id.

The export pipeline only talks to the ArchiveStore protocol.
DatabaseArchiveStore keeps the zips in the export_archives table.
"""

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from .database import get_connection, get_transaction
from .queries import archives as archive_queries

ARCHIVE_FILENAME_PATTERN = re.compile(r"^([0-9]+)\.zip$")


def archive_filename(course_id: int) -> str:
    return f"{course_id}.zip"


@dataclass(frozen=True)
class StoredArchive:
    course_id: int
    filename: str
    size: int
    time_created: int
    time_modified: int

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "StoredArchive":
        return cls(
            course_id=int(row["course_id"]),
            filename=row["filename"],
            size=int(row["size"]),
            time_created=int(row["time_created"]),
            time_modified=int(row["time_modified"]),
        )


class ArchiveStore(Protocol):
    async def get(self, course_id: int) -> StoredArchive | None: ...

    async def list_archives(self) -> dict[int, StoredArchive]:
        """All archives, keyed by course id."""
        ...

    async def read(self, course_id: int) -> bytes | None: ...

    async def delete(self, course_id: int) -> None: ...

    async def replace(self, course_id: int, zip_path: Path, timestamp: int) -> StoredArchive:
        """Atomically swap in a new archive, timestamped with `timestamp`."""
        ...


class DatabaseArchiveStore:
    """ArchiveStore backed by the export_archives table."""

    async def get(self, course_id: int) -> StoredArchive | None:
        async with get_connection() as conn:
            row = await archive_queries.get_archive(conn, course_id)
        return StoredArchive.from_row(row) if row else None

    async def list_archives(self) -> dict[int, StoredArchive]:
        async with get_connection() as conn:
            rows = await archive_queries.list_archives(conn)
        result = {}
        for row in rows:
            # Ignore anything not named like a course archive
            if ARCHIVE_FILENAME_PATTERN.match(row["filename"]):
                archive = StoredArchive.from_row(row)
                result[archive.course_id] = archive
        return result

    async def read(self, course_id: int) -> bytes | None:
        async with get_connection() as conn:
            return await archive_queries.get_archive_content(conn, course_id)

    async def delete(self, course_id: int) -> None:
        async with get_transaction() as conn:
            await archive_queries.delete_archive(conn, course_id)

    async def replace(self, course_id: int, zip_path: Path, timestamp: int) -> StoredArchive:
        content = await asyncio.to_thread(Path(zip_path).read_bytes)
        # Readers see either the old archive or the new one, never neither
        async with get_transaction() as conn:
            await archive_queries.delete_archive(conn, course_id)
            row = await archive_queries.create_archive(conn, course_id, content, timestamp)
        return StoredArchive.from_row(row)
