"""
Course export archive routes.

Endpoints:
- GET /api/admin/exports - List stored archives with fresh download links (admin)
- POST /api/admin/exports/{course_id}/run - Rebuild one course archive now (admin)
- GET /api/exports/download?token=... - Download one archive using a signed link

The download endpoint needs no session: the signed token is the credential,
and it is only valid while the user it was issued to is still an admin.
"""

import logging
import tempfile
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel

from course_export.archive.builder import ArchiveBuildError, ArchiveBuilder, get_filename_safe
from course_export.archive.metadata import format_timestamp
from course_export.database import get_connection, get_transaction
from course_export.queries.courses import get_courses_by_ids
from course_export.queries.events import record_download
from course_export.services import get_archive_builder, get_download_tokens
from course_export.storage import ArchiveStore, DatabaseArchiveStore
from course_export.structure import CourseNotFoundError
from course_export.tokens import DownloadTokenError, DownloadTokens, parse_download_token
from web_api.auth import require_admin
from web_api.rate_limit import download_limiter

router = APIRouter(tags=["exports"])

logger = logging.getLogger(__name__)

# Shown for every token failure; the specific reason is only logged
INVALID_LINK_MESSAGE = "This download link is invalid or has expired"


class ExportEntry(BaseModel):
    """One stored course archive, as listed for admins."""

    course_id: int
    shortname: str
    hidden: bool
    last_published: int
    last_published_time: str
    size_bytes: int
    download_url: str


class ExportListResponse(BaseModel):
    exports: list[ExportEntry]


def get_tokens() -> DownloadTokens:
    return get_download_tokens()


def get_archive_store() -> ArchiveStore:
    return DatabaseArchiveStore()


def get_builder() -> ArchiveBuilder:
    return get_archive_builder()


@router.get("/api/admin/exports", response_model=ExportListResponse)
async def list_exports_endpoint(
    admin: dict = Depends(require_admin),
    store: ArchiveStore = Depends(get_archive_store),
    tokens: DownloadTokens = Depends(get_tokens),
) -> ExportListResponse:
    """
    List available course archives, sorted by course shortname.

    Each entry carries a download URL signed for the requesting admin.
    Archives whose course no longer exists are left out.
    """
    archives = await store.list_archives()

    async with get_connection() as conn:
        course_rows = await get_courses_by_ids(conn, list(archives))

    site_url = tokens.config.site_url
    exports = []
    for course_id, archive in archives.items():
        course = course_rows.get(course_id)
        if not course:
            continue
        token = tokens.issue(course_id, admin["user_id"])
        exports.append(
            ExportEntry(
                course_id=course_id,
                shortname=course["shortname"],
                hidden=not course["visible"],
                last_published=archive.time_modified,
                last_published_time=format_timestamp(archive.time_modified),
                size_bytes=archive.size,
                download_url=f"{site_url}/api/exports/download?"
                + urlencode({"token": token}),
            )
        )

    exports.sort(key=lambda e: e.shortname)
    return ExportListResponse(exports=exports)


@router.post("/api/admin/exports/{course_id}/run")
async def run_export_endpoint(
    course_id: int,
    admin: dict = Depends(require_admin),
    builder: ArchiveBuilder = Depends(get_builder),
) -> dict[str, Any]:
    """
    Rebuild one course's archive immediately, outside the scheduled batch.
    """
    with tempfile.TemporaryDirectory(prefix="course-export-") as temp_root:
        try:
            archive = await builder.process_course(course_id, Path(temp_root))
        except CourseNotFoundError:
            raise HTTPException(status_code=404, detail="Course not found")
        except ArchiveBuildError as e:
            logger.error(f"Export of course {course_id} failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    logger.info(f"Admin {admin['user_id']} rebuilt export for course {course_id}")
    return {
        "status": "exported",
        "course_id": archive.course_id,
        "size_bytes": archive.size,
        "last_published": archive.time_modified,
    }


@router.get("/api/exports/download", dependencies=[Depends(download_limiter)])
async def download_export_endpoint(
    token: str = Query(...),
    store: ArchiveStore = Depends(get_archive_store),
    tokens: DownloadTokens = Depends(get_tokens),
) -> Response:
    """
    Stream a course archive, named after the course shortname.

    Any token problem gives the same 403 so the link does not reveal which
    check failed.
    """
    try:
        archive = await tokens.verify(token)
    except DownloadTokenError as e:
        logger.warning(f"Export download refused: {e.reason.value}")
        raise HTTPException(status_code=403, detail=INVALID_LINK_MESSAGE)

    content = await store.read(archive.course_id)
    if content is None:
        # Deleted between verification and read
        raise HTTPException(status_code=403, detail=INVALID_LINK_MESSAGE)

    # Downloads are security-sensitive; keep an audit trail
    token_data = parse_download_token(token)
    async with get_transaction() as conn:
        await record_download(conn, token_data.course_id, token_data.user_id)
        course_rows = await get_courses_by_ids(conn, [archive.course_id])
    logger.info(
        f"User {token_data.user_id} downloaded export for course {archive.course_id}"
    )

    course = course_rows.get(archive.course_id)
    shortname = course["shortname"] if course else str(archive.course_id)
    filename = get_filename_safe(shortname) + ".zip"

    return Response(
        content=content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "private, max-age=0",
        },
    )
