"""Wiring of the database-backed collaborators used by the app and scripts."""

from .archive.builder import ArchiveBuilder
from .clock import Clock, SystemClock
from .config import ExportConfig, get_export_config
from .provider import DatabaseCourseProvider
from .renderer import DatabaseDocumentRenderer
from .storage import DatabaseArchiveStore
from .tokens import DatabaseAdminDirectory, DownloadTokens


def get_archive_builder(
    config: ExportConfig | None = None,
    clock: Clock | None = None,
) -> ArchiveBuilder:
    return ArchiveBuilder(
        provider=DatabaseCourseProvider(),
        renderer=DatabaseDocumentRenderer(),
        store=DatabaseArchiveStore(),
        clock=clock or SystemClock(),
        config=config or get_export_config(),
    )


def get_download_tokens(
    config: ExportConfig | None = None,
    clock: Clock | None = None,
) -> DownloadTokens:
    return DownloadTokens(
        config=config or get_export_config(),
        clock=clock or SystemClock(),
        admins=DatabaseAdminDirectory(),
        store=DatabaseArchiveStore(),
    )
