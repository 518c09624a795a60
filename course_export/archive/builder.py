"""
Build the export archive for a single course.

Files are written to a real scratch directory (not memory) so that each
document's publish time can be set as the file mtime and carried into the
zip entry timestamps.
"""

import asyncio
import logging
import os
import re
import shutil
import zipfile
from pathlib import Path

from ..clock import Clock
from ..config import ExportConfig
from ..provider import CourseProvider
from ..renderer import DocumentRenderer
from ..storage import ArchiveStore, StoredArchive
from .details import get_course_details
from .documents import DocumentExportError, export_document
from .metadata import METADATA_FILENAME, build_metadata
from .records import DocumentRecord

logger = logging.getLogger(__name__)

RESTRICTED_FOLDER = "restricted"

# Leaves room for the ".xml" suffix and the archive's own folder on extraction
MAX_FILENAME_LENGTH = 200

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_\-]")


class ArchiveBuildError(Exception):
    """Raised when a course archive cannot be produced at all."""

    pass


def get_filename_safe(filename: str) -> str:
    """Replace every character outside [A-Za-z0-9_-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", filename)


def document_filename(document: DocumentRecord) -> str:
    """
    Relative path of a document inside the archive, e.g.
    "003.Week_1.Getting_started.xml" or "restricted/004.Week_2.Quiz.xml".
    """
    section_name = document.section.name if document.section else ""
    name = (
        f"{document.sequence:03d}."
        f"{get_filename_safe(section_name)}."
        f"{get_filename_safe(document.name)}"
    )
    name = name[:MAX_FILENAME_LENGTH] + ".xml"
    if document.restricted:
        name = f"{RESTRICTED_FOLDER}/{name}"
    return name


class ArchiveBuilder:
    """Exports courses into zip archives and installs them in the store."""

    def __init__(
        self,
        provider: CourseProvider,
        renderer: DocumentRenderer,
        store: ArchiveStore,
        clock: Clock,
        config: ExportConfig,
    ):
        self.provider = provider
        self.renderer = renderer
        self.store = store
        self.clock = clock
        self.config = config

    async def process_course(
        self,
        course_id: int,
        temp_root: Path,
        output: bool = False,
    ) -> StoredArchive:
        """
        Create and store the archive for one course.

        Per-document problems are recorded in metadata.xml; they never stop
        the course. The scratch folder is always removed.

        Args:
            course_id: Course to export
            temp_root: Directory under which a per-course scratch folder is made
            output: Also print progress lines (for command-line use)

        Raises:
            ArchiveBuildError: If metadata.xml cannot be written
        """

        def progress(message: str) -> None:
            logger.info(message)
            if output:
                print(message)

        details = await get_course_details(self.provider, course_id, self.clock.time())
        progress(
            f"{details.shortname}: starting processing "
            f"({len(details.documents)} documents)"
        )

        folder = Path(temp_root) / str(course_id)
        await asyncio.to_thread(shutil.rmtree, folder, ignore_errors=True)
        folder.mkdir(parents=True)
        try:
            archive_files: dict[str, Path] = {}
            for document in details.documents:
                progress(f"  {document.sequence:03d} {document.name}")
                written = await self._write_document(document, folder)
                if written is not None:
                    archive_files[document.filename] = written

            progress("  Writing metadata...")
            metadata_path = folder / METADATA_FILENAME
            try:
                await asyncio.to_thread(
                    metadata_path.write_bytes,
                    build_metadata(details, self.config.site_url),
                )
            except OSError as e:
                raise ArchiveBuildError(f"Unable to write {METADATA_FILENAME}: {e}") from e
            archive_files[METADATA_FILENAME] = metadata_path

            progress("  Creating zip...")
            zip_path = folder / "archive.zip"
            await asyncio.to_thread(_write_zip, zip_path, archive_files)

            progress("  Storing...")
            archive = await self.store.replace(course_id, zip_path, details.max_published)
        finally:
            await asyncio.to_thread(shutil.rmtree, folder, ignore_errors=True)

        progress("  Done")
        return archive

    async def _write_document(self, document: DocumentRecord, folder: Path) -> Path | None:
        """Write one document's XML; returns the path, or None if it was not written."""
        # Documents that already failed (e.g. restriction lookup) have no file
        if not document.ok:
            return None

        filename = document_filename(document)
        filepath = folder / filename

        try:
            xml = await export_document(self.renderer, document)
        except DocumentExportError as e:
            document.fail(str(e))
            return None

        try:
            await asyncio.to_thread(_save_xml, filepath, xml)
        except OSError:
            document.fail(f"Unable to save XML to {filepath}")
            return None
        document.filename = filename

        try:
            await asyncio.to_thread(
                os.utime, filepath, (document.published_at, document.published_at)
            )
        except OSError:
            document.fail("Unable to update modified time")

        if self.config.delay_ms:
            await asyncio.sleep(self.config.delay_ms / 1000)

        return filepath


def _save_xml(filepath: Path, xml: bytes) -> None:
    # Creates restricted/ on first use
    filepath.parent.mkdir(exist_ok=True)
    filepath.write_bytes(xml)


def _write_zip(zip_path: Path, files: dict[str, Path]) -> None:
    """Zip files under their archive names; on-disk mtimes become entry times."""
    with zipfile.ZipFile(
        zip_path, "w", compression=zipfile.ZIP_DEFLATED, strict_timestamps=False
    ) as zf:
        for name, path in files.items():
            zf.write(path, arcname=name)
