"""Course archive export pipeline."""

from .batch import BatchResult, run_batch
from .builder import (
    ArchiveBuildError,
    ArchiveBuilder,
    document_filename,
    get_filename_safe,
)
from .changes import list_courses_for_update_and_delete_old_files, plan_updates
from .details import get_course_details
from .documents import DocumentExportError, export_document
from .metadata import METADATA_FILENAME, build_metadata, format_timestamp
from .records import CourseExportDetails, DocumentRecord, DocumentSection

__all__ = [
    "BatchResult",
    "run_batch",
    "ArchiveBuildError",
    "ArchiveBuilder",
    "document_filename",
    "get_filename_safe",
    "list_courses_for_update_and_delete_old_files",
    "plan_updates",
    "get_course_details",
    "DocumentExportError",
    "export_document",
    "METADATA_FILENAME",
    "build_metadata",
    "format_timestamp",
    "CourseExportDetails",
    "DocumentRecord",
    "DocumentSection",
]
