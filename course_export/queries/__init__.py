"""Query layer for database operations using SQLAlchemy Core."""

from .archives import (
    create_archive,
    delete_archive,
    get_archive,
    get_archive_content,
    list_archives,
)
from .courses import (
    get_content_document,
    get_course,
    get_course_modules,
    get_course_sections,
    get_courses_by_ids,
    get_max_published_by_course,
    get_published_times,
)
from .events import record_download
from .users import get_user_by_id, is_admin

__all__ = [
    # Archives
    "get_archive",
    "list_archives",
    "get_archive_content",
    "delete_archive",
    "create_archive",
    # Courses
    "get_max_published_by_course",
    "get_course",
    "get_courses_by_ids",
    "get_course_sections",
    "get_course_modules",
    "get_published_times",
    "get_content_document",
    # Events
    "record_download",
    # Users
    "get_user_by_id",
    "is_admin",
]
