"""SQLAlchemy Core table definitions for the database schema."""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    MetaData,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP

# Naming convention for constraints (helps Alembic generate better names)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=convention)


# =====================================================
# 1. USERS
# =====================================================
users = Table(
    "users",
    metadata,
    Column("user_id", Integer, primary_key=True, autoincrement=True),
    Column("username", Text, nullable=False),
    Column("email", Text),
    Column("is_admin", Boolean, server_default="false"),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Column("deleted_at", TIMESTAMP(timezone=True)),
    Index("idx_users_username", "username"),
)


# =====================================================
# 2. COURSES
# =====================================================
courses = Table(
    "courses",
    metadata,
    Column("course_id", Integer, primary_key=True, autoincrement=True),
    Column("shortname", Text, nullable=False),
    Column("fullname", Text, nullable=False),
    Column("visible", Boolean, server_default="true"),
    Column("category_id", Integer, server_default="0"),
    Index("idx_courses_shortname", "shortname"),
)


# =====================================================
# 3. COURSE SECTIONS
# =====================================================
# availability holds a condition tree: {"op": "&", "c": [...]} or NULL
course_sections = Table(
    "course_sections",
    metadata,
    Column("section_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "course_id",
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("section_number", Integer, nullable=False),
    Column("name", Text),
    Column("availability", JSONB),
    Index("idx_course_sections_course_id", "course_id"),
)


# =====================================================
# 4. CONTENT DOCUMENTS
# =====================================================
# Times are Unix seconds; published_at falls back to converted_at
content_documents = Table(
    "content_documents",
    metadata,
    Column("content_id", Integer, primary_key=True, autoincrement=True),
    Column("course_id", Integer, nullable=False, server_default="0"),
    Column("title", Text, nullable=False),
    Column("body", Text),
    Column("published_at", BigInteger),
    Column("converted_at", BigInteger),
    Index("idx_content_documents_course_id", "course_id"),
)


# =====================================================
# 5. COURSE MODULES
# =====================================================
# One row per activity placed on a course page. Ordered by section number
# then position.
course_modules = Table(
    "course_modules",
    metadata,
    Column("cm_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "course_id",
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("section_id", Integer, nullable=False),
    Column("position", Integer, nullable=False, server_default="0"),
    Column(
        "content_id",
        Integer,
        ForeignKey("content_documents.content_id", ondelete="CASCADE"),
    ),
    Column("name", Text, nullable=False),
    Column("visible", Boolean, server_default="true"),
    Column("availability", JSONB),
    Index("idx_course_modules_course_id", "course_id"),
)


# =====================================================
# 6. EXPORT ARCHIVES
# =====================================================
# One zip per course, named {course_id}.zip. time_created/time_modified carry
# the newest publish time of the course content, not the export time.
export_archives = Table(
    "export_archives",
    metadata,
    Column("course_id", Integer, primary_key=True, autoincrement=False),
    Column("filename", Text, nullable=False),
    Column("content", LargeBinary, nullable=False),
    Column("size", BigInteger, nullable=False),
    Column("time_created", BigInteger, nullable=False),
    Column("time_modified", BigInteger, nullable=False),
)


# =====================================================
# 7. EXPORT DOWNLOAD EVENTS
# =====================================================
export_download_events = Table(
    "export_download_events",
    metadata,
    Column("event_id", Integer, primary_key=True, autoincrement=True),
    Column("course_id", Integer, nullable=False),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.user_id", ondelete="SET NULL"),
    ),
    Column("created_at", TIMESTAMP(timezone=True), server_default=func.now()),
    Index("idx_export_download_events_course_id", "course_id"),
)
