"""Initial schema for course archive export.

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates users, the course structure tables (courses, course_sections,
content_documents, course_modules), stored export archives and the download
audit log.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("user_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("is_admin", sa.Boolean(), server_default="false", nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.Column("deleted_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("user_id", name=op.f("pk_users")),
    )
    op.create_index("idx_users_username", "users", ["username"], unique=False)

    op.create_table(
        "courses",
        sa.Column("course_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("shortname", sa.Text(), nullable=False),
        sa.Column("fullname", sa.Text(), nullable=False),
        sa.Column("visible", sa.Boolean(), server_default="true", nullable=True),
        sa.Column("category_id", sa.Integer(), server_default="0", nullable=True),
        sa.PrimaryKeyConstraint("course_id", name=op.f("pk_courses")),
    )
    op.create_index("idx_courses_shortname", "courses", ["shortname"], unique=False)

    op.create_table(
        "course_sections",
        sa.Column("section_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("section_number", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("availability", postgresql.JSONB(), nullable=True),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.course_id"],
            name=op.f("fk_course_sections_course_id_courses"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("section_id", name=op.f("pk_course_sections")),
    )
    op.create_index(
        "idx_course_sections_course_id", "course_sections", ["course_id"], unique=False
    )

    op.create_table(
        "content_documents",
        sa.Column("content_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), server_default="0", nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("body", sa.Text(), nullable=True),
        sa.Column("published_at", sa.BigInteger(), nullable=True),
        sa.Column("converted_at", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("content_id", name=op.f("pk_content_documents")),
    )
    op.create_index(
        "idx_content_documents_course_id",
        "content_documents",
        ["course_id"],
        unique=False,
    )

    op.create_table(
        "course_modules",
        sa.Column("cm_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("section_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), server_default="0", nullable=False),
        sa.Column("content_id", sa.Integer(), nullable=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("visible", sa.Boolean(), server_default="true", nullable=True),
        sa.Column("availability", postgresql.JSONB(), nullable=True),
        sa.ForeignKeyConstraint(
            ["course_id"],
            ["courses.course_id"],
            name=op.f("fk_course_modules_course_id_courses"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["content_id"],
            ["content_documents.content_id"],
            name=op.f("fk_course_modules_content_id_content_documents"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("cm_id", name=op.f("pk_course_modules")),
    )
    op.create_index(
        "idx_course_modules_course_id", "course_modules", ["course_id"], unique=False
    )

    op.create_table(
        "export_archives",
        sa.Column("course_id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("content", sa.LargeBinary(), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("time_created", sa.BigInteger(), nullable=False),
        sa.Column("time_modified", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("course_id", name=op.f("pk_export_archives")),
    )

    op.create_table(
        "export_download_events",
        sa.Column("event_id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("course_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["users.user_id"],
            name=op.f("fk_export_download_events_user_id_users"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("event_id", name=op.f("pk_export_download_events")),
    )
    op.create_index(
        "idx_export_download_events_course_id",
        "export_download_events",
        ["course_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "idx_export_download_events_course_id", table_name="export_download_events"
    )
    op.drop_table("export_download_events")
    op.drop_table("export_archives")
    op.drop_index("idx_course_modules_course_id", table_name="course_modules")
    op.drop_table("course_modules")
    op.drop_index("idx_content_documents_course_id", table_name="content_documents")
    op.drop_table("content_documents")
    op.drop_index("idx_course_sections_course_id", table_name="course_sections")
    op.drop_table("course_sections")
    op.drop_index("idx_courses_shortname", table_name="courses")
    op.drop_table("courses")
    op.drop_index("idx_users_username", table_name="users")
    op.drop_table("users")
