"""Root pytest configuration and shared in-memory collaborators."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from course_export.clock import FixedClock
from course_export.config import ExportConfig
from course_export.storage import StoredArchive, archive_filename
from course_export.structure import CourseNotFoundError, CourseStructure

# Load environment variables before tests run
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)

# 2025-01-01T00:00:00+00:00
NOW = 1735689600


class InMemoryArchiveStore:
    """ArchiveStore keeping zips in a dict."""

    def __init__(self):
        self.archives: dict[int, StoredArchive] = {}
        self.contents: dict[int, bytes] = {}
        self.deleted: list[int] = []

    def add(self, course_id: int, timestamp: int, content: bytes = b"zip") -> StoredArchive:
        archive = StoredArchive(
            course_id=course_id,
            filename=archive_filename(course_id),
            size=len(content),
            time_created=timestamp,
            time_modified=timestamp,
        )
        self.archives[course_id] = archive
        self.contents[course_id] = content
        return archive

    async def get(self, course_id: int) -> StoredArchive | None:
        return self.archives.get(course_id)

    async def list_archives(self) -> dict[int, StoredArchive]:
        return dict(self.archives)

    async def read(self, course_id: int) -> bytes | None:
        return self.contents.get(course_id)

    async def delete(self, course_id: int) -> None:
        self.deleted.append(course_id)
        self.archives.pop(course_id, None)
        self.contents.pop(course_id, None)

    async def replace(self, course_id: int, zip_path: Path, timestamp: int) -> StoredArchive:
        return self.add(course_id, timestamp, Path(zip_path).read_bytes())


class FakeCourseProvider:
    """CourseProvider serving hand-built course structures."""

    def __init__(self):
        self.structures: dict[int, CourseStructure] = {}
        # course id -> {content id: publish time}
        self.published: dict[int, dict[int, int]] = {}

    def add_course(self, structure: CourseStructure, published: dict[int, int]) -> None:
        self.structures[structure.course.id] = structure
        self.published[structure.course.id] = published

    async def list_published_courses(self) -> dict[int, int]:
        return {
            course_id: max(times.values())
            for course_id, times in self.published.items()
            if times
        }

    async def get_course_structure(self, course_id: int) -> CourseStructure:
        if course_id not in self.structures:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return self.structures[course_id]

    async def get_published_times(self, course_id: int) -> dict[int, int]:
        return dict(self.published.get(course_id, {}))


class FakeRenderer:
    """DocumentRenderer returning a tiny XML document per content id."""

    def __init__(self):
        self.failures: dict[int, Exception] = {}
        self.rendered: list[int] = []

    async def render(self, content_id: int) -> str:
        if content_id in self.failures:
            raise self.failures[content_id]
        self.rendered.append(content_id)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<Item id="{content_id}"><Title>Document {content_id}</Title></Item>\n'
        )


class FakeAdminDirectory:
    def __init__(self, admin_ids=()):
        self.admin_ids = set(admin_ids)

    async def is_admin(self, user_id: int) -> bool:
        return user_id in self.admin_ids


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def export_config():
    return ExportConfig(
        salt="test-salt",
        time_limit_seconds=300,
        delay_ms=0,
        site_url="https://learn.example.org",
    )


@pytest.fixture
def archive_store():
    return InMemoryArchiveStore()


@pytest.fixture
def course_provider():
    return FakeCourseProvider()


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def admins():
    return FakeAdminDirectory(admin_ids={2})
