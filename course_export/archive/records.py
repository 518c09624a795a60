"""Per-run records describing what goes into one course archive."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DocumentSection:
    """The section a document sits in."""

    id: int
    number: int
    name: str


@dataclass
class DocumentRecord:
    """
    One content document in a course export.

    Every field has its final type from construction. Processing a document
    stops at the first failure, which is recorded with fail(); fields that
    were never reached keep their empty values (section None,
    published_at 0, filename None).
    """

    sequence: int  # 1-based, in section order
    cm_id: int
    content_id: int
    name: str
    section: DocumentSection | None = None
    published_at: int = 0
    restricted: bool = False
    error: str | None = None
    filename: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def fail(self, reason: str) -> None:
        self.error = reason


@dataclass
class CourseExportDetails:
    course_id: int
    shortname: str
    fullname: str
    visible: bool
    documents: list[DocumentRecord] = field(default_factory=list)

    @property
    def max_published(self) -> int:
        """Newest document publish time; used as the archive's timestamp."""
        return max((d.published_at for d in self.documents), default=0)
