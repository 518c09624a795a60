"""
Read-only snapshot of a course's structure, as supplied by the course provider.

Modules are kept in section order (section number, then position), which is
the order documents are numbered in an export.
"""

from dataclasses import dataclass, field

from .availability import ConditionTree


class StructureLookupError(LookupError):
    """Raised when a referenced course, section or module does not exist."""

    pass


class CourseNotFoundError(StructureLookupError):
    pass


class SectionNotFoundError(StructureLookupError):
    pass


class CourseModuleNotFoundError(StructureLookupError):
    pass


@dataclass(frozen=True)
class CourseRef:
    """Basic course attributes."""

    id: int
    shortname: str
    fullname: str
    visible: bool = True
    category_id: int = 0


@dataclass(frozen=True)
class SectionInfo:
    id: int
    number: int
    name: str
    availability: ConditionTree | None = None


@dataclass(frozen=True)
class ModuleInfo:
    """One activity on the course page."""

    id: int  # cmid
    content_id: int
    name: str
    section_id: int
    visible: bool = True
    availability: ConditionTree | None = None


@dataclass
class CourseStructure:
    course: CourseRef
    sections: dict[int, SectionInfo] = field(default_factory=dict)
    modules: list[ModuleInfo] = field(default_factory=list)

    def get_section(self, section_id: int) -> SectionInfo:
        try:
            return self.sections[section_id]
        except KeyError:
            raise SectionNotFoundError(
                f"Section {section_id} not found in course {self.course.id}"
            ) from None

    def get_module(self, cm_id: int) -> ModuleInfo:
        for module in self.modules:
            if module.id == cm_id:
                return module
        raise CourseModuleNotFoundError(
            f"Course module {cm_id} not found in course {self.course.id}"
        )
