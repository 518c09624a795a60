"""Tests for the restricted-document classifier."""

import pytest

from course_export.availability import parse_availability
from course_export.restrictions import is_restricted
from course_export.structure import (
    CourseModuleNotFoundError,
    CourseRef,
    CourseStructure,
    ModuleInfo,
    SectionInfo,
    SectionNotFoundError,
)

NOW = 1735689600

DATE_FAIL = parse_availability({"op": "&", "c": [{"type": "date", "d": "<", "t": NOW - 100}]})
DATE_PASS = parse_availability({"op": "&", "c": [{"type": "date", "d": ">=", "t": NOW - 100}]})


def depends_on(cm_id):
    return parse_availability({"op": "&", "c": [{"type": "completion", "cm": cm_id, "e": 1}]})


def make_structure(sections, modules):
    return CourseStructure(
        course=CourseRef(id=10, shortname="C10", fullname="Course 10"),
        sections={s.id: s for s in sections},
        modules=modules,
    )


class TestIsRestricted:
    def test_plain_module_is_not_restricted(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=1)
        structure = make_structure([SectionInfo(id=1, number=1, name="S1")], [module])

        assert is_restricted(module, structure, NOW) is False

    def test_hidden_module_is_restricted_regardless_of_conditions(self):
        module = ModuleInfo(
            id=1, content_id=101, name="Doc", section_id=1, visible=False, availability=DATE_PASS
        )
        structure = make_structure([SectionInfo(id=1, number=1, name="S1")], [module])

        assert is_restricted(module, structure, NOW) is True

    def test_module_condition_failing_is_restricted(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=1, availability=DATE_FAIL)
        structure = make_structure([SectionInfo(id=1, number=1, name="S1")], [module])

        assert is_restricted(module, structure, NOW) is True

    def test_module_condition_passing_for_all_is_not_restricted(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=1, availability=DATE_PASS)
        structure = make_structure([SectionInfo(id=1, number=1, name="S1")], [module])

        assert is_restricted(module, structure, NOW) is False

    def test_fully_available_section_is_not_restricted(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=1)
        section = SectionInfo(id=1, number=1, name="S1", availability=DATE_PASS)
        structure = make_structure([section], [module])

        assert is_restricted(module, structure, NOW) is False

    def test_section_condition_failing_is_restricted(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=1)
        section = SectionInfo(id=1, number=1, name="S1", availability=DATE_FAIL)
        structure = make_structure([section], [module])

        assert is_restricted(module, structure, NOW) is True

    def test_subpage_inherits_unrestricted_parent(self):
        parent = ModuleInfo(id=1, content_id=101, name="Parent", section_id=1)
        child = ModuleInfo(id=2, content_id=102, name="Child", section_id=2)
        structure = make_structure(
            [
                SectionInfo(id=1, number=1, name="Main"),
                SectionInfo(id=2, number=2, name="Subpage", availability=depends_on(1)),
            ],
            [parent, child],
        )

        assert is_restricted(child, structure, NOW) is False

    def test_subpage_inherits_restricted_parent(self):
        parent = ModuleInfo(id=1, content_id=101, name="Parent", section_id=1, visible=False)
        child = ModuleInfo(id=2, content_id=102, name="Child", section_id=2)
        structure = make_structure(
            [
                SectionInfo(id=1, number=1, name="Main"),
                SectionInfo(id=2, number=2, name="Subpage", availability=depends_on(1)),
            ],
            [parent, child],
        )

        assert is_restricted(child, structure, NOW) is True

    def test_activity_condition_with_other_conditions_is_restricted(self):
        parent = ModuleInfo(id=1, content_id=101, name="Parent", section_id=1)
        child = ModuleInfo(id=2, content_id=102, name="Child", section_id=2)
        availability = parse_availability(
            {
                "op": "&",
                "c": [
                    {"type": "completion", "cm": 1, "e": 1},
                    {"type": "date", "d": ">=", "t": NOW - 100},
                ],
            }
        )
        structure = make_structure(
            [
                SectionInfo(id=1, number=1, name="Main"),
                SectionInfo(id=2, number=2, name="Subpage", availability=availability),
            ],
            [parent, child],
        )

        assert is_restricted(child, structure, NOW) is True

    def test_reference_loop_fails_closed(self):
        first = ModuleInfo(id=1, content_id=101, name="A", section_id=1)
        second = ModuleInfo(id=2, content_id=102, name="B", section_id=2)
        structure = make_structure(
            [
                SectionInfo(id=1, number=1, name="S1", availability=depends_on(2)),
                SectionInfo(id=2, number=2, name="S2", availability=depends_on(1)),
            ],
            [first, second],
        )

        assert is_restricted(first, structure, NOW) is True

    def test_self_reference_fails_closed(self):
        module = ModuleInfo(id=1, content_id=101, name="A", section_id=1)
        structure = make_structure(
            [SectionInfo(id=1, number=1, name="S1", availability=depends_on(1))],
            [module],
        )

        assert is_restricted(module, structure, NOW) is True

    def test_missing_referenced_module_raises(self):
        child = ModuleInfo(id=2, content_id=102, name="Child", section_id=2)
        structure = make_structure(
            [SectionInfo(id=2, number=2, name="Subpage", availability=depends_on(99))],
            [child],
        )

        with pytest.raises(CourseModuleNotFoundError):
            is_restricted(child, structure, NOW)

    def test_missing_section_raises(self):
        module = ModuleInfo(id=1, content_id=101, name="Doc", section_id=5)
        structure = make_structure([], [module])

        with pytest.raises(SectionNotFoundError):
            is_restricted(module, structure, NOW)
