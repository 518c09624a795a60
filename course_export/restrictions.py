"""
Decide whether a document should be flagged as restricted in an export.

"Restricted" means the document is not unconditionally available to every
student: it is hidden, or it (or its section) carries availability conditions
that some students may not meet.
"""

import logging

from .availability import OTHER_ACTIVITY, Condition, is_available_for_all
from .structure import CourseStructure, ModuleInfo

logger = logging.getLogger(__name__)


def is_restricted(
    module: ModuleInfo,
    structure: CourseStructure,
    now: int,
) -> bool:
    """
    Check if a course module might not be shown to some students.

    Sub-pages commonly lock their section behind a single "other activity"
    condition that points at the parent page. Such a section inherits the
    restriction status of the activity it points at, so the check follows
    the reference. A reference loop fails closed (restricted).

    Raises:
        StructureLookupError: If the section or a referenced module is missing
    """
    visited: set[int] = set()
    current = module

    while True:
        if current.id in visited:
            logger.warning(
                f"Availability loop at module {current.id} "
                f"(course {structure.course.id}), treating as restricted"
            )
            return True
        visited.add(current.id)

        if not current.visible:
            return True
        if not is_available_for_all(current.availability, now):
            return True

        section = structure.get_section(current.section_id)
        if is_available_for_all(section.availability, now):
            return False

        nodes = section.availability.all_nodes()
        if (
            len(nodes) == 1
            and isinstance(nodes[0], Condition)
            and nodes[0].type == OTHER_ACTIVITY
        ):
            current = structure.get_module(nodes[0].referenced_cm_id)
            continue

        return True
