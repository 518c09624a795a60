"""Gather everything needed to export one course."""

from ..provider import CourseProvider
from ..restrictions import is_restricted
from .records import CourseExportDetails, DocumentRecord, DocumentSection


async def get_course_details(
    provider: CourseProvider,
    course_id: int,
    now: int,
) -> CourseExportDetails:
    """
    Build the export details for a course.

    Problems with individual documents (missing publish time, missing section,
    broken restriction data) are recorded on that document; only a missing
    course raises.

    Raises:
        CourseNotFoundError: If the course does not exist
    """
    structure = await provider.get_course_structure(course_id)
    published = await provider.get_published_times(course_id)

    course = structure.course
    details = CourseExportDetails(
        course_id=course.id,
        shortname=course.shortname,
        fullname=course.fullname,
        visible=course.visible,
    )

    for sequence, module in enumerate(structure.modules, start=1):
        document = DocumentRecord(
            sequence=sequence,
            cm_id=module.id,
            content_id=module.content_id,
            name=module.name,
        )
        details.documents.append(document)

        if module.content_id not in published:
            document.fail("Cannot find published time")
            continue
        document.published_at = published[module.content_id]

        try:
            section = structure.get_section(module.section_id)
        except Exception as e:
            document.fail(f"Error getting section {module.section_id}: {e}")
            continue
        document.section = DocumentSection(
            id=section.id, number=section.number, name=section.name
        )

        try:
            document.restricted = is_restricted(module, structure, now)
        except Exception as e:
            document.fail(f"Error getting restriction data: {e}")

    return details
