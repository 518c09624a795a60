"""
Build metadata.xml for a course archive.

    <course id shortname fullname visible href lastpublished>
      <document sequence name href cmid contentid restricted
                [error] [sectionid sectionnumber sectionname]
                [filename] [published]/>
      ...
    </course>

Optional attributes are left out entirely when they do not apply, so a
consumer can tell "not applicable" apart from a zero value.
"""

from datetime import datetime, timezone

from lxml import etree

from ..renderer import xml_safe
from .records import CourseExportDetails

METADATA_FILENAME = "metadata.xml"


def format_timestamp(timestamp: int) -> str:
    """ISO-8601 with UTC offset, e.g. 2024-03-01T12:00:00+00:00."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _set_attributes(element: etree._Element, attributes: dict[str, str]) -> None:
    # Names and error texts come from user-edited content
    for name, value in attributes.items():
        element.set(name, xml_safe(value))


def build_metadata(details: CourseExportDetails, site_url: str) -> bytes:
    """Serialize the course export summary (including failed documents)."""
    course = etree.Element("course")
    _set_attributes(
        course,
        {
            "id": str(details.course_id),
            "shortname": details.shortname,
            "fullname": details.fullname,
            "visible": _bool(details.visible),
            "href": f"{site_url}/course/view.php?id={details.course_id}",
            "lastpublished": format_timestamp(details.max_published),
        },
    )

    for document in sorted(details.documents, key=lambda d: d.sequence):
        attributes = {
            "sequence": str(document.sequence),
            "name": document.name,
            "href": f"{site_url}/mod/content/view.php?id={document.cm_id}",
            "cmid": str(document.cm_id),
            "contentid": str(document.content_id),
            "restricted": _bool(document.restricted),
        }
        if document.error:
            attributes["error"] = document.error
        if document.section and document.section.id:
            attributes["sectionid"] = str(document.section.id)
            attributes["sectionnumber"] = str(document.section.number)
            attributes["sectionname"] = document.section.name
        if document.filename:
            attributes["filename"] = document.filename
        if document.published_at:
            attributes["published"] = format_timestamp(document.published_at)
        _set_attributes(etree.SubElement(course, "document"), attributes)

    return etree.tostring(
        course, xml_declaration=True, encoding="UTF-8", pretty_print=True
    )
