"""Tests for metadata.xml generation."""

from lxml import etree

from course_export.archive.metadata import build_metadata, format_timestamp
from course_export.archive.records import (
    CourseExportDetails,
    DocumentRecord,
    DocumentSection,
)

SITE = "https://learn.example.org"


def _details():
    return CourseExportDetails(
        course_id=10,
        shortname="AIS101",
        fullname="AI Safety & Alignment",
        visible=False,
        documents=[
            DocumentRecord(
                sequence=2,
                cm_id=22,
                content_id=502,
                name="Hidden reading",
                section=DocumentSection(id=101, number=1, name="Week 1"),
                published_at=1735689500,
                restricted=True,
                filename="restricted/002.Week_1.Hidden_reading.xml",
            ),
            DocumentRecord(
                sequence=1,
                cm_id=21,
                content_id=501,
                name="Welcome",
                section=DocumentSection(id=100, number=0, name="General"),
                published_at=1735689600,
                filename="001.General.Welcome.xml",
            ),
            DocumentRecord(
                sequence=3,
                cm_id=23,
                content_id=503,
                name="Orphan",
                error="Cannot find published time",
            ),
        ],
    )


def _parse():
    return etree.fromstring(build_metadata(_details(), SITE))


def test_format_timestamp():
    assert format_timestamp(1735689600) == "2025-01-01T00:00:00+00:00"


def test_starts_with_declaration():
    assert build_metadata(_details(), SITE).startswith(b"<?xml version='1.0' encoding='UTF-8'?>")


def test_course_attributes():
    course = _parse()

    assert course.tag == "course"
    assert course.get("id") == "10"
    assert course.get("shortname") == "AIS101"
    assert course.get("fullname") == "AI Safety & Alignment"
    assert course.get("visible") == "false"
    assert course.get("href") == f"{SITE}/course/view.php?id=10"
    assert course.get("lastpublished") == "2025-01-01T00:00:00+00:00"


def test_documents_in_sequence_order():
    course = _parse()
    assert course.xpath("/course/document/@sequence") == ["1", "2", "3"]


def test_successful_document():
    (doc,) = _parse().xpath("/course/document[@cmid='22']")

    assert doc.get("href") == f"{SITE}/mod/content/view.php?id=22"
    assert doc.get("contentid") == "502"
    assert doc.get("restricted") == "true"
    assert doc.get("sectionid") == "101"
    assert doc.get("sectionnumber") == "1"
    assert doc.get("sectionname") == "Week 1"
    assert doc.get("filename") == "restricted/002.Week_1.Hidden_reading.xml"
    assert doc.get("published") == "2024-12-31T23:58:20+00:00"
    assert doc.get("error") is None


def test_failed_document_omits_optional_attributes():
    (doc,) = _parse().xpath("/course/document[@cmid='23']")

    assert doc.get("error") == "Cannot find published time"
    assert doc.get("restricted") == "false"
    for name in ("sectionid", "sectionnumber", "sectionname", "filename", "published"):
        assert doc.get(name) is None


def test_control_characters_are_replaced():
    details = _details()
    details.shortname = "AIS\x0b101"
    details.fullname = "AI\x00Safety"
    details.documents[0].name = "Pasted\x0btitle"
    details.documents[0].section = DocumentSection(id=101, number=1, name="Week\x1f1")
    details.documents[2].error = "Error getting XML: bad \x0c byte"

    course = etree.fromstring(build_metadata(details, SITE))

    assert course.get("shortname") == "AIS\ufffd101"
    assert course.get("fullname") == "AI\ufffdSafety"
    (hidden,) = course.xpath("/course/document[@cmid='22']")
    assert hidden.get("name") == "Pasted\ufffdtitle"
    assert hidden.get("sectionname") == "Week\ufffd1"
    (failed,) = course.xpath("/course/document[@cmid='23']")
    assert failed.get("error") == "Error getting XML: bad \ufffd byte"
