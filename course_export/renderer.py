"""Render a single content document to its canonical export XML."""

import re
from typing import Protocol

from lxml import etree

from .database import get_connection
from .queries.courses import get_content_document

# Code points XML 1.0 cannot carry, even escaped
_XML_UNSAFE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


class DocumentNotFoundError(LookupError):
    """Raised when a content record does not exist."""

    pass


def xml_safe(value: str) -> str:
    """Replace characters XML cannot represent with U+FFFD."""
    return _XML_UNSAFE.sub("\ufffd", value)


class DocumentRenderer(Protocol):
    async def render(self, content_id: int) -> str:
        """Return the document XML. Raises on any failure."""
        ...


def build_document_xml(content_id: int, title: str, body: str | None) -> str:
    """
    Build the canonical XML for one document.

    The body is stored as an XML fragment (any number of top-level elements
    and text). A malformed body raises lxml.etree.XMLSyntaxError.
    """
    item = etree.Element("Item", id=str(content_id))
    etree.SubElement(item, "Title").text = xml_safe(title)
    body_element = etree.SubElement(item, "Body")
    if body:
        wrapper = etree.fromstring(f"<Body>{body}</Body>")
        body_element.text = wrapper.text
        for child in list(wrapper):
            body_element.append(child)
    return etree.tostring(
        item, xml_declaration=True, encoding="UTF-8", pretty_print=True
    ).decode("utf-8")


class DatabaseDocumentRenderer:
    """DocumentRenderer reading content_documents rows."""

    async def render(self, content_id: int) -> str:
        async with get_connection() as conn:
            document = await get_content_document(conn, content_id)
        if not document:
            raise DocumentNotFoundError(f"Content document {content_id} not found")
        return build_document_xml(content_id, document["title"], document["body"])
