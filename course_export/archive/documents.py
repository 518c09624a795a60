"""Export a single document's XML through the renderer."""

from ..renderer import DocumentRenderer
from .records import DocumentRecord


class DocumentExportError(Exception):
    """Raised when a document's XML could not be produced."""

    pass


async def export_document(renderer: DocumentRenderer, document: DocumentRecord) -> bytes:
    """
    Get the XML for one document as UTF-8 bytes.

    Any renderer failure (missing record, malformed content, I/O trouble) is
    wrapped so the caller can record it against the document and move on.

    Raises:
        DocumentExportError: If rendering failed
    """
    try:
        xml = await renderer.render(document.content_id)
    except Exception as e:
        raise DocumentExportError(f"Error getting XML: {e}") from e
    return xml.encode("utf-8")
