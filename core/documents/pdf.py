"""PDF text extraction with pypdf."""

import io
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from .errors import DocumentError
from .structure import analyze_structure
from .types import DocumentExtraction, DocumentMetadata, PageText

logger = logging.getLogger(__name__)

_HORIZONTAL_SPACE = re.compile(r"[ \t\f\v]+")
_PAGE_NUMBER_LINE = re.compile(r"^\s*\d+\s*$", re.MULTILINE)
_BLANK_LINES = re.compile(r"\n\s*\n+")


def validate_pdf_bytes(content: bytes) -> bool:
    """Check for PDF magic bytes at the start of the content."""
    return content[:4] == b"%PDF"


def clean_page_text(text: str) -> str:
    """Collapse runs of spaces and drop page-number-only lines."""
    text = _HORIZONTAL_SPACE.sub(" ", text)
    text = _PAGE_NUMBER_LINE.sub("", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)


def _count_words(text: str) -> int:
    return len(text.split())


def _info_value(info: Any, key: str) -> Optional[str]:
    if info is None:
        return None
    value = info.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def extract_pdf_text(data: bytes, file_name: str = "document.pdf") -> DocumentExtraction:
    """Extract text, metadata and structure from PDF bytes.

    Args:
        data: Raw PDF content
        file_name: Name recorded in the metadata

    Returns:
        DocumentExtraction with full text (pages separated by blank lines)

    Raises:
        DocumentError: If the content is not a readable PDF
    """
    if not validate_pdf_bytes(data):
        raise DocumentError(f"{file_name} is not a valid PDF", source=file_name)

    try:
        reader = PdfReader(io.BytesIO(data))
        pages = []
        for number, page in enumerate(reader.pages, start=1):
            text = clean_page_text(page.extract_text() or "")
            pages.append(PageText(page_number=number, text=text, word_count=_count_words(text)))
        info = reader.metadata
    except (PyPdfError, ValueError, KeyError) as e:
        raise DocumentError(
            f"Failed to extract text from {file_name}: {e}", source=file_name
        ) from e

    full_text = _BLANK_LINES.sub("\n\n", "\n\n".join(p.text for p in pages)).strip()
    word_count = _count_words(full_text)
    logger.info(f"Extracted {word_count} words from {len(pages)} pages of {file_name}")
    if not full_text:
        logger.warning(f"No text layer found in {file_name}")

    metadata = DocumentMetadata(
        title=_info_value(info, "/Title"),
        author=_info_value(info, "/Author"),
        subject=_info_value(info, "/Subject"),
        creator=_info_value(info, "/Creator"),
        producer=_info_value(info, "/Producer"),
        creation_date=_info_value(info, "/CreationDate"),
        modification_date=_info_value(info, "/ModDate"),
        page_count=len(pages),
        word_count=word_count,
        extracted_at=datetime.now(timezone.utc),
        file_size=len(data),
        file_name=file_name,
    )

    return DocumentExtraction(
        text=full_text,
        metadata=metadata,
        pages=pages,
        structure=analyze_structure(full_text),
    )
