"""Document text extraction.

Turns PDFs (via pypdf) and web pages (via html2text) into plain text for
analysis, with heuristic title, author, abstract and keyword detection.
"""

from .errors import DocumentError
from .fetch import fetch_document_text, html_to_text, is_pdf_url
from .pdf import extract_pdf_text, validate_pdf_bytes
from .structure import (
    analyze_structure,
    extract_abstract,
    extract_authors,
    extract_keywords,
    extract_title,
)
from .types import DocumentExtraction, DocumentMetadata, DocumentStructure, PageText

__all__ = [
    "extract_pdf_text",
    "fetch_document_text",
    "html_to_text",
    "is_pdf_url",
    "validate_pdf_bytes",
    "analyze_structure",
    "extract_title",
    "extract_authors",
    "extract_abstract",
    "extract_keywords",
    "DocumentExtraction",
    "DocumentMetadata",
    "DocumentStructure",
    "PageText",
    "DocumentError",
]
