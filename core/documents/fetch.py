"""Download documents and convert them to plain text."""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse

import html2text
import httpx

from .errors import DocumentError
from .pdf import extract_pdf_text, validate_pdf_bytes

logger = logging.getLogger(__name__)

# Academic publishers often serve PDFs from paths without a .pdf extension
PDF_PATH_PATTERNS = [
    "/pdfdirect/",  # Wiley, AGU
    "/doi/pdf/",  # Royal Society, various publishers
    "/content/pdf/",  # Springer, Nature
    "/article/pdf/",  # ScienceDirect
    "/pdf/",
]


def is_pdf_url(url: str) -> bool:
    """Check if URL appears to point at a PDF file."""
    clean_url = url.lower().split("?")[0].split("#")[0].rstrip("/")
    if clean_url.endswith(".pdf"):
        return True
    url_lower = url.lower()
    return any(pattern in url_lower for pattern in PDF_PATH_PATTERNS)


def html_to_text(html: str) -> str:
    """Convert HTML to markdown-ish plain text."""
    h2t = html2text.HTML2Text()
    h2t.ignore_links = True
    h2t.ignore_images = True
    h2t.ignore_emphasis = True
    h2t.body_width = 0  # Don't wrap lines
    return h2t.handle(html).strip()


def _file_name(url: str) -> str:
    name = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    return name or "document.pdf"


async def fetch_document_text(
    url: str,
    timeout: float = 60.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Download a document and return its text.

    PDFs (by content type or magic bytes) are run through pypdf, HTML
    pages through html2text; any other text is returned as is.

    Raises:
        DocumentError: On HTTP errors, timeouts, or unreadable content
    """
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        try:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DocumentError(
                f"HTTP error downloading document: {e.response.status_code}", source=url
            ) from e
        except httpx.TimeoutException as e:
            raise DocumentError("Timeout downloading document", source=url) from e
        except httpx.HTTPError as e:
            raise DocumentError(f"Failed to download document: {e}", source=url) from e

    content = response.content
    content_type = response.headers.get("content-type", "").lower()
    logger.debug(f"Downloaded {len(content)} bytes ({content_type or 'no content type'}) from {url}")

    if "application/pdf" in content_type or validate_pdf_bytes(content):
        extraction = await asyncio.to_thread(extract_pdf_text, content, _file_name(url))
        text = extraction.text
    elif is_pdf_url(url) and not content_type.startswith("text/"):
        raise DocumentError("Downloaded content is not a valid PDF", source=url)
    elif "html" in content_type or response.text.lstrip().startswith("<"):
        text = html_to_text(response.text)
    else:
        text = response.text.strip()

    if not text:
        raise DocumentError("Downloaded document contains no text", source=url)

    logger.info(f"Fetched {len(text)} chars of text from {url}")
    return text
