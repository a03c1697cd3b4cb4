"""Unit tests for document extraction and fetching."""

import asyncio

import httpx
import pytest

from core.documents import (
    DocumentError,
    analyze_structure,
    extract_abstract,
    extract_authors,
    extract_keywords,
    extract_pdf_text,
    extract_title,
    fetch_document_text,
    is_pdf_url,
    validate_pdf_bytes,
)


def build_pdf(lines: list[str], title: str = "Spaced Practice", author: str = "Ada Lovelace") -> bytes:
    """A one-page PDF with a Helvetica text layer and an info dictionary."""
    text_ops = ["BT", "/F1 12 Tf", "72 720 Td"]
    for index, line in enumerate(lines):
        if index:
            text_ops.append("0 -16 Td")
        text_ops.append(f"({line}) Tj")
    text_ops.append("ET")
    stream = "\n".join(text_ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        f"<< /Title ({title}) /Author ({author}) /Producer (paperlens tests) >>".encode("latin-1"),
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R /Info 6 0 R >>\n" % (len(objects) + 1)
    out += b"startxref\n%d\n%%%%EOF\n" % xref_offset
    return bytes(out)


PAPER_LINES = [
    "Abstract",
    "Spaced practice improves recall in undergraduates",
    "Methods",
    "Participants completed weekly quizzes",
    "Results",
    "Recall improved significantly",
]


class TestExtractPdfText:
    def test_text_and_pages(self):
        data = build_pdf(PAPER_LINES)
        extraction = extract_pdf_text(data, "paper.pdf")
        assert "Spaced practice improves recall" in extraction.text
        assert "Recall improved significantly" in extraction.text
        assert len(extraction.pages) == 1
        assert extraction.pages[0].page_number == 1
        assert extraction.pages[0].word_count > 10

    def test_metadata(self):
        data = build_pdf(PAPER_LINES)
        metadata = extract_pdf_text(data, "paper.pdf").metadata
        assert metadata.title == "Spaced Practice"
        assert metadata.author == "Ada Lovelace"
        assert metadata.producer == "paperlens tests"
        assert metadata.page_count == 1
        assert metadata.file_size == len(data)
        assert metadata.file_name == "paper.pdf"
        assert metadata.word_count == len(extract_pdf_text(data).text.split())

    def test_structure(self):
        structure = extract_pdf_text(build_pdf(PAPER_LINES)).structure
        assert structure.has_abstract
        assert structure.has_methodology
        assert structure.has_results
        assert not structure.has_references

    def test_not_a_pdf(self):
        assert not validate_pdf_bytes(b"<html></html>")
        with pytest.raises(DocumentError):
            extract_pdf_text(b"<html></html>", "page.html")

    def test_corrupt_pdf(self):
        with pytest.raises(DocumentError):
            extract_pdf_text(b"%PDF-1.4\ngarbage", "broken.pdf")


class TestStructure:
    def test_section_flags(self):
        text = "Introduction\nWe describe our approach.\nConclusion\nIt works.\nReferences\n[1] A."
        structure = analyze_structure(text)
        assert structure.has_introduction
        assert structure.has_methodology
        assert structure.has_conclusion
        assert structure.has_references
        assert not structure.has_results

    def test_sections_are_short_capitalized_lines(self):
        text = "Introduction\nthis line is lowercase\nA sentence with a period.\nRelated Work"
        assert analyze_structure(text).sections == ["Introduction", "Related Work"]

    def test_sections_limited(self):
        text = "\n".join(f"Section Heading {i}" for i in range(40))
        assert len(analyze_structure(text).sections) == 20


class TestMetadataHeuristics:
    def test_title(self):
        text = "\n2024\nSpaced Practice and Long-Term Recall\nAbstract: ..."
        assert extract_title(text) == "Spaced Practice and Long-Term Recall"

    def test_title_missing(self):
        assert extract_title("short\nends with a period.") is None

    def test_authors_label(self):
        text = "Spaced Practice\nAuthors: Jane Smith, John Doe\nAbstract"
        assert extract_authors(text) == ["Jane Smith", "John Doe"]

    def test_authors_none(self):
        assert extract_authors("lowercase text only") == []

    def test_abstract(self):
        text = "Abstract: We study recall.\n\nIntroduction\nMore text."
        assert extract_abstract(text) == "We study recall."

    def test_abstract_truncated(self):
        text = "Abstract: " + "word " * 400
        assert len(extract_abstract(text)) == 1000

    def test_abstract_missing(self):
        assert extract_abstract("No summary heading here") is None

    def test_keywords(self):
        text = "Keywords: recall, spacing; memory, ab\n\nIntroduction"
        assert extract_keywords(text) == ["recall", "spacing", "memory"]

    def test_keywords_limited(self):
        text = "Keywords: " + ", ".join(f"term{i}" for i in range(15))
        assert len(extract_keywords(text)) == 10


class TestIsPdfUrl:
    def test_extension(self):
        assert is_pdf_url("https://example.org/paper.PDF?download=1")

    def test_publisher_path(self):
        assert is_pdf_url("https://link.springer.com/content/pdf/10.1007/abc")

    def test_html_page(self):
        assert not is_pdf_url("https://example.org/articles/123")


def _fetch(handler, url: str) -> str:
    return asyncio.run(fetch_document_text(url, transport=httpx.MockTransport(handler)))


class TestFetchDocumentText:
    def test_pdf_response(self):
        data = build_pdf(PAPER_LINES)

        def handler(request):
            return httpx.Response(200, content=data, headers={"content-type": "application/pdf"})

        text = _fetch(handler, "https://example.org/paper.pdf")
        assert "Recall improved significantly" in text

    def test_pdf_detected_by_magic_bytes(self):
        data = build_pdf(PAPER_LINES)

        def handler(request):
            return httpx.Response(200, content=data, headers={"content-type": "application/octet-stream"})

        assert "Spaced practice" in _fetch(handler, "https://example.org/download?id=7")

    def test_html_response(self):
        def handler(request):
            return httpx.Response(
                200,
                text="<html><body><h1>Title</h1><p>Body text of the paper.</p></body></html>",
                headers={"content-type": "text/html; charset=utf-8"},
            )

        text = _fetch(handler, "https://example.org/article")
        assert "Body text of the paper." in text
        assert "<p>" not in text

    def test_plain_text(self):
        def handler(request):
            return httpx.Response(200, text="  plain paper text  ", headers={"content-type": "text/plain"})

        assert _fetch(handler, "https://example.org/paper.txt") == "plain paper text"

    def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"location": "https://example.org/new"})
            return httpx.Response(200, text="moved text", headers={"content-type": "text/plain"})

        assert _fetch(handler, "https://example.org/old") == "moved text"

    def test_http_error(self):
        with pytest.raises(DocumentError) as exc_info:
            _fetch(lambda request: httpx.Response(404), "https://example.org/missing")
        assert exc_info.value.source == "https://example.org/missing"

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(DocumentError):
            _fetch(handler, "https://example.org/slow")

    def test_pdf_url_without_pdf_content(self):
        def handler(request):
            return httpx.Response(200, content=b"\x00\x01", headers={"content-type": "application/octet-stream"})

        with pytest.raises(DocumentError):
            _fetch(handler, "https://example.org/paper.pdf")

    def test_empty_document(self):
        def handler(request):
            return httpx.Response(200, text="   ", headers={"content-type": "text/plain"})

        with pytest.raises(DocumentError):
            _fetch(handler, "https://example.org/empty")
