"""Heuristic structure and metadata detection for paper text."""

import re
from typing import Optional

from .types import DocumentStructure

MAX_SECTIONS = 20
MAX_AUTHORS = 10
MAX_KEYWORDS = 10
MAX_ABSTRACT_CHARS = 1000
TITLE_SEARCH_LINES = 10

ABSTRACT_PATTERN = re.compile(r"\b(abstract|summary)\b", re.IGNORECASE)
INTRODUCTION_PATTERN = re.compile(r"\b(introduction|background)\b", re.IGNORECASE)
METHODOLOGY_PATTERN = re.compile(r"\b(methods?|methodology|approach|procedures?)\b", re.IGNORECASE)
RESULTS_PATTERN = re.compile(r"\b(results|findings|outcomes)\b", re.IGNORECASE)
CONCLUSION_PATTERN = re.compile(r"\b(conclusion|discussion|summary)\b", re.IGNORECASE)
REFERENCES_PATTERN = re.compile(r"\b(references|bibliography|works cited)\b", re.IGNORECASE)

_NAME = r"[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]*)*"
AUTHOR_PATTERNS = [
    # "Authors: John Doe, Jane Smith" / "By John Doe"
    re.compile(rf"\b(?i:authors?|by)\s*:?\s*({_NAME}(?:\s*,\s*{_NAME})*)"),
    # A line of names at the start of the text
    re.compile(r"^([A-Z][a-z]+\s+[A-Z][a-z]+(?:\s*,\s*[A-Z][a-z]+\s+[A-Z][a-z]+)*)", re.MULTILINE),
    # Names followed by affiliation markers
    re.compile(
        r"^([A-Z][a-z]+\s+[A-Z][a-z]+(?:\s*\d+)?(?:\s*,\s*[A-Z][a-z]+\s+[A-Z][a-z]+(?:\s*\d+)?)*)\s*$",
        re.MULTILINE,
    ),
]

ABSTRACT_BLOCK = re.compile(
    r"\babstract\b\s*:?\s*(.*?)(?=\n\s*\n|\b(?:introduction|keywords)\b|\b1\.\s|\Z)",
    re.IGNORECASE | re.DOTALL,
)
KEYWORDS_BLOCK = re.compile(
    r"\bkeywords?\b\s*:?\s*(.*?)(?=\n\s*\n|\b(?:introduction|abstract)\b|\Z)",
    re.IGNORECASE | re.DOTALL,
)


def _is_section_heading(line: str) -> bool:
    return 3 < len(line) < 100 and line[0].isupper() and "." not in line


def analyze_structure(text: str) -> DocumentStructure:
    """Detect common paper sections and candidate headings."""
    lines = (line.strip() for line in text.split("\n"))
    sections = [line for line in lines if _is_section_heading(line)][:MAX_SECTIONS]

    return DocumentStructure(
        has_abstract=bool(ABSTRACT_PATTERN.search(text)),
        has_introduction=bool(INTRODUCTION_PATTERN.search(text)),
        has_methodology=bool(METHODOLOGY_PATTERN.search(text)),
        has_results=bool(RESULTS_PATTERN.search(text)),
        has_conclusion=bool(CONCLUSION_PATTERN.search(text)),
        has_references=bool(REFERENCES_PATTERN.search(text)),
        sections=sections,
    )


def extract_title(text: str) -> Optional[str]:
    """Guess the title from the first lines of the text."""
    for line in text.split("\n")[:TITLE_SEARCH_LINES]:
        line = line.strip()
        if (
            10 < len(line) < 200
            and not line.endswith(".")
            and line[0].isupper()
            and "abstract" not in line.lower()
        ):
            return line
    return None


def extract_authors(text: str) -> list[str]:
    """Guess author names, trying the most explicit patterns first."""
    for pattern in AUTHOR_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        names = [re.sub(r"\s*\d+$", "", name.strip()) for name in match.group(1).split(",")]
        authors = [name for name in names if 3 < len(name) < 50][:MAX_AUTHORS]
        if authors:
            return authors
    return []


def extract_abstract(text: str) -> Optional[str]:
    match = ABSTRACT_BLOCK.search(text)
    if not match:
        return None
    abstract = match.group(1).strip()[:MAX_ABSTRACT_CHARS]
    return abstract or None


def extract_keywords(text: str) -> list[str]:
    match = KEYWORDS_BLOCK.search(text)
    if not match:
        return []
    keywords = (kw.strip() for kw in re.split(r"[,;]", match.group(1)))
    return [kw for kw in keywords if 2 < len(kw) < 50][:MAX_KEYWORDS]
