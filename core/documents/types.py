"""Type definitions for extracted documents."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PageText(BaseModel):
    """Text of one PDF page."""

    page_number: int
    text: str
    word_count: int


class DocumentStructure(BaseModel):
    """Which of the usual paper sections a text appears to contain."""

    has_abstract: bool = False
    has_introduction: bool = False
    has_methodology: bool = False
    has_results: bool = False
    has_conclusion: bool = False
    has_references: bool = False
    sections: list[str] = Field(default_factory=list)


class DocumentMetadata(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    creator: Optional[str] = None
    producer: Optional[str] = None
    creation_date: Optional[str] = None
    modification_date: Optional[str] = None
    page_count: int = 0
    word_count: int = 0
    extracted_at: datetime
    file_size: int = 0
    file_name: str = "document.pdf"


class DocumentExtraction(BaseModel):
    """Full text of a PDF with per-page text, metadata and structure."""

    text: str
    metadata: DocumentMetadata
    pages: list[PageText] = Field(default_factory=list)
    structure: DocumentStructure = Field(default_factory=DocumentStructure)
