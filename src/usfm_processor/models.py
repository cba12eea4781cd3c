"""Processed scripture data models: the output of the USFM processor."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TokenType(str, Enum):
    """Kind of token emitted by the tokenizer."""

    word = "word"  # Highlightable word
    text = "text"  # Punctuation / whitespace run between words


class VerseRef(BaseModel):
    number: int = 1
    original_string: str = "1"
    is_span: bool = False
    span_start: int | None = None
    span_end: int | None = None


class ProcessingOptions(BaseModel):
    """Options controlling what `process` produces."""

    language: str = "en"
    include_word_tokens: bool = True
    include_alignments: bool = True
    include_paragraphs: bool = True  # Pass-through, paragraphs stay empty
    generate_token_ids: bool = True


class TokenPosition(BaseModel):
    start: int
    end: int


class TokenAlignment(BaseModel):
    """Alignment metadata copied from the nearest enclosing milestone."""

    strong: str = ""
    lemma: str = ""
    morph: str = ""
    occurrence: str = ""
    occurrences: str = ""
    content: str = ""


class WordToken(BaseModel):
    unique_id: str = ""
    content: str
    occurrence: int = 0
    total_occurrences: int = 0
    verse_ref: str
    position: TokenPosition
    type: TokenType
    is_highlightable: bool
    alignment_id: str | None = None
    alignment: TokenAlignment | None = None


class AlignmentData(BaseModel):
    strong: str = ""
    lemma: str = ""
    morph: str = ""
    occurrence: str = ""
    occurrences: str = ""


class WordAlignment(BaseModel):
    """One top-level alignment milestone, nested milestones flattened in."""

    verse_ref: str
    source_words: list[str] = Field(default_factory=list)
    target_words: list[str] = Field(default_factory=list)
    alignment_data: list[AlignmentData] = Field(default_factory=list)


class ProcessedVerse(BaseModel):
    number: int
    text: str
    reference: str
    original_verse_string: str = ""
    is_span: bool = False
    span_start: int | None = None
    span_end: int | None = None
    has_section_marker: bool = False
    section_markers: int = 0
    alignments: list[WordAlignment] | None = None
    word_tokens: list[WordToken] | None = None


class ProcessedChapter(BaseModel):
    number: int
    verse_count: int
    paragraph_count: int = 0
    verses: list[ProcessedVerse]
    paragraphs: list[dict[str, Any]] = Field(default_factory=list)


class SectionReference(BaseModel):
    chapter: str
    verse: str


class SectionPoint(BaseModel):
    chapter: int
    verse: int
    reference: SectionReference


class TranslatorSection(BaseModel):
    """An inclusive chapter:verse range delimited by \\ts\\* markers."""

    start: SectionPoint
    end: SectionPoint


class ProcessingStatistics(BaseModel):
    total_chapters: int
    total_verses: int
    total_paragraphs: int
    total_sections: int
    total_alignments: int
    total_word_tokens: int | None = None  # None when tokens are disabled


class ProcessingMetadata(BaseModel):
    book_code: str
    book_name: str
    language: str = "en"
    processing_date: str
    processing_duration: int  # milliseconds
    version: str
    document_type: str = "untokenized"
    has_alignments: bool
    has_sections: bool
    has_word_tokens: bool
    total_chapters: int
    total_verses: int
    total_paragraphs: int
    chapter_verse_map: dict[int, int]
    statistics: ProcessingStatistics


class ProcessedScripture(BaseModel):
    book: str
    book_code: str
    metadata: ProcessingMetadata
    chapters: list[ProcessedChapter]
    translator_sections: list[TranslatorSection] | None = None
    alignments: list[WordAlignment] | None = None

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form with absent optional fields omitted."""
        return self.model_dump(mode="json", exclude_none=True)
