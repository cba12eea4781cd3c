"""USFM processor: turns a parsed usfm-js book into a ProcessedScripture.

The upstream parser (usfm-js or equivalent) is not part of this package;
`process` takes its JSON output: ``{"headers": [...], "chapters": {...}}``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any

from usfm_processor.alignments import extract_book_alignments, extract_verse_alignments
from usfm_processor.models import (
    ProcessedChapter,
    ProcessedScripture,
    ProcessedVerse,
    ProcessingMetadata,
    ProcessingOptions,
    ProcessingStatistics,
    VerseRef,
)
from usfm_processor.nodes import NodeKind, contains_kind, count_section_markers
from usfm_processor.references import iter_chapters, iter_verses, verse_reference, walk_book
from usfm_processor.sections import extract_translator_sections
from usfm_processor.text_extractor import extract_plain_text
from usfm_processor.tokenizer import generate_word_tokens

logger = logging.getLogger(__name__)

PROCESSING_VERSION = "1.0.0"


def detect_document_type(raw_document: Any) -> str:
    """Classify a book as "aligned", "original" or "untokenized"."""
    has_words = False
    for _, _, objects in walk_book(raw_document):
        if contains_kind(objects, NodeKind.alignment):
            return "aligned"
        if contains_kind(objects, NodeKind.word):
            has_words = True
    return "original" if has_words else "untokenized"


class ScriptureProcessor:
    """Stateless processor; one instance can serve any number of books."""

    def process(
        self,
        raw_document: Any,
        book_code: str,
        book_name: str,
        options: ProcessingOptions | None = None,
    ) -> ProcessedScripture:
        """Process a parsed book into chapters, verses, tokens and sections."""
        started = time.perf_counter()
        opts = options or ProcessingOptions()
        raw_document = raw_document or {}

        chapters = self.process_chapters(raw_document, book_code, opts)
        translator_sections = extract_translator_sections(raw_document, book_code)
        alignments = (
            extract_book_alignments(raw_document, book_code)
            if opts.include_alignments
            else []
        )

        total_verses = sum(ch.verse_count for ch in chapters)
        total_paragraphs = sum(ch.paragraph_count for ch in chapters)
        total_word_tokens = sum(
            len(v.word_tokens or []) for ch in chapters for v in ch.verses
        )

        duration_ms = int((time.perf_counter() - started) * 1000)
        metadata = ProcessingMetadata(
            book_code=book_code,
            book_name=book_name,
            language=opts.language,
            processing_date=datetime.now(timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            processing_duration=duration_ms,
            version=PROCESSING_VERSION,
            document_type=detect_document_type(raw_document),
            has_alignments=len(alignments) > 0,
            has_sections=len(translator_sections) > 0,
            has_word_tokens=opts.include_word_tokens and total_word_tokens > 0,
            total_chapters=len(chapters),
            total_verses=total_verses,
            total_paragraphs=total_paragraphs,
            chapter_verse_map={ch.number: ch.verse_count for ch in chapters},
            statistics=ProcessingStatistics(
                total_chapters=len(chapters),
                total_verses=total_verses,
                total_paragraphs=total_paragraphs,
                total_sections=len(translator_sections),
                total_alignments=len(alignments),
                total_word_tokens=total_word_tokens if opts.include_word_tokens else None,
            ),
        )

        logger.info(
            "Processed %s: %d chapters, %d verses, %d sections in %d ms",
            book_code,
            len(chapters),
            total_verses,
            len(translator_sections),
            duration_ms,
        )

        return ProcessedScripture(
            book=book_name,
            book_code=book_code,
            metadata=metadata,
            chapters=chapters,
            translator_sections=translator_sections or None,
            alignments=alignments or None,
        )

    def process_chapters(
        self,
        raw_document: dict[str, Any],
        book_code: str,
        options: ProcessingOptions,
    ) -> list[ProcessedChapter]:
        return [
            self.process_chapter(number, chapter_data, book_code, options)
            for number, chapter_data in iter_chapters(raw_document)
        ]

    def process_chapter(
        self,
        chapter_number: int,
        chapter_data: dict[str, Any],
        book_code: str,
        options: ProcessingOptions,
    ) -> ProcessedChapter:
        verses = [
            self.process_verse(verse_ref, objects, chapter_number, book_code, options)
            for verse_ref, objects in iter_verses(chapter_data)
        ]
        # TODO: group verses into paragraphs from \p and \q markers when
        # include_paragraphs is set; the list is a pass-through for now.
        paragraphs: list[dict[str, Any]] = []
        return ProcessedChapter(
            number=chapter_number,
            verse_count=len(verses),
            paragraph_count=len(paragraphs),
            verses=verses,
            paragraphs=paragraphs,
        )

    def process_verse(
        self,
        verse_ref: VerseRef,
        verse_objects: list[Any],
        chapter_number: int,
        book_code: str,
        options: ProcessingOptions,
    ) -> ProcessedVerse:
        reference = verse_reference(book_code, chapter_number, verse_ref)
        markers = count_section_markers(verse_objects)
        return ProcessedVerse(
            number=verse_ref.number,
            text=extract_plain_text(verse_objects),
            reference=reference,
            original_verse_string=verse_ref.original_string,
            is_span=verse_ref.is_span,
            span_start=verse_ref.span_start,
            span_end=verse_ref.span_end,
            has_section_marker=markers > 0,
            section_markers=markers,
            alignments=(
                extract_verse_alignments(verse_objects, reference)
                if options.include_alignments
                else None
            ),
            word_tokens=(
                generate_word_tokens(verse_objects, reference, options.generate_token_ids)
                if options.include_word_tokens
                else None
            ),
        )


def process(
    raw_document: Any,
    book_code: str,
    book_name: str,
    options: ProcessingOptions | None = None,
) -> ProcessedScripture:
    """Process a parsed usfm-js book with a default ScriptureProcessor."""
    return ScriptureProcessor().process(raw_document, book_code, book_name, options)
