"""Translator section extraction.

Translators mark chunk boundaries with \\ts\\*. A marker inside a verse
starts a new section at that verse and closes the previous one at the verse
before. A marker in the book headers opens the first section at 1:1, and
the last open section runs to the final verse of the book. Verses before
the first marker get their own leading section starting at the first verse.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator

from usfm_processor.models import SectionPoint, SectionReference, TranslatorSection
from usfm_processor.nodes import count_section_markers, verse_objects
from usfm_processor.references import FRONT_KEY, iter_chapters, iter_verses

logger = logging.getLogger(__name__)


def _point(chapter: int, verse: int, verse_string: str | None = None) -> SectionPoint:
    return SectionPoint(
        chapter=chapter,
        verse=verse,
        reference=SectionReference(
            chapter=str(chapter),
            verse=verse_string if verse_string is not None else str(verse),
        ),
    )


def book_end(raw_document: Any) -> tuple[int, int]:
    """(last chapter, last verse start number in that chapter); (0, 0) if empty."""
    chapters = iter_chapters(raw_document)
    if not chapters:
        return 0, 0
    last_chapter, chapter_data = chapters[-1]
    verses = iter_verses(chapter_data)
    last_verse = max((ref.number for ref, _ in verses), default=0)
    return last_chapter, last_verse


def _scan_points(raw_document: Any) -> Iterator[tuple[int, int, str, list[Any]]]:
    """(chapter, verse, verse string, objects) in book order.

    A chapter's front matter is scanned first, as its verse 1.
    """
    for chapter, chapter_data in iter_chapters(raw_document):
        if FRONT_KEY in chapter_data:
            # Front matter opens at verse 1, displayed as "1" rather than "front"
            yield chapter, 1, "1", verse_objects(chapter_data[FRONT_KEY])
        for verse_ref, objects in iter_verses(chapter_data):
            yield chapter, verse_ref.number, verse_ref.original_string, objects


def extract_translator_sections(raw_document: Any, book_code: str = "") -> list[TranslatorSection]:
    sections: list[TranslatorSection] = []
    current: SectionPoint | None = None

    headers = (raw_document or {}).get("headers") or []
    if count_section_markers(headers):
        current = _point(1, 1, "1")

    last_chapter, last_verse = book_end(raw_document)
    logger.debug("%s ends at %d:%d", book_code, last_chapter, last_verse)

    first: SectionPoint | None = None
    for chapter, verse, verse_string, objects in _scan_points(raw_document):
        point = _point(chapter, verse, verse_string)
        if first is None:
            first = point
        if not count_section_markers(objects):
            continue
        if current is None and (chapter, verse) > (first.chapter, first.verse):
            # Text before the first marker forms an implicit leading section
            current = first
        if current is not None:
            end_verse = verse - 1 if verse > 1 else verse
            sections.append(TranslatorSection(start=current, end=_point(chapter, end_verse)))
        current = point

    if current is not None:
        sections.append(TranslatorSection(start=current, end=_point(last_chapter, last_verse)))

    for section in sections:
        logger.debug(
            "Section %s %s:%s - %s:%s",
            book_code,
            section.start.reference.chapter,
            section.start.reference.verse,
            section.end.reference.chapter,
            section.end.reference.verse,
        )
    return sections
