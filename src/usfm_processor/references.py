"""Chapter and verse key parsing."""

from __future__ import annotations

import logging
from typing import Any, Iterator

from usfm_processor.models import VerseRef
from usfm_processor.nodes import verse_objects

logger = logging.getLogger(__name__)

# Chapter-level pseudo verse holding material before the first \v
FRONT_KEY = "front"


def _to_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def parse_verse_ref(verse_key: str) -> VerseRef:
    """Parse a verse key such as "3" or "1-2".

    Spans sort by their start number but keep the literal key for display.
    Never raises: an unparsable key becomes verse 1.
    """
    trimmed = verse_key.strip()

    if "-" in trimmed:
        parts = trimmed.split("-")
        if len(parts) == 2:
            start = _to_int(parts[0])
            end = _to_int(parts[1])
            if start is not None and end is not None and start >= 1:
                return VerseRef(
                    number=start,
                    original_string=trimmed,
                    is_span=True,
                    span_start=start,
                    span_end=end,
                )

    single = _to_int(trimmed)
    if single is not None and single >= 1:
        return VerseRef(number=single, original_string=trimmed)

    return VerseRef(number=1, original_string=trimmed)


def parse_chapter_number(chapter_key: str) -> int | None:
    """Numeric chapter, or None for keys that are skipped (e.g. "front")."""
    return _to_int(chapter_key)


def iter_chapters(raw_document: Any) -> list[tuple[int, dict[str, Any]]]:
    """(chapter number, chapter data) pairs in ascending numeric order."""
    chapter_data = (raw_document or {}).get("chapters") or {}
    chapters = []
    for key, data in chapter_data.items():
        number = parse_chapter_number(str(key))
        if number is None:
            logger.debug("Skipping non-numeric chapter key %r", key)
            continue
        chapters.append((number, data or {}))
    chapters.sort(key=lambda item: item[0])
    return chapters


def iter_verses(chapter_data: dict[str, Any]) -> list[tuple[VerseRef, list[Any]]]:
    """(verse ref, verse objects) pairs in ascending numeric order, front skipped."""
    verses = []
    for key, data in chapter_data.items():
        if key == FRONT_KEY:
            continue
        verses.append((parse_verse_ref(str(key)), verse_objects(data)))
    verses.sort(key=lambda item: item[0].number)
    return verses


def walk_book(raw_document: Any) -> Iterator[tuple[int, VerseRef, list[Any]]]:
    """Yield (chapter, verse ref, verse objects) for every verse in book order."""
    for chapter_number, chapter_data in iter_chapters(raw_document):
        for verse_ref, objects in iter_verses(chapter_data):
            yield chapter_number, verse_ref, objects


def verse_reference(book_code: str, chapter: int, verse_ref: VerseRef) -> str:
    return f"{book_code} {chapter}:{verse_ref.original_string}"
