"""Word alignment extraction from \\zaln milestones."""

from __future__ import annotations

from typing import Any

from usfm_processor.models import AlignmentData, WordAlignment
from usfm_processor.nodes import NodeKind, children, node_kind, node_text
from usfm_processor.references import verse_reference, walk_book


def alignment_data(milestone: dict[str, Any]) -> AlignmentData:
    return AlignmentData(
        strong=milestone.get("strong") or "",
        lemma=milestone.get("lemma") or "",
        morph=milestone.get("morph") or "",
        occurrence=milestone.get("occurrence") or "",
        occurrences=milestone.get("occurrences") or "",
    )


def _collect(
    milestone: dict[str, Any],
    source_words: list[str],
    target_words: list[str],
    data: list[AlignmentData],
) -> None:
    source_words.append(milestone.get("content") or "")
    data.append(alignment_data(milestone))

    for child in children(milestone):
        kind = node_kind(child)
        if kind == NodeKind.word:
            target_words.append(node_text(child))
        elif kind == NodeKind.text:
            text = node_text(child).strip()
            if text:
                target_words.append(text)
        elif kind == NodeKind.alignment:
            # Nested milestones are flattened into the enclosing record
            _collect(child, source_words, target_words, data)


def extract_alignment(milestone: dict[str, Any], verse_ref: str) -> WordAlignment | None:
    """Build the record for one top-level milestone; None if it aligns no words."""
    source_words: list[str] = []
    target_words: list[str] = []
    data: list[AlignmentData] = []
    _collect(milestone, source_words, target_words, data)

    if not target_words:
        return None
    return WordAlignment(
        verse_ref=verse_ref,
        source_words=source_words,
        target_words=target_words,
        alignment_data=data,
    )


def extract_verse_alignments(verse_objects: list[Any], verse_ref: str) -> list[WordAlignment]:
    alignments = []
    for obj in verse_objects:
        if node_kind(obj) != NodeKind.alignment:
            continue
        alignment = extract_alignment(obj, verse_ref)
        if alignment is not None:
            alignments.append(alignment)
    return alignments


def extract_book_alignments(raw_document: Any, book_code: str) -> list[WordAlignment]:
    """All verse alignments of a book, in chapter/verse order."""
    alignments: list[WordAlignment] = []
    for chapter, verse_ref, objects in walk_book(raw_document):
        reference = verse_reference(book_code, chapter, verse_ref)
        alignments.extend(extract_verse_alignments(objects, reference))
    return alignments
