"""Plain-text reconstruction of a verse."""

from __future__ import annotations

from typing import Any

from usfm_processor.nodes import NodeKind, children, node_kind, node_text


def _alignment_text(milestone: dict[str, Any]) -> str:
    text = ""
    for child in children(milestone):
        kind = node_kind(child)
        if kind in (NodeKind.text, NodeKind.word):
            text += node_text(child)
        elif kind == NodeKind.alignment:
            text += _alignment_text(child)
    return text


def extract_plain_text(verse_objects: list[Any]) -> str:
    """Concatenate a verse's words and text runs into a trimmed string.

    Paragraph and quote markers count as a single space. Alignment
    milestones contribute only the text of their children.
    """
    text = ""
    for obj in verse_objects:
        kind = node_kind(obj)
        if kind in (NodeKind.text, NodeKind.word):
            text += node_text(obj)
        elif kind == NodeKind.alignment:
            text += _alignment_text(obj)
        elif kind in (NodeKind.paragraph, NodeKind.quote):
            text += " "
    return text.strip()
