"""Classification of raw usfm-js verse objects.

The upstream parser hands us plain dicts. Every traversal in this package
goes through `node_kind` so the set of recognised node types lives in one
place; anything not recognised is `NodeKind.other` and is skipped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

# Tags the parser produces for translator-section markers (\ts and \ts\*)
SECTION_MARKER_TAGS = {"ts", "ts\\*"}

ALIGNMENT_TAG = "zaln"


class NodeKind(str, Enum):
    text = "text"
    word = "word"
    alignment = "alignment"
    paragraph = "paragraph"
    quote = "quote"
    section_marker = "section_marker"
    other = "other"


def node_kind(node: Any) -> NodeKind:
    if not isinstance(node, dict):
        return NodeKind.other

    node_type = node.get("type")
    tag = node.get("tag")

    if tag in SECTION_MARKER_TAGS:
        return NodeKind.section_marker
    if node_type == "text":
        return NodeKind.text
    if node_type == "word":
        return NodeKind.word
    if node_type == "milestone" and tag == ALIGNMENT_TAG:
        return NodeKind.alignment
    if node_type == "paragraph":
        return NodeKind.paragraph
    if node_type == "quote":
        return NodeKind.quote
    return NodeKind.other


def node_text(node: dict[str, Any]) -> str:
    """Surface text of a text or word node."""
    return node.get("text") or ""


def children(node: dict[str, Any]) -> list[Any]:
    return node.get("children") or []


def verse_objects(verse_data: Any) -> list[Any]:
    """The verseObjects list of a verse entry, empty if absent."""
    if not isinstance(verse_data, dict):
        return []
    return verse_data.get("verseObjects") or []


def count_section_markers(nodes: Iterable[Any]) -> int:
    """Count section-marker nodes anywhere in a node subtree."""
    total = 0
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if node_kind(node) == NodeKind.section_marker:
            total += 1
        total += count_section_markers(children(node))
    return total


def contains_kind(nodes: Iterable[Any], kind: NodeKind) -> bool:
    for node in nodes:
        if node_kind(node) == kind:
            return True
        if isinstance(node, dict) and contains_kind(children(node), kind):
            return True
    return False
