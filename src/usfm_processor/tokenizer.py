"""Word tokenization for highlighting.

Tokens carry per-verse, case-insensitive occurrence counts so a word can be
addressed as "the 2nd 'god' in GEN 1:1" independently of surrounding text.
Tokens inside alignment milestones also carry the milestone's metadata.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Any

from usfm_processor.models import (
    TokenAlignment,
    TokenPosition,
    TokenType,
    WordToken,
)
from usfm_processor.nodes import NodeKind, children, node_kind, node_text

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def generate_id(verse_ref: str, content: str, occurrence: int | None = None) -> str:
    """Deterministic token id, e.g. "GEN 1:1-god-2"."""
    base = f"{verse_ref}-{_NON_ALNUM.sub('_', content.lower())}"
    return f"{base}-{occurrence}" if occurrence is not None else base


def count_words(verse_objects: list[Any]) -> Counter[str]:
    """Lowercased word form -> number of word nodes in the verse."""
    counts: Counter[str] = Counter()

    def visit(nodes: list[Any]) -> None:
        for node in nodes:
            kind = node_kind(node)
            if kind == NodeKind.alignment:
                visit(children(node))
            elif kind == NodeKind.word:
                counts[node_text(node).lower()] += 1

    visit(verse_objects)
    return counts


def token_alignment(milestone: dict[str, Any]) -> TokenAlignment:
    return TokenAlignment(
        strong=milestone.get("strong") or "",
        lemma=milestone.get("lemma") or "",
        morph=milestone.get("morph") or "",
        occurrence=milestone.get("occurrence") or "",
        occurrences=milestone.get("occurrences") or "",
        content=milestone.get("content") or "",
    )


class _VerseTokenizer:
    """State for tokenizing a single verse; discarded afterwards."""

    def __init__(self, verse_ref: str, generate_ids: bool, counts: Counter[str]) -> None:
        self.verse_ref = verse_ref
        self.generate_ids = generate_ids
        self.counts = counts
        self.seen: Counter[str] = Counter()
        self.position = 0
        self.tokens: list[WordToken] = []

    def _span(self, content: str) -> TokenPosition:
        span = TokenPosition(start=self.position, end=self.position + len(content))
        self.position = span.end
        return span

    def word(
        self,
        content: str,
        alignment: TokenAlignment | None = None,
        alignment_id: str | None = None,
    ) -> None:
        lowered = content.lower()
        self.seen[lowered] += 1
        occurrence = self.seen[lowered]
        self.tokens.append(
            WordToken(
                unique_id=(
                    generate_id(self.verse_ref, content, occurrence)
                    if self.generate_ids
                    else ""
                ),
                content=content,
                occurrence=occurrence,
                total_occurrences=self.counts.get(lowered, 1),
                verse_ref=self.verse_ref,
                position=self._span(content),
                type=TokenType.word,
                is_highlightable=True,
                alignment_id=alignment_id,
                alignment=alignment,
            )
        )

    def text(
        self,
        content: str,
        alignment: TokenAlignment | None = None,
        alignment_id: str | None = None,
    ) -> None:
        unique_id = (
            generate_id(self.verse_ref, "text", self.position) if self.generate_ids else ""
        )
        self.tokens.append(
            WordToken(
                unique_id=unique_id,
                content=content,
                occurrence=0,
                total_occurrences=0,
                verse_ref=self.verse_ref,
                position=self._span(content),
                type=TokenType.text,
                is_highlightable=False,
                alignment_id=alignment_id,
                alignment=alignment,
            )
        )

    def milestone(self, milestone: dict[str, Any]) -> None:
        alignment = token_alignment(milestone)
        alignment_id = (
            generate_id(self.verse_ref, alignment.content) if self.generate_ids else None
        )
        for child in children(milestone):
            kind = node_kind(child)
            if kind == NodeKind.word:
                self.word(node_text(child), alignment, alignment_id)
            elif kind == NodeKind.text:
                self.text(node_text(child), alignment, alignment_id)
            elif kind == NodeKind.alignment:
                # Innermost milestone wins for its own children
                self.milestone(child)

    def run(self, verse_objects: list[Any]) -> list[WordToken]:
        for obj in verse_objects:
            kind = node_kind(obj)
            if kind == NodeKind.alignment:
                self.milestone(obj)
            elif kind == NodeKind.text:
                self.text(node_text(obj))
            elif kind == NodeKind.word:
                self.word(node_text(obj))
        return self.tokens


def generate_word_tokens(
    verse_objects: list[Any],
    verse_ref: str,
    generate_ids: bool = True,
) -> list[WordToken]:
    """Tokenize one verse into ordered word and text tokens.

    Paragraph and quote markers produce no token, so token contents joined
    together can differ from the reconstructed verse text by whitespace.
    """
    counts = count_words(verse_objects)
    return _VerseTokenizer(verse_ref, generate_ids, counts).run(verse_objects)
