"""MCP tools for USFM book and verse processing."""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from usfm_processor.models import ProcessingOptions
from usfm_processor.processor import ScriptureProcessor
from usfm_processor.sections import extract_translator_sections
from usfm_processor.text_extractor import extract_plain_text
from usfm_processor.tokenizer import generate_word_tokens


def register(mcp: FastMCP, processor: ScriptureProcessor) -> None:
    @mcp.tool()
    def process_book(
        document: dict[str, Any],
        book_code: str,
        book_name: str,
        include_word_tokens: bool = True,
        include_alignments: bool = True,
        generate_token_ids: bool = True,
        language: str = "en",
    ) -> dict:
        """Process a parsed USFM book (usfm-js JSON) into structured scripture.

        Returns chapters with per-verse plain text, word tokens with
        occurrence counts, word alignments and translator sections.

        Args:
            document: usfm-js output, {"headers": [...], "chapters": {...}}
            book_code: Book code (e.g. "TIT", "GEN")
            book_name: Display name (e.g. "Titus")
            include_word_tokens: Emit highlightable word tokens per verse
            include_alignments: Emit \\zaln word alignments
            generate_token_ids: Give tokens deterministic ids
            language: Language code (e.g. "en", "hbo", "el-x-koine")
        """
        options = ProcessingOptions(
            language=language,
            include_word_tokens=include_word_tokens,
            include_alignments=include_alignments,
            generate_token_ids=generate_token_ids,
        )
        return processor.process(document, book_code, book_name, options).to_dict()

    @mcp.tool()
    def process_verse(
        verse_objects: list[dict[str, Any]],
        reference: str,
    ) -> dict:
        """Get the plain text and word tokens of a single verse.

        Args:
            verse_objects: The verse's usfm-js verseObjects list
            reference: Verse reference used in token ids (e.g. "TIT 1:1")
        """
        tokens = generate_word_tokens(verse_objects, reference)
        return {
            "text": extract_plain_text(verse_objects),
            "word_tokens": [t.model_dump(mode="json", exclude_none=True) for t in tokens],
        }

    @mcp.tool()
    def get_translator_sections(
        document: dict[str, Any],
        book_code: str = "",
    ) -> list[dict]:
        """List the translator sections (\\ts\\* chunks) of a parsed book.

        Args:
            document: usfm-js output, {"headers": [...], "chapters": {...}}
            book_code: Book code used in log messages
        """
        return [s.model_dump() for s in extract_translator_sections(document, book_code)]
