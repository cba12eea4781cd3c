"""Tests for the book-level ScriptureProcessor."""

import copy
import json
from pathlib import Path

import pytest

from usfm_processor.models import ProcessingOptions, TokenType
from usfm_processor.processor import (
    PROCESSING_VERSION,
    ScriptureProcessor,
    detect_document_type,
    process,
)

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture(scope="module")
def sample_document():
    return json.loads((DATA_DIR / "sample_book.json").read_text(encoding="utf-8"))


@pytest.fixture(scope="module")
def processor():
    return ScriptureProcessor()


@pytest.fixture(scope="module")
def titus(processor, sample_document):
    return processor.process(sample_document, "TIT", "Titus")


def plain_verse(value):
    return {"verseObjects": [{"type": "text", "text": value}]}


class TestLiteralScenario:
    @pytest.fixture(scope="class")
    def result(self):
        doc = {
            "headers": [],
            "chapters": {
                "1": {
                    "1": plain_verse("In the beginning"),
                    "2": plain_verse("the earth was formless"),
                }
            },
        }
        return process(doc, "GEN", "Genesis")

    def test_one_chapter(self, result):
        assert len(result.chapters) == 1
        assert result.chapters[0].verse_count == 2

    def test_verse_text(self, result):
        verses = result.chapters[0].verses
        assert [v.text for v in verses] == ["In the beginning", "the earth was formless"]
        assert [v.reference for v in verses] == ["GEN 1:1", "GEN 1:2"]

    def test_optional_lists_absent(self, result):
        data = result.to_dict()
        assert "alignments" not in data
        assert "translator_sections" not in data
        assert result.metadata.has_alignments is False
        assert result.metadata.has_sections is False

    def test_metadata(self, result):
        meta = result.metadata
        assert meta.book_code == "GEN"
        assert meta.book_name == "Genesis"
        assert meta.version == PROCESSING_VERSION
        assert meta.total_chapters == 1
        assert meta.total_verses == 2
        assert meta.chapter_verse_map == {1: 2}
        assert meta.document_type == "untokenized"
        assert meta.processing_date.endswith("Z")
        assert meta.processing_duration >= 0


class TestSorting:
    def test_chapters_and_verses_sorted_numerically(self):
        doc = {
            "chapters": {
                "2": {"1": plain_verse("b")},
                "1": {"3": plain_verse("c"), "1-2": plain_verse("a")},
            }
        }
        result = process(doc, "GEN", "Genesis")
        assert [ch.number for ch in result.chapters] == [1, 2]
        first = result.chapters[0].verses
        assert [v.number for v in first] == [1, 3]
        assert first[0].is_span is True
        assert first[0].original_verse_string == "1-2"
        assert first[0].reference == "GEN 1:1-2"


class TestSampleBook:
    def test_front_chapter_and_verse_skipped(self, titus):
        assert [ch.number for ch in titus.chapters] == [1, 2]
        assert titus.metadata.chapter_verse_map == {1: 4, 2: 3}
        assert titus.metadata.total_verses == 7

    def test_verse_text(self, titus):
        verses = titus.chapters[0].verses
        assert verses[0].text == "Paul, a servant of God and an apostle of Jesus Christ,"
        assert verses[1].text == "according to the faith of the elect"
        assert verses[2].number == 3
        assert verses[2].span_end == 4

    def test_section_markers_on_verses(self, titus):
        verses = titus.chapters[0].verses
        assert verses[0].has_section_marker is True
        assert verses[0].section_markers == 1
        assert verses[1].has_section_marker is False

    def test_translator_sections(self, titus):
        spans = [
            (s.start.chapter, s.start.verse, s.end.chapter, s.end.verse)
            for s in titus.translator_sections
        ]
        assert spans == [(1, 1, 1, 4), (1, 5, 2, 1), (2, 2, 2, 3)]
        assert titus.metadata.has_sections is True
        assert titus.metadata.statistics.total_sections == 3

    def test_book_alignments(self, titus):
        assert len(titus.alignments) == 7
        assert titus.metadata.statistics.total_alignments == 7
        nested = titus.alignments[4]
        assert nested.verse_ref == "TIT 1:1"
        assert nested.source_words == ["Ἰησοῦ", "Χριστοῦ"]
        assert nested.target_words == ["Jesus", "Christ"]
        assert len(nested.alignment_data) == 2

    def test_verse_alignments_match_book(self, titus):
        per_verse = [a for ch in titus.chapters for v in ch.verses for a in v.alignments]
        assert per_verse == titus.alignments

    def test_tokens_reconstruct_text(self, titus):
        for chapter in titus.chapters:
            for verse in chapter.verses:
                joined = "".join(t.content for t in verse.word_tokens)
                assert joined.strip() == verse.text

    def test_occurrence_permutation(self, titus):
        for chapter in titus.chapters:
            for verse in chapter.verses:
                by_form = {}
                for token in verse.word_tokens:
                    if token.type == TokenType.word:
                        by_form.setdefault(token.content.lower(), []).append(token)
                for tokens in by_form.values():
                    assert [t.occurrence for t in tokens] == list(range(1, len(tokens) + 1))
                    assert {t.total_occurrences for t in tokens} == {len(tokens)}

    def test_nested_alignment_on_tokens(self, titus):
        tokens = titus.chapters[0].verses[1].word_tokens
        the = [t for t in tokens if t.content == "the"]
        assert [t.alignment.strong for t in the] == ["G41020", "G15880"]
        assert the[0].verse_ref == "TIT 1:2"

    def test_metadata_flags(self, titus):
        meta = titus.metadata
        assert meta.has_alignments is True
        assert meta.has_word_tokens is True
        assert meta.document_type == "aligned"
        assert meta.statistics.total_word_tokens > 0
        assert meta.total_paragraphs == 0

    def test_input_not_mutated(self, processor, sample_document):
        before = copy.deepcopy(sample_document)
        processor.process(sample_document, "TIT", "Titus")
        assert sample_document == before

    def test_json_serializable(self, titus):
        data = json.loads(json.dumps(titus.to_dict()))
        assert data["book"] == "Titus"
        assert data["book_code"] == "TIT"
        assert len(data["translator_sections"]) == 3

    def test_idempotent(self, processor, sample_document):
        first = processor.process(sample_document, "TIT", "Titus").to_dict()
        second = processor.process(sample_document, "TIT", "Titus").to_dict()
        for data in (first, second):
            data["metadata"].pop("processing_date")
            data["metadata"].pop("processing_duration")
        assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


class TestOptions:
    def test_without_word_tokens(self, processor, sample_document):
        result = processor.process(
            sample_document, "TIT", "Titus", ProcessingOptions(include_word_tokens=False)
        )
        assert all(v.word_tokens is None for ch in result.chapters for v in ch.verses)
        assert result.metadata.has_word_tokens is False
        assert result.metadata.statistics.total_word_tokens is None
        verse = result.to_dict()["chapters"][0]["verses"][0]
        assert "word_tokens" not in verse

    def test_without_alignments(self, processor, sample_document):
        result = processor.process(
            sample_document, "TIT", "Titus", ProcessingOptions(include_alignments=False)
        )
        assert result.alignments is None
        assert result.metadata.has_alignments is False
        assert all(v.alignments is None for ch in result.chapters for v in ch.verses)
        # Tokens still carry their milestone metadata
        assert result.chapters[0].verses[0].word_tokens[0].alignment.strong == "G39720"

    def test_without_token_ids(self, processor, sample_document):
        result = processor.process(
            sample_document, "TIT", "Titus", ProcessingOptions(generate_token_ids=False)
        )
        tokens = result.chapters[0].verses[0].word_tokens
        assert all(t.unique_id == "" for t in tokens)
        assert all("alignment_id" not in t.model_dump(exclude_none=True) for t in tokens)

    def test_paragraphs_pass_through(self, titus):
        assert all(ch.paragraphs == [] and ch.paragraph_count == 0 for ch in titus.chapters)

    def test_language_recorded(self, processor):
        result = processor.process({}, "MAT", "Matthew", ProcessingOptions(language="el-x-koine"))
        assert result.metadata.language == "el-x-koine"


class TestMissingInput:
    def test_empty_document(self, processor):
        result = processor.process({}, "GEN", "Genesis")
        assert result.chapters == []
        assert result.metadata.total_chapters == 0
        assert result.translator_sections is None

    def test_none_document(self, processor):
        assert processor.process(None, "GEN", "Genesis").chapters == []

    def test_verse_without_objects(self, processor):
        result = processor.process({"chapters": {"1": {"1": {}}}}, "GEN", "Genesis")
        verse = result.chapters[0].verses[0]
        assert verse.text == ""
        assert verse.word_tokens == []


class TestDocumentType:
    def test_original_language(self):
        doc = {"chapters": {"1": {"1": {"verseObjects": [{"type": "word", "text": "λόγος"}]}}}}
        assert detect_document_type(doc) == "original"

    def test_aligned(self, sample_document):
        assert detect_document_type(sample_document) == "aligned"
