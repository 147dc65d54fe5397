"""
Unit tests for OCR noise filtering and text similarity.
"""
import pytest

from services.processing.text_cleaner import (
    clean_ocr_text,
    extract_keywords,
    is_garbage_block,
    is_valid_word,
    text_similarity,
)


SAMPLES = [
    "",
    "   \n\t ",
    "Hello world\nThis is a test",
    "SL1DE |||| Revenue: $1,234.56 grew 12%",
    "Meeting notes\n~~ |} {{ ]] ^^",
    "@#$%^&*()",
    "x" * 10000,
    "Q3 results v2.1.0 shipped at 3:30 PM",
    "a b c d e f g",
]


class TestCleanOcrText:
    """Test noise filtering of raw OCR text."""

    @pytest.mark.parametrize("text", SAMPLES)
    def test_clean_is_idempotent(self, text):
        """Cleaning already-clean text changes nothing."""
        once = clean_ocr_text(text)
        assert clean_ocr_text(once) == once

    def test_empty_and_whitespace(self):
        assert clean_ocr_text("") == ""
        assert clean_ocr_text("   \n ") == ""

    def test_symbols_only(self):
        assert clean_ocr_text("@#$%^&*") == ""

    def test_clean_text_is_unchanged(self):
        text = "Hello world\nThis is a test"
        assert clean_ocr_text(text) == text

    def test_numeric_content_preserved(self):
        """Currency and percentages survive while pipe noise is dropped."""
        result = clean_ocr_text("SL1DE |||| Revenue: $1,234.56 grew 12%")

        assert "||||" not in result
        assert "$1,234.56" in result
        assert "12%" in result
        assert "Revenue:" in result

    def test_gibberish_line_dropped(self):
        result = clean_ocr_text("Meeting notes\n~~ |} {{ ]] ^^")
        assert result == "Meeting notes"

    def test_very_long_input(self):
        """Pathological input still returns a string."""
        assert clean_ocr_text("x" * 10000) == ""
        assert isinstance(clean_ocr_text("word " * 20000), str)


class TestWordChecks:
    """Test token and block level checks."""

    def test_valid_short_words(self):
        assert is_valid_word("a") is True
        assert is_valid_word("is") is True

    def test_numeric_tokens(self):
        assert is_valid_word("$1,234.56") is True
        assert is_valid_word("12%") is True
        assert is_valid_word("1920x1080") is True

    def test_noise_tokens(self):
        assert is_valid_word("||||") is False
        assert is_valid_word("aaaaaa") is False
        assert is_valid_word("7") is False

    def test_garbage_block(self):
        assert is_garbage_block("@@@ ### $$$") is True
        assert is_garbage_block("Quarterly review") is False


class TestTextSimilarity:
    """Test Jaccard similarity between captures."""

    def test_identical_text(self):
        assert text_similarity("quarterly revenue review", "quarterly revenue review") == 1.0

    def test_empty_inputs(self):
        assert text_similarity("", "") == 1.0
        assert text_similarity("", "x") == 0.0
        assert text_similarity("x", "") == 0.0

    def test_short_words_only(self):
        """Identical text without 3+ char words is still identical."""
        assert text_similarity("a b", "a b") == 1.0

    def test_slide_overlap(self):
        same_slide = text_similarity("Welcome to Q3 Review", "Welcome to Q3 Review Agenda")
        new_slide = text_similarity("Welcome to Q3 Review Agenda", "Revenue breakdown by region")

        assert same_slide >= 0.4
        assert new_slide < 0.4

    def test_symmetric(self):
        a = "revenue grew this quarter"
        b = "revenue fell last quarter"
        assert text_similarity(a, b) == text_similarity(b, a)


class TestExtractKeywords:
    """Test frequency-based keyword extraction."""

    def test_frequency_order(self):
        keywords = extract_keywords("revenue revenue growth the and growth revenue")
        assert keywords == ["revenue", "growth"]

    def test_stop_words_and_short_words_removed(self):
        assert extract_keywords("the and of to it") == []

    def test_top_n(self):
        text = "alpha beta gamma delta epsilon"
        assert len(extract_keywords(text, top_n=3)) == 3
