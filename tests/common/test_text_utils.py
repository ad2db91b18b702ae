"""Tests for catalog_merge/common/text_utils.py"""

from catalog_merge.common.text_utils import collapse_whitespace, make_handle, strip_non_alphanumeric


class TestCollapseWhitespace:
    def test_collapses_and_trims(self):
        assert collapse_whitespace("  Classic \t Tee \n") == "Classic Tee"

    def test_empty(self):
        assert collapse_whitespace("") == ""


class TestStripNonAlphanumeric:
    def test_removes_punctuation(self):
        assert strip_non_alphanumeric("Women's Tee - (Heavy)") == "Womens Tee Heavy"

    def test_curly_apostrophe(self):
        assert strip_non_alphanumeric("Men’s Crew") == "Mens Crew"

    def test_underscores_are_separators(self):
        assert strip_non_alphanumeric("Tee_Classic/2024") == "Tee Classic 2024"

    def test_keeps_unicode_letters(self):
        assert strip_non_alphanumeric("Café Crème!") == "Café Crème"

    def test_empty(self):
        assert strip_non_alphanumeric("") == ""
        assert strip_non_alphanumeric(None) == ""


class TestMakeHandle:
    def test_replaces_whitespace_runs(self):
        assert make_handle("Classic  Tee") == "Classic-Tee"

    def test_single_word(self):
        assert make_handle("Widget") == "Widget"

    def test_trims(self):
        assert make_handle(" Crew Sweater ") == "Crew-Sweater"

    def test_empty(self):
        assert make_handle("") == ""
