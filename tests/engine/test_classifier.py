"""Tests for line classification."""

import pytest

from txxt.engine.classifier import LineKind, classify, split_metadata, tokenize
from txxt.engine.models import TocBlock


class TestClassify:
    """Test cases for classify()."""

    @pytest.mark.parametrize(
        ("line", "kind"),
        [
            ("1. Introduction", LineKind.NUMBERED_SECTION),
            ("1.2.3. Deep Section", LineKind.NUMBERED_SECTION),
            ("INTRODUCTION", LineKind.UPPERCASE_SECTION),
            ("SCOPE AND GOALS", LineKind.UPPERCASE_SECTION),
            ("NON-GOALS", LineKind.UPPERCASE_SECTION),
            (": Open Questions", LineKind.ALTERNATIVE_SECTION),
            ("Author  Jane Doe", LineKind.METADATA),
            ("- bullet item", LineKind.BULLET_LIST),
            ("  1. numbered item", LineKind.NUMBERED_LIST),
            ("  a. lettered item", LineKind.LETTERED_LIST),
            ("  ii. roman item", LineKind.ROMAN_LIST),
            ("    some_code()", LineKind.CODE),
            ("> quoted", LineKind.QUOTE),
            (">> nested quote", LineKind.NESTED_QUOTE),
            ("# a comment", LineKind.COMMENT),
            ("", LineKind.BLANK),
            ("   ", LineKind.BLANK),
            ("Just some prose.", LineKind.TEXT),
        ],
    )
    def test_single_line_kinds(self, line, kind):
        """Each line shape maps to its kind."""
        assert classify(line) == kind

    def test_section_wins_over_metadata(self):
        """A short ALL-CAPS line with a double space is a section."""
        assert classify("STATUS  DRAFT") == LineKind.UPPERCASE_SECTION

    def test_numbered_section_wins_over_numbered_list(self):
        """An unindented numbered line is a section header."""
        assert classify("1. item") == LineKind.NUMBERED_SECTION

    def test_roman_wins_over_lettered(self):
        """Markers that are valid roman numerals classify as roman."""
        assert classify("  i. first") == LineKind.ROMAN_LIST
        assert classify("  v. fifth") == LineKind.ROMAN_LIST
        assert classify("  c. third") == LineKind.LETTERED_LIST

    def test_version_number_is_not_a_section(self):
        """A decimal without a trailing dot is prose."""
        assert classify("1.0 is stable.") == LineKind.TEXT
        assert classify("Version 1.0 was released.") == LineKind.TEXT

    def test_single_capital_is_text(self):
        """An uppercase section needs at least two characters."""
        assert classify("A") == LineKind.TEXT
        assert classify("AB") == LineKind.UPPERCASE_SECTION

    def test_five_space_indent_is_not_code(self):
        """Code blocks start with exactly four spaces."""
        assert classify("     five spaces") == LineKind.TEXT

    def test_kind_helpers(self):
        """Kind properties group related kinds."""
        assert LineKind.ALTERNATIVE_SECTION.is_section
        assert LineKind.BULLET_LIST.is_list
        assert not LineKind.BULLET_LIST.is_ordered_list
        assert LineKind.ROMAN_LIST.is_ordered_list
        assert LineKind.NESTED_QUOTE.is_quote
        assert not LineKind.TEXT.is_section


class TestSplitMetadata:
    """Test cases for split_metadata()."""

    def test_splits_key_and_value(self):
        assert split_metadata("Author     John Doe") == ("Author", "John Doe")

    def test_multi_word_key(self):
        """The key ends at the first run of two or more spaces."""
        assert split_metadata("Last Updated  2025-03-13") == ("Last Updated", "2025-03-13")

    def test_value_with_double_spaces(self):
        """Later double spaces stay in the value."""
        assert split_metadata("Note    one  two") == ("Note", "one  two")

    def test_not_metadata(self):
        assert split_metadata("plain text") is None


class TestTokenize:
    """Test cases for tokenize()."""

    def test_title_and_rule(self):
        """An underlined line is a title, not a section."""
        tokens = tokenize(["MY DOCUMENT", "-----------", "", "INTRO"])
        kinds = [t.kind for t in tokens]
        assert kinds == [
            LineKind.TITLE,
            LineKind.RULE,
            LineKind.BLANK,
            LineKind.UPPERCASE_SECTION,
        ]

    def test_code_continuation(self):
        """Deeper indentation and blank lines stay inside a code block."""
        lines = ["    code()", "      deeper()", "", "     still code", "text"]
        kinds = [t.kind for t in tokenize(lines)]
        assert kinds == [
            LineKind.CODE,
            LineKind.CODE,
            LineKind.BLANK,
            LineKind.CODE,
            LineKind.TEXT,
        ]

    def test_toc_lines_are_tagged(self):
        """Lines inside a known TOC block are never sections."""
        lines = ["TABLE OF CONTENTS", "-----------------", "", "1. Intro", "", "1. Intro"]
        tokens = tokenize(lines, TocBlock(start_line=0, end_line=3))
        assert [t.kind for t in tokens[:4]] == [LineKind.TOC] * 4
        assert tokens[5].kind == LineKind.NUMBERED_SECTION

    def test_indices_follow_lines(self):
        tokens = tokenize(["a", "b", "c"])
        assert [t.index for t in tokens] == [0, 1, 2]
        assert [t.text for t in tokens] == ["a", "b", "c"]
