"""Tests for footnote renumbering."""

from txxt.engine import number_footnotes
from txxt.engine.footnotes import FootnoteEngine


class TestFootnoteEngine:
    """Test cases for FootnoteEngine."""

    def setup_method(self):
        self.engine = FootnoteEngine()

    def test_renumbers_in_declaration_order(self):
        content = """First claim [3] and second [1] and third [2].

[3] Third note
[1] First note
[2] Second note
"""
        result = self.engine.renumber(content)

        assert result.renumber_map == {"3": "1", "1": "2", "2": "3"}
        assert result.declarations == 3
        assert result.changed
        assert result.content == """First claim [1] and second [2] and third [3].

[1] Third note
[2] First note
[3] Second note
"""

    def test_no_cascading_substitution(self):
        """A rewritten label is never rewritten again."""
        content = "See [2] then [1].\n\n[2] Two\n[1] One\n"
        assert number_footnotes(content) == "See [1] then [2].\n\n[1] Two\n[2] One\n"

    def test_already_numbered(self):
        content = "Claim [1].\n\n[1] Note\n"
        result = self.engine.renumber(content)

        assert result.content == content
        assert not result.changed

    def test_no_declarations(self):
        """References without declarations are left alone."""
        content = "See [7] and [3].\n"
        result = self.engine.renumber(content)

        assert result.content == content
        assert result.declarations == 0
        assert result.renumber_map == {}

    def test_malformed_markers_ignored(self):
        content = "See [1 unterminated\n[1 Missing bracket\n"
        assert number_footnotes(content) == content

    def test_undeclared_reference_untouched(self):
        content = "See [5] and [9].\n\n[5] Only note\n"
        assert number_footnotes(content) == "See [1] and [9].\n\n[1] Only note\n"

    def test_duplicate_declaration_keeps_first_number(self):
        declarations = self.engine.find_declarations("[4] a\n[2] b\n[4] c\n")

        assert [d.original_label for d in declarations] == ["4", "2", "4"]
        assert self.engine.build_renumber_map(declarations) == {"4": "1", "2": "2"}

    def test_find_declarations_records_lines(self):
        declarations = self.engine.find_declarations("Text.\n\n[1] First\n[2] Second\n")

        assert [(d.original_label, d.body, d.line_index) for d in declarations] == [
            ("1", "First", 2),
            ("2", "Second", 3),
        ]

    def test_crlf_document(self):
        content = "Claim [2].\r\n\r\n[2] Note\r\n"
        result = self.engine.renumber(content)

        assert result.content == "Claim [1].\r\n\r\n[1] Note\r\n"
        assert self.engine.find_declarations(content)[0].body == "Note"
