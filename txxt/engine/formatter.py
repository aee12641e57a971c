"""Whole-document formatting for txxt documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .classifier import LineKind, split_metadata
from .errors import require_text
from .footnotes import FootnoteEngine
from .sections import SectionIndex, scan
from .text import join_lines, split_lines
from .toc import TocEngine

logger = logging.getLogger(__name__)

METADATA_KEY_WIDTH = 14

# Block kinds after which a "Key  Value" line starts or continues metadata.
# Anywhere else (e.g. inside a paragraph) such a line is prose.
_METADATA_CONTEXTS = frozenset(["none", "metadata", "section", "title"])


@dataclass
class FormatResult:
    """Result of formatting a document."""

    content: str
    was_modified: bool


def _block_of(kind: LineKind) -> str:
    if kind.is_section:
        return "section"
    if kind.is_list:
        return "list"
    if kind.is_quote:
        return "quote"
    if kind in (LineKind.TITLE, LineKind.RULE):
        return "title"
    return kind.value


class FormatEngine:
    """Formats txxt documents.

    Provides two operations:
    - format_document: trailing whitespace, metadata alignment, blank lines
      around section headers
    - full_formatting: format_document, then the table of contents, then
      footnote renumbering
    """

    def __init__(self, metadata_key_width: int = METADATA_KEY_WIDTH):
        self.metadata_key_width = metadata_key_width
        self.toc = TocEngine()
        self.footnotes = FootnoteEngine()

    def format_document(self, content: str) -> FormatResult:
        """Format a document in a single forward pass.

        Rules:
        - trailing whitespace is removed from every line
        - metadata values start at a fixed key column
        - section headers get exactly one blank line before (unless at the
          start of the document) and exactly one after
        - lists, code, quotes and the table of contents pass through

        Formatting an already formatted document returns it unchanged.
        """
        require_text(content, "format_document")
        lines, newline = split_lines(content)
        tokens, _ = scan(lines)

        formatted: list[str] = []
        block = "none"
        skip_blank_lines = False

        for token in tokens:
            kind = token.kind
            line = token.text.rstrip()

            if kind is LineKind.BLANK:
                if skip_blank_lines:
                    continue
                formatted.append("")
                block = "none"
                continue
            skip_blank_lines = False

            if kind.is_section:
                while formatted and formatted[-1] == "":
                    formatted.pop()
                if formatted:
                    formatted.append("")
                formatted.append(line)
                formatted.append("")
                skip_blank_lines = True
                block = "section"
                continue

            if kind is LineKind.METADATA and block in _METADATA_CONTEXTS:
                formatted.append(self.format_metadata(line))
                block = "metadata"
                continue

            if kind is LineKind.METADATA:
                # Continuation of a paragraph that happens to contain two spaces
                formatted.append(line)
                continue

            formatted.append(line)
            block = _block_of(kind)

        # No trailing newline in, none out: drop the blank a final header left behind
        if lines[-1] != "":
            while formatted and formatted[-1] == "":
                formatted.pop()

        result = join_lines(formatted, newline)
        return FormatResult(content=result, was_modified=result != content)

    def format_metadata(self, line: str) -> str:
        """Align a "Key  Value" line to the metadata key column.

        Keys too long for the column keep two spaces before the value so the
        line is still recognized as metadata.
        """
        parts = split_metadata(line)
        if parts is None:
            return line
        key, value = parts
        width = max(self.metadata_key_width, len(key) + 2)
        return f"{key.ljust(width)}{value}"

    def full_formatting(self, content: str) -> FormatResult:
        """Format, then update the table of contents, then renumber footnotes.

        The table of contents is placed after formatting because its position
        depends on where section headers end up; footnote numbering does not
        depend on layout.
        """
        formatted = self.format_document(content).content

        sections = SectionIndex().parse_content(formatted).sections
        toc_result = self.toc.apply(formatted, sections)
        logger.debug("Full formatting TOC action: %s", toc_result.action)

        result = self.footnotes.renumber(toc_result.content).content
        return FormatResult(content=result, was_modified=result != content)
