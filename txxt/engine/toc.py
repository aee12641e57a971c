"""Table of contents generation and replacement for txxt documents."""

import logging
from dataclasses import dataclass
from typing import Literal

from .classifier import LineKind, is_rule, tokenize
from .errors import ErrorCode, require_text
from .models import Section, TocBlock
from .text import join_lines, split_lines

logger = logging.getLogger(__name__)

TOC_HEADER = "TABLE OF CONTENTS"
TOC_RULE = "-" * len(TOC_HEADER)
TOC_INDENT = "    "
# Line used when neither metadata nor a title tells us where the TOC goes
DEFAULT_TOC_LINE = 3


@dataclass
class TocUpdateResult:
    """Result of a TOC update operation."""

    content: str
    action: Literal["created", "updated", "unchanged"]
    entries: int
    status: ErrorCode | None = None  # NO_STRUCTURE_FOUND when there is nothing to list

    @property
    def changed(self) -> bool:
        return self.action != "unchanged"


def locate_toc(lines: list[str]) -> TocBlock | None:
    """Find an existing table of contents.

    The block starts at the first line reading "TABLE OF CONTENTS" and covers
    its dashed rule, the blank line after it and the entries. Entries are
    never separated by blank lines, so the block ends before the first blank
    line that follows them, or at the end of the document.

    Args:
        lines: Document lines

    Returns:
        TocBlock with an inclusive line range, or None if there is no TOC.
    """
    for i, line in enumerate(lines):
        if line.strip() != TOC_HEADER:
            continue

        j = i + 1
        if j < len(lines) and is_rule(lines[j]):
            j += 1
        end = j - 1
        # The blank line between the rule and the first entry belongs to the TOC
        while j < len(lines) and not lines[j].strip():
            j += 1
        while j < len(lines) and lines[j].strip():
            end = j
            j += 1

        return TocBlock(start_line=i, end_line=end)

    return None


class TocEngine:
    """Builds, locates and replaces the table of contents block."""

    def generate(self, sections: list[Section]) -> list[str]:
        """Generate table of contents lines.

        Args:
            sections: Sections in document order

        Returns:
            Header, rule, blank line and one entry per section; an empty list
            when there are no sections.
        """
        if not sections:
            return []

        toc_lines = [TOC_HEADER, TOC_RULE, ""]
        for section in sections:
            indent = TOC_INDENT if section.level > 1 else ""
            toc_lines.append(f"{indent}{section.heading}")
        return toc_lines

    def locate(self, lines: list[str]) -> TocBlock | None:
        """Find an existing table of contents in document lines."""
        return locate_toc(lines)

    def apply(self, content: str, sections: list[Section]) -> TocUpdateResult:
        """Replace the existing table of contents or insert a new one.

        Args:
            content: The document text
            sections: Sections of the document, in document order

        Returns:
            TocUpdateResult with the updated content. With no sections the
            content is returned unchanged and status is NO_STRUCTURE_FOUND.
        """
        require_text(content, "generate_toc")
        if not sections:
            logger.debug("No sections found, table of contents not generated")
            return TocUpdateResult(
                content=content,
                action="unchanged",
                entries=0,
                status=ErrorCode.NO_STRUCTURE_FOUND,
            )

        lines, newline = split_lines(content)
        toc_lines = self.generate(sections)
        entries = len(toc_lines) - 3

        toc_block = self.locate(lines)
        if toc_block:
            new_lines = lines[: toc_block.start_line] + toc_lines + lines[toc_block.end_line + 1 :]
            action: Literal["created", "updated", "unchanged"] = "updated"
        else:
            insert_pos = self._find_toc_insert_position(lines)
            logger.debug("Inserting table of contents at line %d", insert_pos)
            rest = lines[insert_pos:]
            # Exactly one blank line after the TOC
            while len(rest) > 1 and not rest[0].strip():
                rest = rest[1:]
            if rest == [""]:
                rest = []
            new_lines = lines[:insert_pos] + toc_lines + [""] + rest
            action = "created"

        updated_content = join_lines(new_lines, newline)
        if updated_content == content:
            action = "unchanged"

        return TocUpdateResult(content=updated_content, action=action, entries=entries)

    def _find_toc_insert_position(self, lines: list[str]) -> int:
        """Find the line index where a new table of contents goes.

        In order of preference: after the blank line that ends the leading
        metadata block, after the first blank line following an underlined
        title, line 3, or the end of a shorter document.
        """
        tokens = tokenize(lines)

        metadata_end: int | None = None
        for token in tokens:
            if token.kind.is_section:
                break
            if token.kind is LineKind.METADATA:
                metadata_end = token.index
            elif metadata_end is not None:
                break
        if metadata_end is not None:
            blank = self._first_blank_after(lines, metadata_end)
            return blank + 1 if blank is not None else len(lines)

        for token in tokens:
            if token.kind is LineKind.TITLE:
                blank = self._first_blank_after(lines, token.index + 1)
                if blank is not None:
                    return blank + 1
                break

        return min(DEFAULT_TOC_LINE, len(lines))

    @staticmethod
    def _first_blank_after(lines: list[str], index: int) -> int | None:
        for j in range(index + 1, len(lines)):
            if not lines[j].strip():
                return j
        return None
