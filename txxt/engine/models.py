"""Entities derived from a txxt document.

Every entity is recomputed from the document text on each operation and
discarded afterwards; nothing here holds engine state.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal


class SectionKind(Enum):
    """The three section-header dialects."""

    NUMBERED = "numbered"
    UPPERCASE = "uppercase"
    ALTERNATIVE = "alternative"


@dataclass
class Section:
    """A section header found in a document."""

    title: str  # Title without numbering prefix or ": " marker
    level: int  # Dot-count of the prefix + 1 for numbered sections, else 1
    line_index: int  # 0-indexed line of the header
    kind: SectionKind
    numbering_prefix: str | None = None  # "3.2" for "3.2. Title"

    @property
    def heading(self) -> str:
        """The header as it is rendered in a table of contents."""
        if self.kind is SectionKind.NUMBERED:
            return f"{self.numbering_prefix}. {self.title}"
        if self.kind is SectionKind.ALTERNATIVE:
            return f": {self.title}"
        return self.title


@dataclass
class TocBlock:
    """Location of an existing table of contents (inclusive line range)."""

    start_line: int
    end_line: int


@dataclass
class FootnoteDeclaration:
    """A "[n] body" declaration line."""

    original_label: str
    body: str
    line_index: int


@dataclass
class TextRange:
    """A span on a single line (0-indexed line, character columns)."""

    line: int
    start: int
    end: int


@dataclass
class DocumentReference:
    """A "see: path#anchor" cross-document reference."""

    target_path: str
    range: TextRange
    anchor: str | None = None

    @property
    def target(self) -> str:
        """The reference as written, without the "see:" marker."""
        if self.anchor:
            return f"{self.target_path}#{self.anchor}"
        return self.target_path


@dataclass
class Diagnostic:
    """A problem found while validating a document."""

    message: str
    range: TextRange
    code: str
    severity: Literal["error", "warning", "information", "hint"] = "error"
