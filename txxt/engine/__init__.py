"""txxt document structure engine.

Pure text-in/text-out operations over txxt documents. Every function takes a
document snapshot and returns a new value; nothing is mutated in place.
"""

from pathlib import Path

from .classifier import ClassifiedLine, LineKind, classify, tokenize
from .errors import ErrorCode, TxxtError, UnsupportedDocumentError
from .footnotes import FootnoteEngine, FootnoteResult
from .formatter import METADATA_KEY_WIDTH, FormatEngine, FormatResult
from .models import (
    Diagnostic,
    DocumentReference,
    FootnoteDeclaration,
    Section,
    SectionKind,
    TextRange,
    TocBlock,
)
from .numbering import NumberingEngine, NumberingResult
from .references import ReferenceCheckResult, ReferenceEngine, find_references
from .sections import ParseResult, SectionIndex, find_sections
from .toc import TOC_HEADER, TocEngine, TocUpdateResult


def format_document(text: str) -> str:
    """Format a document (whitespace, metadata alignment, section spacing)."""
    return FormatEngine().format_document(text).content


def full_formatting(text: str) -> str:
    """Format, update the table of contents, then renumber footnotes."""
    return FormatEngine().full_formatting(text).content


def update_toc(text: str) -> TocUpdateResult:
    """Generate or replace the table of contents, reporting what happened."""
    sections = SectionIndex().parse_content(text).sections
    return TocEngine().apply(text, sections)


def generate_toc(text: str) -> str:
    """Generate or replace the table of contents; unchanged if no sections."""
    return update_toc(text).content


def number_footnotes(text: str) -> str:
    """Renumber footnotes 1..N in declaration order."""
    return FootnoteEngine().renumber(text).content


def fix_numbering(text: str) -> NumberingResult:
    """Repair section and ordered list numbering."""
    return NumberingEngine().fix(text)


async def check_references(text: str, base_dir: str | Path) -> ReferenceCheckResult:
    """Validate "see:" references relative to base_dir."""
    return await ReferenceEngine().check(text, base_dir)


__all__ = [
    "ClassifiedLine",
    "Diagnostic",
    "DocumentReference",
    "ErrorCode",
    "FootnoteDeclaration",
    "FootnoteEngine",
    "FootnoteResult",
    "FormatEngine",
    "FormatResult",
    "LineKind",
    "METADATA_KEY_WIDTH",
    "NumberingEngine",
    "NumberingResult",
    "ParseResult",
    "ReferenceCheckResult",
    "ReferenceEngine",
    "Section",
    "SectionIndex",
    "SectionKind",
    "TOC_HEADER",
    "TextRange",
    "TocBlock",
    "TocEngine",
    "TocUpdateResult",
    "TxxtError",
    "UnsupportedDocumentError",
    "check_references",
    "classify",
    "find_references",
    "find_sections",
    "fix_numbering",
    "format_document",
    "full_formatting",
    "generate_toc",
    "number_footnotes",
    "tokenize",
    "update_toc",
]
