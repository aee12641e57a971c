"""Line classification for txxt documents.

A line is classified on its own by ``classify``. When several patterns match,
the first kind in this order wins:

    Section (numbered, uppercase, alternative)
    > Metadata
    > List (roman is checked before lettered, so "i." is roman)
    > List (bullet, numbered, lettered)
    > Code > Quote > Comment > Text

Sections win over metadata, so a short ALL-CAPS line such as
"STATUS  DRAFT" is an uppercase section, not a metadata entry.

``tokenize`` classifies a whole document in one forward pass and adds the
kinds that need neighbouring lines: titles and their dashed rule, the lines
of an existing table of contents, and code-block continuation lines.
"""

import re
from dataclasses import dataclass
from enum import Enum

from .models import TocBlock


class LineKind(Enum):
    """Tagged kind of a single line."""

    NUMBERED_SECTION = "numbered_section"
    UPPERCASE_SECTION = "uppercase_section"
    ALTERNATIVE_SECTION = "alternative_section"
    METADATA = "metadata"
    ROMAN_LIST = "roman_list"
    BULLET_LIST = "bullet_list"
    NUMBERED_LIST = "numbered_list"
    LETTERED_LIST = "lettered_list"
    CODE = "code"
    QUOTE = "quote"
    NESTED_QUOTE = "nested_quote"
    COMMENT = "comment"
    BLANK = "blank"
    TEXT = "text"
    # Only produced by tokenize()
    TITLE = "title"
    RULE = "rule"
    TOC = "toc"

    @property
    def is_section(self) -> bool:
        return self in _SECTION_KINDS

    @property
    def is_list(self) -> bool:
        return self in _LIST_KINDS

    @property
    def is_ordered_list(self) -> bool:
        return self in _ORDERED_LIST_KINDS

    @property
    def is_quote(self) -> bool:
        return self in (LineKind.QUOTE, LineKind.NESTED_QUOTE)


_SECTION_KINDS = frozenset(
    [LineKind.NUMBERED_SECTION, LineKind.UPPERCASE_SECTION, LineKind.ALTERNATIVE_SECTION]
)
_ORDERED_LIST_KINDS = frozenset(
    [LineKind.ROMAN_LIST, LineKind.NUMBERED_LIST, LineKind.LETTERED_LIST]
)
_LIST_KINDS = _ORDERED_LIST_KINDS | {LineKind.BULLET_LIST}

NUMBERED_SECTION_PATTERN = re.compile(r"^(\d+(?:\.\d+)*)\.\s+(\S.*)$")
UPPERCASE_SECTION_PATTERN = re.compile(r"^[A-Z][A-Z\s-]+$")
ALTERNATIVE_SECTION_PATTERN = re.compile(r"^:\s+(\S.*)$")
METADATA_PATTERN = re.compile(r"^[A-Za-z][A-Za-z\s]+\s{2,}[A-Za-z0-9].*$")
# Lazy key so the value starts after the first run of 2+ spaces
METADATA_SPLIT_PATTERN = re.compile(r"^([A-Za-z][A-Za-z\s]+?)\s{2,}([A-Za-z0-9].*)$")
BULLET_LIST_PATTERN = re.compile(r"^\s*-\s+\S.*$")
NUMBERED_LIST_PATTERN = re.compile(r"^\s*\d+\.\s+\S.*$")
LETTERED_LIST_PATTERN = re.compile(r"^\s*[a-z]\.\s+\S.*$")
ROMAN_LIST_PATTERN = re.compile(r"^\s*(i|ii|iii|iv|v|vi|vii|viii|ix|x)\.\s+\S.*$")
# Marker of any ordered list item: indentation, marker, separator
ORDERED_MARKER_PATTERN = re.compile(r"^(\s*)(\d+|[a-z]+)\.(?=\s)")
CODE_PATTERN = re.compile(r"^ {4}\S")
CODE_CONTINUATION_PATTERN = re.compile(r"^ {4,}\S")
QUOTE_PATTERN = re.compile(r"^>\s+")
NESTED_QUOTE_PATTERN = re.compile(r"^>>\s+")
COMMENT_PATTERN = re.compile(r"^#")
RULE_PATTERN = re.compile(r"^-{3,}\s*$")

# Checked in order; the first match wins.
_PRECEDENCE: tuple[tuple[LineKind, re.Pattern[str]], ...] = (
    (LineKind.NUMBERED_SECTION, NUMBERED_SECTION_PATTERN),
    (LineKind.UPPERCASE_SECTION, UPPERCASE_SECTION_PATTERN),
    (LineKind.ALTERNATIVE_SECTION, ALTERNATIVE_SECTION_PATTERN),
    (LineKind.METADATA, METADATA_PATTERN),
    (LineKind.ROMAN_LIST, ROMAN_LIST_PATTERN),
    (LineKind.BULLET_LIST, BULLET_LIST_PATTERN),
    (LineKind.NUMBERED_LIST, NUMBERED_LIST_PATTERN),
    (LineKind.LETTERED_LIST, LETTERED_LIST_PATTERN),
    (LineKind.CODE, CODE_PATTERN),
    (LineKind.NESTED_QUOTE, NESTED_QUOTE_PATTERN),
    (LineKind.QUOTE, QUOTE_PATTERN),
    (LineKind.COMMENT, COMMENT_PATTERN),
)


@dataclass
class ClassifiedLine:
    """A document line together with its kind."""

    index: int
    text: str
    kind: LineKind


def classify(line: str) -> LineKind:
    """Classify a single line, without looking at its neighbours."""
    if line.strip() == "":
        return LineKind.BLANK
    for kind, pattern in _PRECEDENCE:
        if pattern.match(line):
            return kind
    return LineKind.TEXT


def is_section(line: str) -> bool:
    """Return True if the line is a header in any section dialect."""
    return classify(line).is_section


def is_rule(line: str) -> bool:
    """Return True for a dashed rule such as a title underline."""
    return RULE_PATTERN.match(line) is not None


def split_metadata(line: str) -> tuple[str, str] | None:
    """Split a "Key    Value" line into its key and value.

    Returns:
        Tuple of (key, value) with surrounding whitespace removed, or None.
    """
    match = METADATA_SPLIT_PATTERN.match(line.rstrip())
    if not match:
        return None
    key, value = match.groups()
    return key.strip(), value.strip()


def _is_title(lines: list[str], index: int) -> bool:
    """A title is an unindented line directly underlined by a dashed rule."""
    line = lines[index]
    if index + 1 >= len(lines) or not line.strip() or line[0].isspace():
        return False
    return not is_rule(line) and is_rule(lines[index + 1])


def tokenize(lines: list[str], toc_block: TocBlock | None = None) -> list[ClassifiedLine]:
    """Classify every line of a document in a single forward pass.

    Args:
        lines: Document lines without newline characters.
        toc_block: Location of an existing table of contents; its lines are
            tagged TOC so their entries are never read as section headers.

    Returns:
        One ClassifiedLine per input line, in order.
    """
    tokens: list[ClassifiedLine] = []
    in_code = False

    for i, line in enumerate(lines):
        if toc_block and toc_block.start_line <= i <= toc_block.end_line:
            kind = LineKind.TOC
        elif tokens and tokens[-1].kind is LineKind.TITLE:
            kind = LineKind.RULE
        elif _is_title(lines, i):
            kind = LineKind.TITLE
        elif in_code and CODE_CONTINUATION_PATTERN.match(line):
            kind = LineKind.CODE
        else:
            kind = classify(line)

        # Blank lines keep a code block open for the next indented line
        in_code = kind is LineKind.CODE or (in_code and kind is LineKind.BLANK)
        tokens.append(ClassifiedLine(index=i, text=line, kind=kind))

    return tokens
