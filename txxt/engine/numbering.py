"""Numbering repair for sections and ordered lists in txxt documents."""

import logging
from dataclasses import dataclass, field
from typing import Literal

from .classifier import NUMBERED_SECTION_PATTERN, ORDERED_MARKER_PATTERN, LineKind
from .errors import require_text
from .sections import scan
from .text import join_lines, split_lines

logger = logging.getLogger(__name__)

MarkerStyle = Literal["numeric", "letter", "roman"]

_ROMAN_NUMERALS = (
    (1000, "m"),
    (900, "cm"),
    (500, "d"),
    (400, "cd"),
    (100, "c"),
    (90, "xc"),
    (50, "l"),
    (40, "xl"),
    (10, "x"),
    (9, "ix"),
    (5, "v"),
    (4, "iv"),
    (1, "i"),
)


def to_roman(number: int) -> str:
    """Render a positive integer as a lower-case roman numeral."""
    parts = []
    for value, numeral in _ROMAN_NUMERALS:
        count, number = divmod(number, value)
        parts.append(numeral * count)
    return "".join(parts)


def render_marker(style: MarkerStyle, position: int, original: str) -> str:
    """Render the marker for the n-th item of a run.

    Letters stop at "z"; later items keep their original marker.
    """
    if style == "numeric":
        return str(position)
    if style == "roman":
        return to_roman(position)
    if position <= 26:
        return chr(ord("a") + position - 1)
    return original


@dataclass
class NumberingChange:
    """A single line whose label was rewritten."""

    line_number: int  # 1-based
    actual: str
    expected: str


@dataclass
class NumberingResult:
    """Result of repairing document numbering."""

    fixed_text: str
    lines_changed: int
    changes: list[NumberingChange] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.lines_changed > 0


@dataclass
class _ListRun:
    """An open run of ordered list items at one indentation."""

    indent: int
    style: MarkerStyle
    count: int = 0


def _style_for(kind: LineKind) -> MarkerStyle:
    if kind is LineKind.NUMBERED_LIST:
        return "numeric"
    if kind is LineKind.ROMAN_LIST:
        return "roman"
    return "letter"


def _continues(run: _ListRun, kind: LineKind, marker: str) -> bool:
    """Whether an item at the run's indentation belongs to the run."""
    style = _style_for(kind)
    if style == run.style:
        return True
    # "i.", "v." and "x." are roman by precedence but are letters inside a lettered run
    return run.style == "letter" and kind is LineKind.ROMAN_LIST and len(marker) == 1


class NumberingEngine:
    """Rewrites numbered sections and ordered list runs to 1..N sequences.

    Numbered section headers are renumbered hierarchically across the whole
    document (1., 1.1., 1.2., 2.). Indented ordered list items form runs,
    one per indentation level, and each run restarts at 1 in the marker style
    of its first item. Blank lines and indented continuation lines keep a run
    open; comments, unindented prose and section headers close it. Table of
    contents entries are never touched.
    """

    def fix(self, content: str) -> NumberingResult:
        """Repair numbering in a document.

        Returns:
            NumberingResult with the fixed text and the number of lines whose
            label actually changed.
        """
        require_text(content, "fix_numbering")
        lines, newline = split_lines(content)
        tokens, _ = scan(lines)

        fixed = list(lines)
        section_counters: list[int] = []
        runs: list[_ListRun] = []

        for token in tokens:
            kind = token.kind
            line = token.text

            if kind is LineKind.NUMBERED_SECTION:
                fixed[token.index] = self._renumber_section(line, section_counters)
                runs.clear()
            elif kind.is_section:
                runs.clear()
            elif kind.is_ordered_list:
                fixed[token.index] = self._renumber_item(line, kind, runs)
            elif kind is LineKind.BULLET_LIST:
                indent = len(line) - len(line.lstrip())
                while runs and runs[-1].indent >= indent:
                    runs.pop()
            elif kind is LineKind.BLANK:
                continue
            elif kind in (LineKind.COMMENT, LineKind.TOC, LineKind.TITLE, LineKind.RULE):
                runs.clear()
            elif not line[:1].isspace():
                runs.clear()

        changes = [
            NumberingChange(
                line_number=i + 1,
                actual=self._label(before),
                expected=self._label(after),
            )
            for i, (before, after) in enumerate(zip(lines, fixed, strict=True))
            if before != after
        ]
        if changes:
            logger.debug("Renumbered %d lines", len(changes))

        return NumberingResult(
            fixed_text=join_lines(fixed, newline),
            lines_changed=len(changes),
            changes=changes,
        )

    def _renumber_section(self, line: str, counters: list[int]) -> str:
        """Give a numbered section header the next number at its level."""
        match = NUMBERED_SECTION_PATTERN.match(line)
        if match is None:
            return line

        prefix = match.group(1)
        level = prefix.count(".") + 1

        del counters[level:]
        while len(counters) < level:
            counters.append(0)
        # A subsection without a parent header hangs under parent 1
        for parent in range(level - 1):
            if counters[parent] == 0:
                counters[parent] = 1
        counters[level - 1] += 1

        expected = ".".join(str(c) for c in counters)
        return expected + line[len(prefix) :]

    def _renumber_item(self, line: str, kind: LineKind, runs: list[_ListRun]) -> str:
        """Give an ordered list item the next marker of its run."""
        match = ORDERED_MARKER_PATTERN.match(line)
        if match is None:
            return line

        indentation, marker = match.groups()
        indent = len(indentation)

        while runs and runs[-1].indent > indent:
            runs.pop()
        if runs and runs[-1].indent == indent and not _continues(runs[-1], kind, marker):
            runs.pop()
        if not runs or runs[-1].indent < indent:
            runs.append(_ListRun(indent=indent, style=_style_for(kind)))

        run = runs[-1]
        run.count += 1
        new_marker = render_marker(run.style, run.count, marker)
        return f"{indentation}{new_marker}." + line[match.end() :]

    @staticmethod
    def _label(line: str) -> str:
        match = NUMBERED_SECTION_PATTERN.match(line) or ORDERED_MARKER_PATTERN.match(line)
        if match is None:
            return line.strip()
        return match.group(1).strip() if match.re is NUMBERED_SECTION_PATTERN else match.group(2)
