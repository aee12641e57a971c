"""Section index for txxt documents."""

from dataclasses import dataclass

from .classifier import (
    ALTERNATIVE_SECTION_PATTERN,
    NUMBERED_SECTION_PATTERN,
    ClassifiedLine,
    LineKind,
    tokenize,
)
from .errors import require_text
from .models import Section, SectionKind, TocBlock
from .text import split_lines
from .toc import locate_toc


@dataclass
class ParseResult:
    """Result of indexing a txxt document."""

    sections: list[Section]
    document_title: str | None
    toc_block: TocBlock | None
    tokens: list[ClassifiedLine]
    lines: list[str]


def scan(lines: list[str]) -> tuple[list[ClassifiedLine], TocBlock | None]:
    """Tokenize document lines, tagging an existing table of contents.

    Returns:
        Tuple of (tokens, toc_block or None).
    """
    toc_block = locate_toc(lines)
    return tokenize(lines, toc_block), toc_block


def section_from_token(token: ClassifiedLine) -> Section | None:
    """Build a Section from a classified section line, or None."""
    if token.kind is LineKind.NUMBERED_SECTION:
        match = NUMBERED_SECTION_PATTERN.match(token.text)
        if match is None:
            return None
        prefix, title = match.groups()
        return Section(
            title=title.rstrip(),
            level=prefix.count(".") + 1,
            line_index=token.index,
            kind=SectionKind.NUMBERED,
            numbering_prefix=prefix,
        )

    if token.kind is LineKind.UPPERCASE_SECTION:
        return Section(
            title=token.text.strip(),
            level=1,
            line_index=token.index,
            kind=SectionKind.UPPERCASE,
        )

    if token.kind is LineKind.ALTERNATIVE_SECTION:
        match = ALTERNATIVE_SECTION_PATTERN.match(token.text)
        if match is None:
            return None
        return Section(
            title=match.group(1).rstrip(),
            level=1,
            line_index=token.index,
            kind=SectionKind.ALTERNATIVE,
        )

    return None


class SectionIndex:
    """Scans a document into an ordered list of sections."""

    def parse_content(self, content: str) -> ParseResult:
        """Index the sections of a document.

        Lines of an existing table of contents and underlined titles are not
        sections. If a malformed document ever yields two sections on one
        line, the first one (in classifier precedence) is kept.

        Returns:
            ParseResult with sections sorted by line index.
        """
        require_text(content, "find_sections")
        lines, _ = split_lines(content)
        tokens, toc_block = scan(lines)

        by_line: dict[int, Section] = {}
        document_title: str | None = None
        for token in tokens:
            if token.kind is LineKind.TITLE and document_title is None:
                document_title = token.text.strip()
            section = section_from_token(token)
            if section is not None:
                by_line.setdefault(section.line_index, section)

        return ParseResult(
            sections=[by_line[i] for i in sorted(by_line)],
            document_title=document_title,
            toc_block=toc_block,
            tokens=tokens,
            lines=lines,
        )


def find_sections(text: str) -> list[Section]:
    """Return the sections of a document in line order."""
    return SectionIndex().parse_content(text).sections
