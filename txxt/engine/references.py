"""Validation of "see:" cross-document references."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ErrorCode, require_text
from .models import Diagnostic, DocumentReference, Section, SectionKind, TextRange
from .sections import find_sections
from .text import column_at, line_index_at

logger = logging.getLogger(__name__)

DOCUMENT_REFERENCE_PATTERN = re.compile(r"see:\s+([^#\s]+)(?:#([\w-]+))?")
NUMERIC_SEGMENT_PATTERN = re.compile(r"^[0-9]+$")

FileExists = Callable[[Path], Awaitable[bool]]
ReadText = Callable[[Path], Awaitable[str]]


async def path_is_file(path: Path) -> bool:
    """Default file-exists check, run off the event loop."""
    return await asyncio.to_thread(path.is_file)


async def read_utf8(path: Path) -> str:
    """Default file reader, run off the event loop."""
    return await asyncio.to_thread(path.read_text, encoding="utf-8")


@dataclass
class ReferenceCheckResult:
    """Result of checking the references of a document."""

    diagnostics: list[Diagnostic]
    references_found: int
    references: list[DocumentReference] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.diagnostics


def find_references(content: str) -> list[DocumentReference]:
    """Find "see: path#anchor" references in textual order."""
    references = []
    for match in DOCUMENT_REFERENCE_PATTERN.finditer(content):
        start = column_at(content, match.start())
        references.append(
            DocumentReference(
                target_path=match.group(1),
                anchor=match.group(2),
                range=TextRange(
                    line=line_index_at(content, match.start()),
                    start=start,
                    end=start + len(match.group(0)),
                ),
            )
        )
    return references


def anchor_matches(sections: list[Section], anchor: str) -> bool:
    """Check whether an anchor slug names one of the given sections.

    Tried in order, first match wins:
    1. numeric segments joined by dots equal a numbered section prefix
       ("section-1-2" matches "1.2. ...")
    2. the words upper-cased equal an uppercase section ("intro-text" matches
       "INTRO TEXT")
    3. the words title-cased equal an alternative section (": Intro Text")
    4. the words appear, ignoring case, in any section header
    """
    parts = [part for part in anchor.split("-") if part]
    if not parts:
        return False

    numeric = [part for part in parts if NUMERIC_SEGMENT_PATTERN.match(part)]
    if numeric:
        prefix = ".".join(numeric)
        if any(
            s.kind is SectionKind.NUMBERED and s.numbering_prefix == prefix for s in sections
        ):
            return True

    uppercase = " ".join(parts).upper()
    if any(s.kind is SectionKind.UPPERCASE and s.title == uppercase for s in sections):
        return True

    title_case = " ".join(part[:1].upper() + part[1:] for part in parts)
    if any(s.kind is SectionKind.ALTERNATIVE and s.title == title_case for s in sections):
        return True

    needle = " ".join(parts).lower()
    return any(needle in s.heading.lower() for s in sections)


class ReferenceEngine:
    """Validates references against the filesystem and target sections.

    File access goes through two async callables so a host can supply its own
    file-exists check and file reader.
    """

    def __init__(self, exists: FileExists | None = None, read_text: ReadText | None = None):
        self._exists = exists or path_is_file
        self._read_text = read_text or read_utf8

    async def check(self, content: str, base_dir: str | Path) -> ReferenceCheckResult:
        """Validate every reference in a document.

        References are resolved concurrently; diagnostics keep the textual
        order of the references. Problems are reported as diagnostics, never
        raised.

        Args:
            content: The document text
            base_dir: Directory that relative reference paths resolve against

        Returns:
            ReferenceCheckResult with diagnostics and the reference count.
        """
        require_text(content, "check_references")
        references = find_references(content)
        base = Path(base_dir)

        results = await asyncio.gather(*(self.validate(ref, base) for ref in references))
        diagnostics = [d for d in results if d is not None]
        logger.debug(
            "Checked %d references, %d diagnostics", len(references), len(diagnostics)
        )
        return ReferenceCheckResult(
            diagnostics=diagnostics,
            references_found=len(references),
            references=references,
        )

    async def validate(self, reference: DocumentReference, base_dir: Path) -> Diagnostic | None:
        """Validate one reference.

        Returns:
            A Diagnostic if the target or its anchor is missing, else None.
        """
        target = base_dir / reference.target_path

        try:
            exists = await self._exists(target)
        except OSError as e:
            logger.warning("Could not check reference target %s: %s", target, e)
            return Diagnostic(
                message=f"Error checking target file: {e}",
                range=reference.range,
                code=ErrorCode.REFERENCE_READ_ERROR.value,
            )

        if not exists:
            return Diagnostic(
                message=f"Referenced file not found: {reference.target_path}",
                range=reference.range,
                code=ErrorCode.REFERENCE_TARGET_MISSING.value,
            )

        if not reference.anchor:
            return None

        try:
            target_content = await self._read_text(target)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read reference target %s: %s", target, e)
            return Diagnostic(
                message=f"Error reading target file: {e}",
                range=reference.range,
                code=ErrorCode.REFERENCE_READ_ERROR.value,
            )

        if not anchor_matches(find_sections(target_content), reference.anchor):
            return Diagnostic(
                message=f"Anchor not found in target file: #{reference.anchor}",
                range=reference.range,
                code=ErrorCode.ANCHOR_MISSING.value,
            )

        return None
