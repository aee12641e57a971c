"""Command layer for running engine operations against txxt files.

This is the host side of the engine: it owns file access, the document-type
gate and the translation of engine results into observations. The engine
itself never touches files (except reference targets) and never presents
anything.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from rich.text import Text

from txxt.config import TxxtConfig
from txxt.engine import (
    FootnoteEngine,
    FormatEngine,
    NumberingEngine,
    ReferenceEngine,
    SectionIndex,
    TocEngine,
)
from txxt.engine.errors import ErrorCode, TxxtError, UnsupportedDocumentError

logger = logging.getLogger(__name__)

Command = Literal[
    "format",
    "full_format",
    "toc",
    "footnotes",
    "numbering",
    "references",
    "outline",
]

# Command visualization metadata: (icon, style, label)
ACTION_DISPLAY: dict[str, tuple[str, str, str]] = {
    "format": ("🧹 ", "blue", "Format Document"),
    "full_format": ("✨ ", "blue", "Full Formatting"),
    "toc": ("📑 ", "cyan", "Generate Table of Contents"),
    "footnotes": ("🔢 ", "green", "Number Footnotes"),
    "numbering": ("🔢 ", "green", "Fix Numbering"),
    "references": ("🔗 ", "magenta", "Check References"),
    "outline": ("📄 ", "yellow", "Document Outline"),
}


class TxxtAction(BaseModel):
    """A request to run one engine operation on a file."""

    command: Command = Field(
        description=(
            "Command to execute: 'format' reformats, 'full_format' also updates the TOC and "
            "footnotes, 'toc' generates/updates the table of contents, 'footnotes' renumbers "
            "footnotes, 'numbering' repairs list and section numbering, 'references' validates "
            "see: references, 'outline' shows the section structure"
        )
    )
    file: str = Field(description="Path to the txxt file, relative to the workspace")
    dry_run: bool = Field(
        default=False, description="Compute the result without writing the file back"
    )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this action."""
        content = Text()
        icon, style, label = ACTION_DISPLAY[self.command]
        content.append(icon, style=style)
        content.append(label, style=style)
        content.append(f" - {self.file}", style="white")
        return content


class TxxtObservation(BaseModel):
    """Outcome of a TxxtAction."""

    command: Command = Field(description="The command that was executed.")
    file: str = Field(description="Path to the file that was processed.")
    result: Literal["success", "warning", "error"] = Field(
        description="Result of the operation: 'success', 'warning' or 'error'."
    )
    is_error: bool = Field(default=False)
    error_code: str | None = Field(default=None, description="ErrorCode value on failure.")
    message: str | None = Field(default=None, description="Error or status message.")

    changed: bool | None = Field(default=None, description="Whether the document changed.")
    written: bool | None = Field(default=None, description="Whether the file was rewritten.")
    content: str | None = Field(default=None, description="The resulting document text.")

    # Numbering
    lines_changed: int | None = Field(default=None, description="Lines whose label changed.")

    # Footnotes
    footnotes: int | None = Field(default=None, description="Footnote declarations found.")

    # TOC
    toc_action: str | None = Field(
        default=None, description="TOC action: 'created', 'updated' or 'unchanged'."
    )
    toc_entries: int | None = Field(default=None, description="Number of TOC entries.")

    # References
    references_found: int | None = Field(default=None, description="References found.")
    references: list[str] | None = Field(
        default=None, description="Reference targets (path#anchor), in textual order."
    )
    diagnostics: list[dict[str, str | int]] | None = Field(
        default=None, description="Reference problems, in textual order."
    )

    # Outline
    document_title: str | None = Field(default=None, description="Underlined document title.")
    section_structure: list[dict[str, str | int]] | None = Field(
        default=None, description="Sections in document order."
    )

    @classmethod
    def from_error(
        cls, command: Command, file: str, message: str, code: ErrorCode
    ) -> TxxtObservation:
        return cls(
            command=command,
            file=file,
            result="error",
            is_error=True,
            error_code=code.value,
            message=message,
        )

    @property
    def visualize(self) -> Text:
        """Return Rich Text representation of this observation."""
        text = Text()

        if self.is_error:
            text.append("❌ ", style="red bold")
            text.append(self.message or "Error", style="bold red")
            return text

        if self.result == "success":
            text.append("✅ ", style="green bold")
        else:
            text.append("⚠️  ", style="yellow bold")

        if self.command in ("format", "full_format"):
            if self.changed:
                text.append("Document formatted", style="blue")
            else:
                text.append("Document already formatted", style="dim")

        elif self.command == "toc":
            if self.toc_entries == 0:
                text.append(self.message or "No sections found", style="yellow")
            else:
                text.append(
                    f"Table of contents {self.toc_action} ({self.toc_entries} entries)",
                    style="cyan",
                )

        elif self.command == "footnotes":
            if self.footnotes:
                text.append(f"Numbered {self.footnotes} footnotes", style="green")
            else:
                text.append("No footnotes found", style="dim")

        elif self.command == "numbering":
            text.append(f"Fixed numbering on {self.lines_changed} lines", style="green")

        elif self.command == "references":
            problems = len(self.diagnostics or [])
            text.append(f"Checked {self.references_found} references", style="magenta")
            if problems:
                text.append(f" ({problems} problems)", style="yellow")

        elif self.command == "outline":
            text.append(f"Found {len(self.section_structure or [])} sections", style="yellow")
            if self.document_title:
                text.append(f" - Title: {self.document_title}", style="dim")

        if self.changed and self.written is False:
            text.append(" (dry run)", style="dim")

        return text


def read_document(path: Path) -> str:
    """Read a document keeping its newline convention."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def write_document(path: Path, content: str) -> None:
    """Write a document without translating newlines."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


class TxxtExecutor:
    """Executes txxt actions against files in a workspace."""

    def __init__(self, workspace_dir: Path, config: TxxtConfig | None = None):
        """Initialize the executor.

        Args:
            workspace_dir: Path to the workspace directory.
            config: Loaded configuration; defaults apply when omitted.
        """
        self.workspace_dir = workspace_dir
        self.config = config or TxxtConfig()
        self.formatter = FormatEngine(metadata_key_width=self.config.format.metadata_key_width)
        self.toc = TocEngine()
        self.footnotes = FootnoteEngine()
        self.numbering = NumberingEngine()
        self.references = ReferenceEngine()

    def __call__(self, action: TxxtAction) -> TxxtObservation:
        return self.execute(action)

    def execute(self, action: TxxtAction) -> TxxtObservation:
        """Execute an action.

        The reference check runs its own event loop, so this method must not
        be called from inside a running loop.

        Returns:
            Observation with the results.
        """
        try:
            file_path = (self.workspace_dir / action.file).resolve()

            # Prevent path traversal
            if not file_path.is_relative_to(self.workspace_dir.resolve()):
                raise TxxtError(f"Invalid path (outside workspace): {action.file}")

            if not file_path.is_file():
                raise TxxtError(f"File not found: {action.file}")

            if not self.config.files.is_supported(file_path):
                extensions = ", ".join(self.config.files.extensions)
                raise UnsupportedDocumentError(
                    f"Not a txxt document: {action.file} (expected {extensions})"
                )

            try:
                content = read_document(file_path)
            except UnicodeDecodeError as e:
                raise TxxtError(f"Could not read file as UTF-8: {action.file}") from e

            read_only_handlers = {
                "references": self._check_references,
                "outline": self._outline,
            }
            mutating_handlers = {
                "format": self._format,
                "full_format": self._full_format,
                "toc": self._toc,
                "footnotes": self._footnotes,
                "numbering": self._numbering,
            }

            if handler := read_only_handlers.get(action.command):
                return handler(action, content, file_path)

            observation = mutating_handlers[action.command](action, content)
            return self._write_back(action, observation, file_path)

        except TxxtError as e:
            return TxxtObservation.from_error(action.command, action.file, e.message, e.code)
        except OSError as e:
            logger.warning("I/O error running %s on %s: %s", action.command, action.file, e)
            return TxxtObservation.from_error(
                action.command, action.file, f"I/O error: {e}", ErrorCode.PROCESSING_ERROR
            )

    def _write_back(
        self, action: TxxtAction, observation: TxxtObservation, file_path: Path
    ) -> TxxtObservation:
        """Write changed content to disk unless this is a dry run."""
        if observation.changed and not action.dry_run and observation.content is not None:
            write_document(file_path, observation.content)
            observation.written = True
        else:
            observation.written = False
        return observation

    def _format(self, action: TxxtAction, content: str) -> TxxtObservation:
        result = self.formatter.format_document(content)
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            changed=result.was_modified,
            content=result.content,
        )

    def _full_format(self, action: TxxtAction, content: str) -> TxxtObservation:
        result = self.formatter.full_formatting(content)
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            changed=result.was_modified,
            content=result.content,
        )

    def _toc(self, action: TxxtAction, content: str) -> TxxtObservation:
        sections = SectionIndex().parse_content(content).sections
        result = self.toc.apply(content, sections)

        if result.status is ErrorCode.NO_STRUCTURE_FOUND:
            return TxxtObservation(
                command=action.command,
                file=action.file,
                result="warning",
                error_code=result.status.value,
                message="No sections found; table of contents not generated",
                changed=False,
                content=content,
                toc_action=result.action,
                toc_entries=0,
            )

        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            changed=result.changed,
            content=result.content,
            toc_action=result.action,
            toc_entries=result.entries,
        )

    def _footnotes(self, action: TxxtAction, content: str) -> TxxtObservation:
        result = self.footnotes.renumber(content)
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            changed=result.content != content,
            content=result.content,
            footnotes=result.declarations,
        )

    def _numbering(self, action: TxxtAction, content: str) -> TxxtObservation:
        result = self.numbering.fix(content)
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            changed=result.changed,
            content=result.fixed_text,
            lines_changed=result.lines_changed,
        )

    def _check_references(
        self, action: TxxtAction, content: str, file_path: Path
    ) -> TxxtObservation:
        result = asyncio.run(self.references.check(content, file_path.parent))
        diagnostics: list[dict[str, str | int]] = [
            {
                "message": d.message,
                "code": d.code,
                "severity": d.severity,
                "line": d.range.line + 1,  # Convert to 1-based
                "column": d.range.start + 1,
            }
            for d in result.diagnostics
        ]
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success" if result.valid else "warning",
            references_found=result.references_found,
            references=[reference.target for reference in result.references],
            diagnostics=diagnostics,
        )

    def _outline(self, action: TxxtAction, content: str, file_path: Path) -> TxxtObservation:  # noqa: ARG002
        parsed = SectionIndex().parse_content(content)
        structure: list[dict[str, str | int]] = [
            {
                "heading": section.heading,
                "title": section.title,
                "kind": section.kind.value,
                "level": section.level,
                "line": section.line_index + 1,
            }
            for section in parsed.sections
        ]
        return TxxtObservation(
            command=action.command,
            file=action.file,
            result="success",
            document_title=parsed.document_title,
            section_structure=structure,
        )
