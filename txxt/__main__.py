"""CLI entry point for txxt.

Usage:
    python -m txxt format doc.txxt              # Reformat a document in place
    python -m txxt format --full doc.txxt       # Format, update TOC, number footnotes
    python -m txxt toc doc.txxt                 # Generate or update the TOC
    python -m txxt footnotes doc.txxt           # Renumber footnotes
    python -m txxt numbering doc.txxt           # Fix list and section numbering
    python -m txxt references doc.txxt          # Validate see: references
    python -m txxt outline doc.txxt             # Show the section structure

Or via the installed command:
    txxt format --check doc.txxt                # Exit 1 if the file would change
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from txxt._version import get_full_version_string
from txxt.commands import TxxtAction, TxxtExecutor, TxxtObservation
from txxt.config import load_config

console = Console()

MUTATING_COMMANDS = ("format", "toc", "footnotes", "numbering")


def configure_logging() -> None:
    """Configure logging from LOG_LEVEL (default WARNING), after loading .env."""
    load_dotenv()
    level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def find_git_root(start_path: Path) -> Path:
    """Find the git repository root from a starting path.

    Args:
        start_path: Directory to start searching from

    Returns:
        Path to the git root, or start_path if not found
    """
    current = start_path.resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    return start_path


def print_outline(observation: TxxtObservation) -> None:
    """Print the section structure as a table."""
    table = Table(title=observation.document_title or observation.file)
    table.add_column("Line", justify="right", style="dim")
    table.add_column("Kind")
    table.add_column("Level", justify="right")
    table.add_column("Section")
    for entry in observation.section_structure or []:
        indent = "  " * (int(entry["level"]) - 1)
        table.add_row(
            str(entry["line"]), str(entry["kind"]), str(entry["level"]), f"{indent}{entry['heading']}"
        )
    console.print(table)


def print_diagnostics(observation: TxxtObservation) -> None:
    """Print reference diagnostics, one per line."""
    for diagnostic in observation.diagnostics or []:
        console.print(
            f"[red]✗[/] {observation.file}:{diagnostic['line']}:{diagnostic['column']} "
            f"{diagnostic['message']} [dim]({diagnostic['code']})[/]"
        )


def run_command(
    command: str,
    file: Path,
    *,
    workspace: Path | None = None,
    dry_run: bool = False,
    check: bool = False,
) -> int:
    """Run one txxt command on a file.

    Args:
        command: Command name (see TxxtAction.command)
        file: Path to the document
        workspace: Workspace directory (defaults to the file's git root)
        dry_run: Do not write changes back
        check: Do not write changes back, and fail if the file would change

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    file = file.resolve()
    workspace = workspace.resolve() if workspace else find_git_root(file.parent)
    config = load_config(workspace)

    try:
        relative = file.relative_to(workspace)
    except ValueError:
        console.print(f"[red]Error:[/] {file} is outside workspace {workspace}")
        return 1

    executor = TxxtExecutor(workspace, config)
    action = TxxtAction(command=command, file=str(relative), dry_run=dry_run or check)
    observation = executor.execute(action)

    console.print(observation.visualize)

    if observation.is_error:
        return 1

    if command == "outline":
        print_outline(observation)
    elif command == "references":
        print_diagnostics(observation)
        return 1 if observation.diagnostics else 0

    if check and observation.changed:
        console.print(f"[yellow]{action.file} would be changed.[/]")
        return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="txxt",
        description="txxt - structure tools for RFC-style plain-text documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  txxt format doc.txxt                   Reformat a document in place
  txxt format --full doc.txxt            Also update the TOC and footnotes
  txxt toc -n doc.txxt                   Show what the TOC update would do
  txxt numbering --check doc.txxt        Fail if numbering needs repair
  txxt references doc.txxt               Validate see: references

Configuration:
  Create .txxt/config.toml in your repo to customize behavior:
    [files]
    extensions = [".txxt", ".rfc"]

    [format]
    metadata_key_width = 14
""",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    help_text = {
        "format": "Trim whitespace, align metadata and space section headers",
        "toc": "Generate or update the table of contents",
        "footnotes": "Renumber footnotes in declaration order",
        "numbering": "Repair section and ordered list numbering",
        "references": "Validate see: references against files and sections",
        "outline": "Show the section structure of a document",
    }

    for name, help_line in help_text.items():
        sub = subparsers.add_parser(name, help=help_line)
        sub.add_argument("file", type=Path, help="Path to the txxt document")
        sub.add_argument(
            "--workspace",
            "-w",
            type=Path,
            default=None,
            help="Workspace directory (defaults to git root)",
        )
        if name in MUTATING_COMMANDS:
            sub.add_argument(
                "--dry-run",
                "-n",
                action="store_true",
                help="Show what would change without writing the file",
            )
            sub.add_argument(
                "--check",
                action="store_true",
                help="Exit with status 1 if the file would change (implies --dry-run)",
            )
        if name == "format":
            sub.add_argument(
                "--full",
                action="store_true",
                help="Also update the table of contents and renumber footnotes",
            )

    args = parser.parse_args(argv)

    if args.version:
        console.print(get_full_version_string(), highlight=False)
        return 0

    if args.command is None:
        parser.error("a command is required")

    configure_logging()

    command = args.command
    if command == "format" and args.full:
        command = "full_format"

    return run_command(
        command,
        args.file,
        workspace=args.workspace,
        dry_run=getattr(args, "dry_run", False),
        check=getattr(args, "check", False),
    )


if __name__ == "__main__":
    sys.exit(main())
