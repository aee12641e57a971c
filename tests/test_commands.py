"""Tests for the txxt command layer."""

import tempfile
from pathlib import Path

from txxt.commands import TxxtAction, TxxtExecutor, TxxtObservation
from txxt.config import FilesConfig, FormatConfig, TxxtConfig


class TestTxxtExecutor:
    """Test the txxt command executor."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.executor = TxxtExecutor(self.temp_dir)

    def teardown_method(self):
        """Clean up test fixtures."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def write(self, name: str, content: str) -> Path:
        path = self.temp_dir / name
        path.write_bytes(content.encode("utf-8"))
        return path

    def test_format_writes_file(self):
        path = self.write("doc.txxt", "Author     John Doe\n")

        observation = self.executor.execute(TxxtAction(command="format", file="doc.txxt"))

        assert observation.result == "success"
        assert observation.changed is True
        assert observation.written is True
        assert path.read_text() == "Author        John Doe\n"

    def test_format_dry_run(self):
        path = self.write("doc.txxt", "Author     John Doe\n")

        observation = self.executor.execute(
            TxxtAction(command="format", file="doc.txxt", dry_run=True)
        )

        assert observation.changed is True
        assert observation.written is False
        assert observation.content == "Author        John Doe\n"
        assert path.read_text() == "Author     John Doe\n"

    def test_unchanged_file_not_written(self):
        self.write("doc.txxt", "1. Intro\n\nText.\n")

        observation = self.executor.execute(TxxtAction(command="format", file="doc.txxt"))

        assert observation.changed is False
        assert observation.written is False

    def test_crlf_preserved_on_write(self):
        path = self.write("doc.txxt", "Author     John Doe\r\n")

        self.executor.execute(TxxtAction(command="format", file="doc.txxt"))

        assert path.read_bytes() == b"Author        John Doe\r\n"

    def test_full_format(self):
        path = self.write("doc.txxt", "1. Intro\nSee [2].\n\n[2] Note\n")

        observation = self.executor.execute(TxxtAction(command="full_format", file="doc.txxt"))

        assert observation.result == "success"
        content = path.read_text()
        assert "TABLE OF CONTENTS" in content
        assert "[1] Note" in content

    def test_toc(self):
        path = self.write("doc.txxt", "1. Intro\n\nText.\n\n2. Design\n")

        observation = self.executor.execute(TxxtAction(command="toc", file="doc.txxt"))

        assert observation.result == "success"
        assert observation.toc_action == "created"
        assert observation.toc_entries == 2
        assert path.read_text().count("TABLE OF CONTENTS") == 1

    def test_toc_without_sections(self):
        path = self.write("doc.txxt", "Only prose.\n")

        observation = self.executor.execute(TxxtAction(command="toc", file="doc.txxt"))

        assert observation.result == "warning"
        assert observation.is_error is False
        assert observation.error_code == "no_structure_found"
        assert observation.written is False
        assert path.read_text() == "Only prose.\n"

    def test_footnotes(self):
        path = self.write("doc.txxt", "A [2] B [1]\n\n[2] x\n[1] y\n")

        observation = self.executor.execute(TxxtAction(command="footnotes", file="doc.txxt"))

        assert observation.footnotes == 2
        assert path.read_text() == "A [1] B [2]\n\n[1] x\n[2] y\n"

    def test_numbering(self):
        path = self.write("doc.txxt", "1. A\n\n1. B\n")

        observation = self.executor.execute(TxxtAction(command="numbering", file="doc.txxt"))

        assert observation.lines_changed == 1
        assert path.read_text() == "1. A\n\n2. B\n"

    def test_references(self):
        self.write("other.txxt", "1. Intro\n")
        self.write("doc.txxt", "Text.\nsee: other.txxt#section-1 and see: gone.txxt\n")

        observation = self.executor.execute(TxxtAction(command="references", file="doc.txxt"))

        assert observation.result == "warning"
        assert observation.references_found == 2
        assert observation.references == ["other.txxt#section-1", "gone.txxt"]
        assert observation.diagnostics == [
            {
                "message": "Referenced file not found: gone.txxt",
                "code": "reference_target_missing",
                "severity": "error",
                "line": 2,
                "column": 31,
            }
        ]

    def test_outline(self):
        self.write("doc.txxt", "Doc\n---\n\n1. Intro\n\n1.1. Scope\n\nNOTES\n")

        observation = self.executor.execute(TxxtAction(command="outline", file="doc.txxt"))

        assert observation.document_title == "Doc"
        assert observation.section_structure == [
            {"heading": "1. Intro", "title": "Intro", "kind": "numbered", "level": 1, "line": 4},
            {"heading": "1.1. Scope", "title": "Scope", "kind": "numbered", "level": 2, "line": 6},
            {"heading": "NOTES", "title": "NOTES", "kind": "uppercase", "level": 1, "line": 8},
        ]

    def test_unsupported_extension(self):
        path = self.write("notes.md", "Author     John Doe\n")

        observation = self.executor.execute(TxxtAction(command="format", file="notes.md"))

        assert observation.is_error is True
        assert observation.result == "error"
        assert observation.error_code == "unsupported_document"
        assert path.read_text() == "Author     John Doe\n"

    def test_configured_extension(self):
        config = TxxtConfig(files=FilesConfig(extensions=["md"]))
        executor = TxxtExecutor(self.temp_dir, config)
        self.write("notes.md", "Author     John Doe\n")

        observation = executor.execute(TxxtAction(command="format", file="notes.md"))

        assert observation.is_error is False

    def test_configured_key_width(self):
        config = TxxtConfig(format=FormatConfig(metadata_key_width=8))
        executor = TxxtExecutor(self.temp_dir, config)
        path = self.write("doc.txxt", "Author     John Doe\n")

        executor.execute(TxxtAction(command="format", file="doc.txxt"))

        assert path.read_text() == "Author  John Doe\n"

    def test_missing_file(self):
        observation = self.executor.execute(TxxtAction(command="format", file="nope.txxt"))

        assert observation.is_error is True
        assert "not found" in (observation.message or "")

    def test_path_outside_workspace(self):
        observation = self.executor.execute(
            TxxtAction(command="format", file="../outside.txxt")
        )

        assert observation.is_error is True
        assert "outside workspace" in (observation.message or "")

    def test_callable(self):
        self.write("doc.txxt", "1. Intro\n")
        observation = self.executor(TxxtAction(command="outline", file="doc.txxt"))
        assert observation.command == "outline"


class TestVisualization:
    """Test Rich visualizations of actions and observations."""

    def test_action_visualize(self):
        text = TxxtAction(command="toc", file="doc.txxt").visualize
        assert "Generate Table of Contents" in text.plain
        assert "doc.txxt" in text.plain

    def test_error_visualize(self):
        observation = TxxtObservation(
            command="format", file="x.md", result="error", is_error=True, message="Bad file"
        )
        assert "Bad file" in observation.visualize.plain

    def test_dry_run_visualize(self):
        observation = TxxtObservation(
            command="format", file="d.txxt", result="success", changed=True, written=False
        )
        plain = observation.visualize.plain
        assert "Document formatted" in plain
        assert "(dry run)" in plain

    def test_references_visualize(self):
        observation = TxxtObservation(
            command="references",
            file="d.txxt",
            result="warning",
            references_found=3,
            diagnostics=[{"message": "m", "code": "c", "severity": "error", "line": 1, "column": 1}],
        )
        assert "Checked 3 references (1 problems)" in observation.visualize.plain
