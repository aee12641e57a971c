"""Line splitting helpers that keep a document's newline convention."""

CRLF = "\r\n"
LF = "\n"


def detect_newline(text: str) -> str:
    """Return the newline sequence used by a document ("\\r\\n" or "\\n")."""
    return CRLF if CRLF in text else LF


def split_lines(text: str) -> tuple[list[str], str]:
    """Split text into lines without newline characters.

    A trailing newline produces a final empty string, so joining the lines
    back with the returned newline reproduces the original text.

    Returns:
        Tuple of (lines, newline).
    """
    newline = detect_newline(text)
    return text.split(newline), newline


def join_lines(lines: list[str], newline: str = LF) -> str:
    """Join lines produced by split_lines back into a document."""
    return newline.join(lines)


def line_index_at(text: str, offset: int) -> int:
    """Zero-based line number of a character offset (counts preceding "\\n")."""
    return text.count(LF, 0, offset)


def column_at(text: str, offset: int) -> int:
    """Zero-based column of a character offset within its line."""
    return offset - (text.rfind(LF, 0, offset) + 1)
