"""Status codes and exceptions shared by the txxt engine and its hosts."""

from enum import Enum


class ErrorCode(Enum):
    """Outcome categories reported by engine operations and commands."""

    UNSUPPORTED_DOCUMENT = "unsupported_document"
    NO_STRUCTURE_FOUND = "no_structure_found"
    MALFORMED_STRUCTURE = "malformed_structure"
    REFERENCE_TARGET_MISSING = "reference_target_missing"
    ANCHOR_MISSING = "anchor_missing"
    REFERENCE_READ_ERROR = "reference_read_error"
    PROCESSING_ERROR = "processing_error"


class TxxtError(Exception):
    """Base class for errors raised by txxt hosts."""

    code: ErrorCode = ErrorCode.PROCESSING_ERROR

    def __init__(self, message: str, code: ErrorCode | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class UnsupportedDocumentError(TxxtError):
    """Raised when a command is asked to process a non-txxt file."""

    code = ErrorCode.UNSUPPORTED_DOCUMENT


def require_text(text: object, operation: str) -> str:
    """Reject invocations that do not pass a document string.

    Args:
        text: The value passed as the document.
        operation: Name of the operation, used in the error message.

    Returns:
        The text, unchanged.
    """
    if not isinstance(text, str):
        raise TypeError(f"{operation} expects document text, got {type(text).__name__}")
    return text
