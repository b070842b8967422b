"""Diagnostic codes and data structures.

Defines error codes, source spans, and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Lookup errors (missing keys, missing locales)
        2000-2999: Interpolation errors (placeholder substitution)
        3000-3999: Document errors (flattening and merging locale documents)
        4000-4999: Extraction errors and warnings (source scanning, minification)
        5000-5999: Configuration errors
    """

    # Lookup errors (1000-1999)
    KEY_NOT_FOUND = 1001

    # Interpolation errors (2000-2999)
    MISSING_INTERPOLATION_ARG = 2001
    UNTERMINATED_PLACEHOLDER = 2002

    # Document errors (3000-3999)
    DUPLICATE_KEY_IN_DOCUMENT = 3001
    UNSUPPORTED_LEAF_TYPE = 3002
    INVALID_KEY = 3003
    MAX_DEPTH_EXCEEDED = 3004
    DOCUMENT_UNREADABLE = 3005
    MERGE_CONFLICT = 3006

    # Extraction (4000-4999)
    DYNAMIC_KEY_IGNORED = 4001
    MINIFICATION_COLLISION = 4002
    MISSING_TRANSLATION = 4003
    UNUSED_TRANSLATION = 4004

    # Configuration (5000-5999)
    INVALID_CONFIG = 5001


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes. For multi-byte UTF-8 characters, character offset differs
        from byte offset.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants.

        Raises:
            ValueError: If start is negative, end precedes start, or line /
                column is less than 1 (both are 1-indexed).
        """
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1:
            msg = f"SourceSpan.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)
        if self.column < 1:
            msg = f"SourceSpan.column must be >= 1 (1-indexed), got {self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools (CI annotations, editors).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None when not tied to a text position)
        hint: Suggestion for fixing the error
        source_ref: File (or document id) the diagnostic refers to
        key: Translation key involved, if any
        locale: Locale involved, if any
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    source_ref: str | None = None
    key: str | None = None
    locale: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[DUPLICATE_KEY_IN_DOCUMENT]: Key 'menu.title' defined twice
              --> locales/en.yml
              = help: Remove one of the definitions

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
