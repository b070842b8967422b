"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects into human-readable
    or machine-readable output.

    Attributes:
        output_format: Output style (rust, simple, json)
        color: Enable ANSI color codes (for terminal output)

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.missing_interpolation_arg("name")
        >>> print(formatter.format(diagnostic))
        error[MISSING_INTERPOLATION_ARG]: MissingInterpolationArg(name)
          = help: Pass a value for 'name' when rendering this translation

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        MISSING_INTERPOLATION_ARG: MissingInterpolationArg(name)
    """

    output_format: OutputFormat = OutputFormat.RUST
    color: bool = False

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return json.dumps(self.to_dict(diagnostic), ensure_ascii=False)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics.

        JSON output is a single array; other formats are separated by newlines
        (blank lines for the multi-line rust style).
        """
        items = list(diagnostics)
        if self.output_format == OutputFormat.JSON:
            return json.dumps([self.to_dict(d) for d in items], ensure_ascii=False, indent=2)
        separator = "\n\n" if self.output_format == OutputFormat.RUST else "\n"
        return separator.join(self.format(d) for d in items)

    @staticmethod
    def location(diagnostic: Diagnostic) -> str | None:
        """Render ``path:line:column`` (or whichever parts are known)."""
        if diagnostic.span and diagnostic.source_ref:
            return f"{diagnostic.source_ref}:{diagnostic.span.line}:{diagnostic.span.column}"
        if diagnostic.span:
            return f"line {diagnostic.span.line}, column {diagnostic.span.column}"
        return diagnostic.source_ref

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            warning[DYNAMIC_KEY_IGNORED]: DynamicKeyIgnored: non-literal key argument 'name'
              --> src/app.py:12:5
              = help: Use a string literal, or register the key with --translate
        """
        severity = diagnostic.severity

        if self.color:
            code = "1;31" if severity == "error" else "1;33"  # Bold red / bold yellow
            severity_str = f"\033[{code}m{severity}\033[0m"
        else:
            severity_str = severity

        parts = [f"{severity_str}[{diagnostic.code.name}]: {diagnostic.message}"]

        location = self.location(diagnostic)
        if location:
            parts.append(f"  --> {location}")

        if diagnostic.locale:
            parts.append(f"  = locale: {diagnostic.locale}")

        if diagnostic.hint:
            parts.append(f"  = help: {diagnostic.hint}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            src/app.py:12:5: MISSING_TRANSLATION: Key 'a.b' is used but not defined for 'en'
        """
        location = self.location(diagnostic)
        prefix = f"{location}: " if location else ""
        return f"{prefix}{diagnostic.code.name}: {diagnostic.message}"

    @staticmethod
    def to_dict(diagnostic: Diagnostic) -> dict[str, str | int | None]:
        """Convert a diagnostic to a JSON-ready dict, omitting unset fields."""
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "message": diagnostic.message,
            "severity": diagnostic.severity,
        }

        if diagnostic.span:
            data["line"] = diagnostic.span.line
            data["column"] = diagnostic.span.column
            data["start"] = diagnostic.span.start
            data["end"] = diagnostic.span.end

        if diagnostic.source_ref:
            data["source"] = diagnostic.source_ref

        if diagnostic.key:
            data["key"] = diagnostic.key

        if diagnostic.locale:
            data["locale"] = diagnostic.locale

        if diagnostic.hint:
            data["hint"] = diagnostic.hint

        return data
