"""Position utilities for source text.

Converts character offsets to line/column positions for reporting
call sites found by the key extractor.
"""

from dotlocale.diagnostics.codes import SourceSpan

__all__ = ["column_offset", "line_offset", "span_at"]


def line_offset(source: str, pos: int) -> int:
    """Get 0-based line number from character offset.

    Example:
        >>> source = "line1\\nline2\\nline3"
        >>> line_offset(source, 6)   # Start of line2
        1
    """
    if pos < 0:
        msg = f"Position must be >= 0, got {pos}"
        raise ValueError(msg)
    pos = min(pos, len(source))
    return source.count("\n", 0, pos)


def column_offset(source: str, pos: int) -> int:
    """Get 0-based column number from character offset.

    Example:
        >>> column_offset("hello\\nworld", 8)   # 'r' in "world"
        2
    """
    if pos < 0:
        msg = f"Position must be >= 0, got {pos}"
        raise ValueError(msg)
    pos = min(pos, len(source))
    line_start = source.rfind("\n", 0, pos)
    if line_start == -1:
        return pos
    return pos - line_start - 1


def span_at(source: str, start: int, end: int) -> SourceSpan:
    """Build a 1-indexed SourceSpan for ``source[start:end]``."""
    return SourceSpan(
        start=start,
        end=end,
        line=line_offset(source, start) + 1,
        column=column_offset(source, start) + 1,
    )
