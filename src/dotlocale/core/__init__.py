"""Core utilities shared by the localization and extraction layers.

Exports:
    DepthGuard: Context manager for recursion depth limiting
    span_at: Character offset to 1-indexed SourceSpan conversion

Python 3.13+.
"""

from .depth_guard import DepthGuard
from .position import span_at

__all__ = ["DepthGuard", "span_at"]
