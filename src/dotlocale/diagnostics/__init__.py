"""Diagnostic system for dotlocale errors.

Provides structured error diagnostics with codes, spans and hints.
Inspired by Rust compiler diagnostics.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan
from .errors import (
    ConfigError,
    DepthLimitExceededError,
    DocumentError,
    DotLocaleError,
    DuplicateKeyInDocumentError,
    InterpolationError,
    InvalidKeyError,
    KeyNotFoundError,
    MinificationCollisionError,
    MissingInterpolationArgError,
    UnsupportedLeafTypeError,
    UnterminatedPlaceholderError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "ConfigError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DocumentError",
    "DotLocaleError",
    "DuplicateKeyInDocumentError",
    "ErrorTemplate",
    "InterpolationError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "MinificationCollisionError",
    "MissingInterpolationArgError",
    "OutputFormat",
    "SourceSpan",
    "UnsupportedLeafTypeError",
    "UnterminatedPlaceholderError",
]
