"""Shared constants for dotlocale.

This module provides centralized configuration constants used across
the localization and extraction packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Key structure: Path delimiter and reserved document keys
- Depth limits: Recursion protection for document flattening
- Placeholder markers: Default interpolation syntax
- Extraction: Default call markers and scanned file types
- Minification: Short-code generation defaults

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Key structure
    "KEY_DELIMITER",
    "NAMESPACE_SEPARATOR",
    "VERSION_KEY",
    # Depth limits
    "MAX_DEPTH",
    # Placeholder markers
    "DEFAULT_PLACEHOLDER_OPEN",
    "DEFAULT_PLACEHOLDER_CLOSE",
    # Locales
    "DEFAULT_LOCALE",
    "DEFAULT_LOAD_PATH",
    "DOCUMENT_SUFFIXES",
    # Extraction
    "DEFAULT_CALL_MARKERS",
    "DEFAULT_SOURCE_SUFFIXES",
    "EXCLUDED_SOURCE_DIRS",
    "TODO_FILENAME",
    # Minification
    "DEFAULT_MINIFY_LENGTH",
    "DEFAULT_MINIFY_PREFIX",
    "DEFAULT_MINIFY_THRESHOLD",
    "MAX_MINIFY_ATTEMPTS",
    "MAX_MINIFY_LENGTH",
]

# ============================================================================
# KEY STRUCTURE
# ============================================================================

# Separator between path segments of a flattened key ("messages.hello").
KEY_DELIMITER: str = "."

# Separator between a literal namespace and the key at a call site ("ns:key").
NAMESPACE_SEPARATOR: str = ":"

# Top-level key marking a multi-locale ("version 2") document.
VERSION_KEY: str = "_version"

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting depth accepted while flattening a document tree.
# Real translation files rarely exceed 5 levels; 100 levels is malformed input.
MAX_DEPTH: int = 100

# ============================================================================
# PLACEHOLDER MARKERS
# ============================================================================

DEFAULT_PLACEHOLDER_OPEN: str = "%{"
DEFAULT_PLACEHOLDER_CLOSE: str = "}"

# ============================================================================
# LOCALES
# ============================================================================

DEFAULT_LOCALE: str = "en"

# Directory (relative to the project root) holding locale documents.
DEFAULT_LOAD_PATH: str = "locales"

# File suffixes recognized as locale documents, in no particular order.
DOCUMENT_SUFFIXES: frozenset[str] = frozenset({".yml", ".yaml", ".json", ".toml"})

# ============================================================================
# EXTRACTION
# ============================================================================

DEFAULT_CALL_MARKERS: frozenset[str] = frozenset({"t", "tr", "translate"})

# Source file suffixes scanned by default.
DEFAULT_SOURCE_SUFFIXES: frozenset[str] = frozenset(
    {".py", ".pyi", ".rs", ".js", ".jsx", ".ts", ".tsx", ".html", ".jinja", ".j2"}
)

# Directories never descended into when scanning sources.
EXCLUDED_SOURCE_DIRS: frozenset[str] = frozenset(
    {".git", ".hg", ".venv", "venv", "node_modules", "__pycache__", "target", "build", "dist"}
)

# Output of the "extract" command when --write-todo is given.
TODO_FILENAME: str = "TODO.yml"

# ============================================================================
# MINIFICATION
# ============================================================================

# Length of the generated short code (excluding prefix).
DEFAULT_MINIFY_LENGTH: int = 24

# Base62 digits of a SHA-256 digest; codes are zero-padded to this width.
MAX_MINIFY_LENGTH: int = 43

DEFAULT_MINIFY_PREFIX: str = ""

# Keys whose length is <= threshold are kept verbatim. 0 minifies every key.
DEFAULT_MINIFY_THRESHOLD: int = 0

# Collision probes per key before MinificationCollisionError.
MAX_MINIFY_ATTEMPTS: int = 16
