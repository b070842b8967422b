"""dotlocale - key-based translations with locale fallback and key extraction.

Resolves translated text by dotted key and locale from nested, per-locale
YAML/JSON/TOML documents, and statically finds the keys a codebase uses
to report missing and unused translations.

Public API:
    Localization - Lookup with fallback chain and ``%{name}`` interpolation
    LocalizationConfig - Default locale, fallbacks, markers, minification
    TranslationStore - Immutable merged ``(locale, key) -> value`` mapping
    render - Placeholder interpolation
    run_extraction - Extract keys from sources and diff against the store

Exceptions:
    DotLocaleError - Base exception class
    DocumentError - Malformed locale document
    InterpolationError - Missing argument or malformed placeholder
    KeyNotFoundError - Lookup miss in strict mode

Submodules:
    dotlocale.localization - Flattening, store, interpolation, loading
    dotlocale.extraction - Key extraction, minification, reports, writers
    dotlocale.diagnostics - Error types, codes and formatters
    dotlocale.cli - ``dotlocale`` console script
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .config import LocalizationConfig, MinifyConfig
from .diagnostics import (
    DocumentError,
    DotLocaleError,
    InterpolationError,
    KeyNotFoundError,
)
from .extraction import ExtractionReport, run_extraction
from .localization import PlaceholderMarkers, TranslationStore, render
from .localization.orchestrator import Localization

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    __version__ = _get_version("dotlocale")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DocumentError",
    "DotLocaleError",
    "ExtractionReport",
    "InterpolationError",
    "KeyNotFoundError",
    "Localization",
    "LocalizationConfig",
    "MinifyConfig",
    "PlaceholderMarkers",
    "TranslationStore",
    "__version__",
    "render",
    "run_extraction",
]
