"""Translation resolution engine.

Submodules:
    types        - PEP 695 type aliases (LocaleId, Key, SourceId, DocumentTree)
    values       - TranslationValue tagged scalar and canonical text rendering
    flatten      - Nested document -> ordered (dotted.key, value) pairs
    store        - TranslationStore merge, conflicts, fallback lookup
    interpolate  - Placeholder rendering (``%{name}``)
    fallback     - Fallback chain construction, FallbackInfo
    loading      - DocumentLoader protocol, PathDocumentLoader
    orchestrator - Localization lookup API (imported from ``dotlocale``)

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from dotlocale.enums import LoadStatus, ValueKind
from dotlocale.localization.fallback import FallbackInfo, build_fallback_chain, locale_parents
from dotlocale.localization.flatten import flatten, join_key, split_key
from dotlocale.localization.interpolate import (
    DEFAULT_MARKERS,
    Interpolator,
    PlaceholderMarkers,
    placeholders,
    render,
)
from dotlocale.localization.loading import (
    DocumentLoader,
    DocumentSet,
    PathDocumentLoader,
    load_store,
)
from dotlocale.localization.store import (
    Conflict,
    DocumentLoadResult,
    LoadSummary,
    LocaleDocument,
    TranslationEntry,
    TranslationStore,
)
from dotlocale.localization.types import DocumentTree, Key, LocaleId, SourceId
from dotlocale.localization.values import TranslationValue, coerce_text

__all__ = [
    # Store
    "TranslationStore",
    "TranslationEntry",
    "LocaleDocument",
    "Conflict",
    # Flattening
    "flatten",
    "split_key",
    "join_key",
    "TranslationValue",
    "ValueKind",
    "coerce_text",
    # Interpolation
    "Interpolator",
    "PlaceholderMarkers",
    "DEFAULT_MARKERS",
    "render",
    "placeholders",
    # Fallback
    "build_fallback_chain",
    "locale_parents",
    "FallbackInfo",
    # Loading
    "DocumentLoader",
    "DocumentSet",
    "PathDocumentLoader",
    "load_store",
    "LoadStatus",
    "LoadSummary",
    "DocumentLoadResult",
    # Type aliases
    "DocumentTree",
    "Key",
    "LocaleId",
    "SourceId",
]
