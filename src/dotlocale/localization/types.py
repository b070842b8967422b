"""Type aliases for the localization domain.

Provides semantic type aliases used throughout the localization and
extraction packages and by user code when annotating call sites.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping, Sequence

__all__ = [
    "DocumentTree",
    "Key",
    "LocaleId",
    "SourceId",
]

type LocaleId = str
"""Case-sensitive locale identifier (e.g., 'en', 'pt-BR', 'zh-Hant-TW')."""

type Key = str
"""Dot-joined translation key (e.g., 'messages.hello', 'menu.items.0')."""

type SourceId = str
"""Identifier of a locale document, used for diagnostics only (e.g., 'locales/en.yml')."""

type DocumentTree = Mapping[object, object] | Sequence[object]
"""Deserialized document: nested mappings/sequences with scalar leaves."""
