"""Translation store: merged, immutable ``(locale, key) -> text`` mapping.

Builds one store from many flattened locale documents.

Merge rules:
- Documents are folded in the order the caller supplies them.
- A later entry for the same ``(locale, key)`` overwrites the earlier one;
  the overwritten entry is recorded as a Conflict (non-fatal diagnostic).
- A key that is a leaf in one document and a group in another (``a.b``
  versus ``a.b.c`` for the same locale) rejects the later document with
  DuplicateKeyInDocumentError.
- A document that fails to flatten is skipped as a whole; documents
  already merged and documents after it are unaffected.

The store is read-only once ``load`` returns and is safe for concurrent
readers without locking.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from os import PathLike
from types import MappingProxyType
from typing import NamedTuple

from dotlocale.constants import KEY_DELIMITER, MAX_DEPTH
from dotlocale.diagnostics import Diagnostic, DocumentError, DuplicateKeyInDocumentError
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.enums import LoadStatus
from dotlocale.localization.flatten import flatten
from dotlocale.localization.types import Key, LocaleId, SourceId
from dotlocale.localization.values import TranslationValue

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Input
    "LocaleDocument",
    # Store
    "TranslationStore",
    "TranslationEntry",
    # Diagnostics
    "Conflict",
    "DocumentLoadResult",
    "LoadSummary",
]

logger = logging.getLogger(__name__)


class LocaleDocument(NamedTuple):
    """One deserialized document for one locale.

    A NamedTuple so plain ``(locale, source_id, tree)`` tuples are accepted
    wherever documents are expected.

    Attributes:
        locale: Locale the document provides translations for
        source_id: Document identifier for diagnostics (usually a path)
        tree: Nested mapping/sequence/scalar tree
    """

    locale: LocaleId
    source_id: SourceId
    tree: object


@dataclass(frozen=True, slots=True)
class TranslationEntry:
    """A single effective translation.

    Attributes:
        locale: Locale of the translation
        key: Dotted key
        value: Leaf value
        source_id: Document that defined it (diagnostics only)
    """

    locale: LocaleId
    key: Key
    value: TranslationValue
    source_id: SourceId

    @property
    def text(self) -> str:
        """Canonical text of the value."""
        return self.value.text


@dataclass(frozen=True, slots=True)
class Conflict:
    """Two documents defined the same ``(locale, key)``; the later one won.

    Attributes:
        overridden: Entry that lost (earlier document)
        winner: Entry that became effective (later document)
    """

    overridden: TranslationEntry
    winner: TranslationEntry

    @property
    def locale(self) -> LocaleId:
        return self.winner.locale

    @property
    def key(self) -> Key:
        return self.winner.key

    @property
    def diagnostic(self) -> Diagnostic:
        """Warning diagnostic describing the override."""
        return ErrorTemplate.merge_conflict(
            self.locale, self.key, self.winner.source_id, self.overridden.source_id
        )


@dataclass(frozen=True, slots=True)
class DocumentLoadResult:
    """Result of merging a single document.

    Attributes:
        locale: Locale of the document
        source_id: Document identifier
        status: SUCCESS or ERROR
        entry_count: Number of entries the document contributed
        error: Exception if status is ERROR, None otherwise
    """

    locale: LocaleId
    source_id: SourceId
    status: LoadStatus
    entry_count: int = 0
    error: Exception | None = None

    @property
    def is_success(self) -> bool:
        """Check if the document was merged."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the document was rejected."""
        return self.status == LoadStatus.ERROR


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of document load results.

    Attributes:
        results: All individual load results, in merge order
    """

    results: tuple[DocumentLoadResult, ...] = ()

    def __repr__(self) -> str:
        return (
            f"LoadSummary(total={self.total_attempted}, "
            f"ok={self.successful}, "
            f"errors={self.errors})"
        )

    @property
    def total_attempted(self) -> int:
        """Total number of documents seen."""
        return len(self.results)

    @property
    def successful(self) -> int:
        """Number of merged documents."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def errors(self) -> int:
        """Number of rejected documents."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def has_errors(self) -> bool:
        """Check if any document was rejected."""
        return self.errors > 0

    def get_errors(self) -> tuple[DocumentLoadResult, ...]:
        """Get all results with errors."""
        return tuple(r for r in self.results if r.is_error)

    def get_by_locale(self, locale: LocaleId) -> tuple[DocumentLoadResult, ...]:
        """Get all results for a specific locale."""
        return tuple(r for r in self.results if r.locale == locale)


def _prefixes(key: Key) -> Iterator[Key]:
    """Proper prefixes of a dotted key, shortest first (``a.b.c`` -> ``a``, ``a.b``)."""
    index = key.find(KEY_DELIMITER)
    while index != -1:
        yield key[:index]
        index = key.find(KEY_DELIMITER, index + 1)


class _StoreBuilder:
    """Mutable accumulator used while folding documents; never escapes ``load``."""

    __slots__ = ("branches", "conflicts", "entries", "results")

    def __init__(self) -> None:
        self.entries: dict[LocaleId, dict[Key, TranslationEntry]] = {}
        # Every proper prefix of a stored key, per locale (leaf/branch clash detection)
        self.branches: dict[LocaleId, set[Key]] = {}
        self.conflicts: list[Conflict] = []
        self.results: list[DocumentLoadResult] = []

    def _check_structure(
        self, locale: LocaleId, source_id: SourceId, pairs: list[tuple[Key, TranslationValue]]
    ) -> None:
        leaves = self.entries.get(locale, {})
        branches = self.branches.get(locale, set())
        for key, _value in pairs:
            if key in branches:
                raise DuplicateKeyInDocumentError(
                    ErrorTemplate.duplicate_key(
                        key, source_id, clash="already defined as a group of keys"
                    ),
                    key=key,
                    source_id=source_id,
                )
            for prefix in _prefixes(key):
                if prefix in leaves:
                    raise DuplicateKeyInDocumentError(
                        ErrorTemplate.duplicate_key(
                            key,
                            source_id,
                            clash=f"'{prefix}' is already text in '{leaves[prefix].source_id}'",
                        ),
                        key=key,
                        source_id=source_id,
                    )

    def add(self, document: LocaleDocument, max_depth: int) -> None:
        locale, source_id, tree = document
        if not locale:
            msg = f"Locale identifier cannot be empty (document '{source_id}')"
            raise ValueError(msg)

        # Flatten fully before touching the store so a failing document
        # leaves no partial entries behind.
        pairs = list(flatten(tree, locale, source_id, max_depth=max_depth))
        self._check_structure(locale, source_id, pairs)

        leaves = self.entries.setdefault(locale, {})
        branches = self.branches.setdefault(locale, set())
        for key, value in pairs:
            entry = TranslationEntry(locale, key, value, source_id)
            previous = leaves.get(key)
            if previous is not None:
                conflict = Conflict(overridden=previous, winner=entry)
                self.conflicts.append(conflict)
                logger.warning("Translation conflict: %s", conflict.diagnostic.message)
            leaves[key] = entry
            branches.update(_prefixes(key))

        self.results.append(
            DocumentLoadResult(locale, source_id, LoadStatus.SUCCESS, entry_count=len(pairs))
        )
        logger.debug("Merged %d entries for %s from %s", len(pairs), locale, source_id)

    def record_error(self, document: LocaleDocument, error: Exception) -> None:
        self.results.append(
            DocumentLoadResult(document.locale, document.source_id, LoadStatus.ERROR, error=error)
        )
        logger.error("Failed to load document %s: %s", document.source_id, error)


class TranslationStore:
    """Immutable, merged translations for all locales.

    Build with ``TranslationStore.load(documents)``; the constructor is for
    already-merged entries. Lookups never raise for a missing key: ``None``
    is the explicit NotFound result.

    Example:
        >>> store = TranslationStore.load([
        ...     ("en", "en.yml", {"messages": {"hello": "Hello"}}),
        ...     ("fr", "fr.yml", {"messages": {"hello": "Bonjour"}}),
        ... ])
        >>> store.lookup("fr", "messages.hello").text
        'Bonjour'
        >>> store.lookup_with_fallback("de", "messages.hello", ["de", "en"]).text
        'Hello'
        >>> store.lookup("fr", "missing") is None
        True
    """

    __slots__ = ("_conflicts", "_entries", "_load_summary")

    def __init__(
        self,
        entries: Mapping[LocaleId, Mapping[Key, TranslationEntry]] | None = None,
        *,
        conflicts: Iterable[Conflict] = (),
        load_summary: LoadSummary | None = None,
    ) -> None:
        self._entries: Mapping[LocaleId, Mapping[Key, TranslationEntry]] = MappingProxyType(
            {locale: MappingProxyType(dict(keys)) for locale, keys in (entries or {}).items()}
        )
        self._conflicts: tuple[Conflict, ...] = tuple(conflicts)
        self._load_summary = load_summary if load_summary is not None else LoadSummary()

    @classmethod
    def load(
        cls,
        documents: Iterable[LocaleDocument | tuple[LocaleId, SourceId, object]],
        *,
        max_depth: int = MAX_DEPTH,
        fail_fast: bool = False,
        failures: Iterable[DocumentLoadResult] = (),
    ) -> TranslationStore:
        """Flatten and merge documents in the given order.

        Args:
            documents: ``(locale, source_id, tree)`` items; later items win
            max_depth: Maximum nesting accepted per document
            fail_fast: Re-raise the first document error instead of
                recording it in ``load_summary`` and continuing
            failures: Results for documents that could not even be read;
                placed ahead of the merge results in ``load_summary``

        Returns:
            The built store; conflicts and per-document results attached

        Raises:
            DocumentError: Only when ``fail_fast`` is True
            ValueError: A document has an empty locale and ``fail_fast`` is True
        """
        builder = _StoreBuilder()
        builder.results.extend(failures)
        for item in documents:
            document = LocaleDocument(*item)
            try:
                builder.add(document, max_depth)
            except (DocumentError, ValueError) as e:
                if fail_fast:
                    raise
                builder.record_error(document, e)

        store = cls(
            builder.entries,
            conflicts=builder.conflicts,
            load_summary=LoadSummary(tuple(builder.results)),
        )
        logger.info(
            "Loaded %d translations for %d locale(s) from %d document(s) "
            "(%d conflict(s), %d error(s))",
            len(store),
            len(store.locales),
            store.load_summary.total_attempted,
            len(store.conflicts),
            store.load_summary.errors,
        )
        return store

    def __repr__(self) -> str:
        return f"TranslationStore(locales={self.locales!r}, entries={len(self)})"

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._entries.values())

    def __contains__(self, item: object) -> bool:
        """``(locale, key) in store``."""
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        locale, key = item
        return key in self._entries.get(locale, {})

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Locales with at least one loaded document, in first-seen order."""
        return tuple(self._entries)

    @property
    def conflicts(self) -> tuple[Conflict, ...]:
        """Overridden entries detected during load, in merge order."""
        return self._conflicts

    @property
    def load_summary(self) -> LoadSummary:
        """Per-document outcome of the load."""
        return self._load_summary

    @property
    def load_errors(self) -> tuple[DocumentLoadResult, ...]:
        """Documents rejected during load."""
        return self._load_summary.get_errors()

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def keys(self, locale: LocaleId) -> tuple[Key, ...]:
        """Keys defined for ``locale`` in merge order (empty for unknown locales)."""
        return tuple(self._entries.get(locale, {}))

    def entries(self, locale: LocaleId) -> Mapping[Key, TranslationEntry]:
        """Read-only ``key -> entry`` view for ``locale``."""
        return self._entries.get(locale, MappingProxyType({}))

    def all_keys(self) -> tuple[Key, ...]:
        """Union of keys across locales, ordered by first appearance."""
        seen: dict[Key, None] = {}
        for keys in self._entries.values():
            seen.update(dict.fromkeys(keys))
        return tuple(seen)

    def get_entry(self, locale: LocaleId, key: Key) -> TranslationEntry | None:
        """Entry for exactly ``(locale, key)``, or None."""
        return self._entries.get(locale, {}).get(key)

    def lookup(self, locale: LocaleId, key: Key) -> TranslationValue | None:
        """Value for exactly ``(locale, key)``; None is NotFound."""
        entry = self.get_entry(locale, key)
        return entry.value if entry is not None else None

    def find(
        self, locale: LocaleId, key: Key, fallback_chain: Iterable[LocaleId] = ()
    ) -> TranslationEntry | None:
        """First entry for ``key`` along ``[locale, *fallback_chain]``.

        The winning entry's ``locale`` tells which locale satisfied the lookup.
        Values are never merged across locales.
        """
        for candidate in dict.fromkeys((locale, *fallback_chain)):
            entry = self.get_entry(candidate, key)
            if entry is not None:
                return entry
        return None

    def lookup_with_fallback(
        self, locale: LocaleId, key: Key, fallback_chain: Iterable[LocaleId] = ()
    ) -> TranslationValue | None:
        """Value for ``key`` from the first locale that has it.

        Args:
            locale: Requested locale (tried first)
            key: Dotted key
            fallback_chain: Further locales to try, in order; may repeat ``locale``

        Returns:
            The value, or None (NotFound) if every locale lacks the key
        """
        entry = self.find(locale, key, fallback_chain)
        return entry.value if entry is not None else None

    @classmethod
    def from_path(
        cls, root: str | PathLike[str], *, workers: int = 1, fail_fast: bool = False
    ) -> TranslationStore:
        """Load every locale document under ``root``.

        See ``dotlocale.localization.loading.PathDocumentLoader`` for the
        directory layout and file formats.
        """
        from dotlocale.localization.loading import PathDocumentLoader, load_store  # noqa: PLC0415

        return load_store(PathDocumentLoader(root, workers=workers), fail_fast=fail_fast)
