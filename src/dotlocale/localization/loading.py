"""Locale document loading from the file system.

Reads every ``*.yml``, ``*.yaml``, ``*.json`` and ``*.toml`` file under a
root directory and deserializes it into LocaleDocument trees, in sorted
relative-path order so that "later files win" merging is reproducible.

Locale of a document:
    ``<root>/en.yml``               -> ``en``   (file stem)
    ``<root>/app.en.yml``           -> ``en``   (last dotted part of the stem)
    ``<root>/en/app.yml``           -> ``en``   (directory directly under root)
    ``_version: 2`` at top level    -> every locale named inside the file

A version 2 document maps dotted keys to ``{locale: text}``::

    _version: 2
    messages.hello:
      en: Hello
      fr: Bonjour

Duplicate mapping keys in YAML and JSON are rejected with
DuplicateKeyInDocumentError, including a YAML key merged in with ``<<``
that the mapping also defines; TOML rejects them itself. YAML keys must be
scalars.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
import tomllib
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import yaml

from dotlocale.constants import DOCUMENT_SUFFIXES, KEY_DELIMITER, VERSION_KEY
from dotlocale.diagnostics import (
    DocumentError,
    DuplicateKeyInDocumentError,
    InvalidKeyError,
    UnsupportedLeafTypeError,
)
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.enums import LoadStatus
from dotlocale.localization.store import (
    DocumentLoadResult,
    LocaleDocument,
    TranslationStore,
)
from dotlocale.localization.types import LocaleId, SourceId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Protocol
    "DocumentLoader",
    # Concrete loader
    "PathDocumentLoader",
    "DocumentSet",
    # Deserialization
    "parse_document",
    "split_multi_locale",
    # Convenience
    "load_store",
]

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate mapping keys and keeps dates as text."""

    # Dates such as "2024-01-01" must stay text: they are translations, not timestamps
    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        # Resolve "<<" merge keys first so merged and explicit keys are checked together
        self.flatten_mapping(node)
        seen: set[Any] = set()
        for key_node, _value_node in node.value:
            if not isinstance(key_node, yaml.ScalarNode):
                line = key_node.start_mark.line + 1
                raise InvalidKeyError(
                    ErrorTemplate.invalid_key(
                        f"<{key_node.id}>", f"complex mapping key at line {line}", str(self.name)
                    ),
                    source_id=str(self.name),
                )
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise DuplicateKeyInDocumentError(
                    ErrorTemplate.duplicate_key(
                        str(key), str(self.name), clash=f"line {key_node.start_mark.line + 1}"
                    ),
                    key=str(key),
                    source_id=str(self.name),
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _reject_duplicate_pairs(source_id: SourceId):  # noqa: ANN202 - json hook factory
    def hook(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in pairs:
            if key in result:
                raise DuplicateKeyInDocumentError(
                    ErrorTemplate.duplicate_key(key, source_id), key=key, source_id=source_id
                )
            result[key] = value
        return result

    return hook


def parse_document(text: str, suffix: str, source_id: SourceId = "") -> object:
    """Deserialize document text by file suffix.

    Args:
        text: File contents
        suffix: ``.yml``, ``.yaml``, ``.json`` or ``.toml``
        source_id: Document identifier for error messages

    Returns:
        The deserialized tree (an empty mapping for an empty YAML file)

    Raises:
        ValueError: Unknown suffix, or JSON/TOML syntax error
        yaml.YAMLError: YAML syntax error
        DuplicateKeyInDocumentError: Duplicate mapping key
    """
    match suffix.lower():
        case ".yml" | ".yaml":
            loader = _UniqueKeyLoader(text)
            loader.name = source_id or "<document>"
            try:
                tree = loader.get_single_data()
            finally:
                loader.dispose()
            return {} if tree is None else tree
        case ".json":
            return json.loads(text, object_pairs_hook=_reject_duplicate_pairs(source_id))
        case ".toml":
            return tomllib.loads(text)
        case _:
            msg = f"Unsupported document type '{suffix}' for '{source_id}'"
            raise ValueError(msg)


def _nest(
    pairs: Iterable[tuple[str, object]], source_id: SourceId
) -> dict[str, object]:
    """Turn ``dotted.key -> value`` pairs into a nested mapping."""
    tree: dict[str, object] = {}
    for key, value in pairs:
        *parents, leaf = key.split(KEY_DELIMITER)
        node: dict[str, object] = tree
        for depth, segment in enumerate(parents):
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                prefix = KEY_DELIMITER.join(parents[: depth + 1])
                raise DuplicateKeyInDocumentError(
                    ErrorTemplate.duplicate_key(key, source_id, clash=f"'{prefix}' is text"),
                    key=key,
                    source_id=source_id,
                )
            node = child
        if leaf in node:
            raise DuplicateKeyInDocumentError(
                ErrorTemplate.duplicate_key(key, source_id), key=key, source_id=source_id
            )
        node[leaf] = value
    return tree


def split_multi_locale(
    tree: Mapping[Any, Any], source_id: SourceId
) -> list[LocaleDocument]:
    """Split a ``_version: 2`` document into one LocaleDocument per locale.

    Locales are returned in first-seen order; keys keep document order.

    Raises:
        UnsupportedLeafTypeError: A key does not map to ``{locale: text}``
        DuplicateKeyInDocumentError: Keys clash once nested (``a`` and ``a.b``)
    """
    per_locale: dict[LocaleId, list[tuple[str, object]]] = {}
    for key, translations in tree.items():
        if key == VERSION_KEY:
            continue
        if not isinstance(translations, Mapping):
            type_name = "null" if translations is None else type(translations).__name__
            raise UnsupportedLeafTypeError(
                ErrorTemplate.unsupported_leaf(str(key), type_name, source_id),
                key=str(key),
                type_name=type_name,
                source_id=source_id,
            )
        for locale, text in translations.items():
            per_locale.setdefault(str(locale), []).append((str(key), text))
    return [
        LocaleDocument(locale, source_id, _nest(pairs, source_id))
        for locale, pairs in per_locale.items()
    ]


def _is_multi_locale(tree: object) -> bool:
    return isinstance(tree, Mapping) and tree.get(VERSION_KEY) == 2


def _without_version(tree: object) -> object:
    """Drop the ``_version`` marker from a version 1 document."""
    if isinstance(tree, Mapping) and VERSION_KEY in tree:
        return {key: value for key, value in tree.items() if key != VERSION_KEY}
    return tree


@dataclass(frozen=True, slots=True)
class DocumentSet:
    """Documents read from disk plus the files that could not be read.

    Attributes:
        documents: Parsed documents in merge order
        failures: ERROR results for unreadable or malformed files
    """

    documents: tuple[LocaleDocument, ...] = ()
    failures: tuple[DocumentLoadResult, ...] = ()

    @property
    def locales(self) -> tuple[LocaleId, ...]:
        """Locales found, in first-seen order."""
        return tuple(dict.fromkeys(document.locale for document in self.documents))


class DocumentLoader(Protocol):
    """Protocol for anything that can produce locale documents.

    This is a Protocol (structural typing) rather than ABC so custom loaders
    (databases, HTTP, in-memory fixtures) need no base class.
    """

    def load(self) -> DocumentSet:
        """Read all documents.

        Returns:
            DocumentSet with parsed documents and per-file failures
        """


@dataclass(frozen=True, slots=True)
class PathDocumentLoader:
    """File system loader for a locale directory tree.

    Example:
        >>> loader = PathDocumentLoader("locales")
        >>> documents = loader.load().documents
        # locales/en.yml, locales/fr/app.yml, locales/app.yml (_version: 2), ...

    Attributes:
        root: Directory holding locale documents
        workers: Threads used to read and parse files (1 = sequential).
            Results are always returned in sorted path order.
    """

    root: Path | str
    workers: int = 1
    _root: Path = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize root path.

        Raises:
            ValueError: If workers is less than 1
        """
        if self.workers < 1:
            msg = f"workers must be >= 1, got {self.workers}"
            raise ValueError(msg)
        object.__setattr__(self, "_root", Path(self.root))

    def paths(self) -> list[Path]:
        """Locale document paths under root, sorted by relative path."""
        if not self._root.is_dir():
            return []
        found = [
            path
            for path in self._root.rglob("*")
            if path.is_file() and path.suffix.lower() in DOCUMENT_SUFFIXES
        ]
        return sorted(found, key=lambda path: path.relative_to(self._root).as_posix())

    def describe_path(self, path: Path) -> SourceId:
        """Human-readable document identifier for diagnostics."""
        return path.as_posix()

    def locale_for(self, path: Path) -> LocaleId:
        """Locale of a version 1 document, from its name or directory."""
        relative = path.relative_to(self._root)
        stem = relative.stem
        if "." in stem:
            return stem.rsplit(".", 1)[1]
        if len(relative.parts) > 1:
            return relative.parts[0]
        return stem

    def read_path(self, path: Path) -> list[LocaleDocument] | DocumentLoadResult:
        """Parse one file into its documents, or an ERROR result."""
        source_id = self.describe_path(path)
        try:
            tree = parse_document(path.read_text(encoding="utf-8"), path.suffix, source_id)
            if _is_multi_locale(tree):
                return split_multi_locale(tree, source_id)  # type: ignore[arg-type]
            return [LocaleDocument(self.locale_for(path), source_id, _without_version(tree))]
        except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError, DocumentError) as e:
            locale = self.locale_for(path)
            logger.error("Failed to read %s: %s", source_id, e)
            return DocumentLoadResult(locale, source_id, LoadStatus.ERROR, error=e)

    def load(self) -> DocumentSet:
        """Read and parse every document under root.

        Unreadable or malformed files are reported in ``failures`` and
        skipped; they never abort the whole load.
        """
        paths = self.paths()
        if self.workers > 1 and len(paths) > 1:
            # map() yields in input order, keeping merge order deterministic
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = list(executor.map(self.read_path, paths))
        else:
            outcomes = [self.read_path(path) for path in paths]

        documents: list[LocaleDocument] = []
        failures: list[DocumentLoadResult] = []
        for outcome in outcomes:
            if isinstance(outcome, DocumentLoadResult):
                failures.append(outcome)
            else:
                documents.extend(outcome)
        logger.info(
            "Read %d document(s) from %s (%d failed)", len(documents), self._root, len(failures)
        )
        return DocumentSet(tuple(documents), tuple(failures))


def load_store(loader: DocumentLoader, *, fail_fast: bool = False) -> TranslationStore:
    """Load documents through ``loader`` and merge them into a store.

    File-level failures from the loader are included in the store's
    ``load_summary`` ahead of the merge results.

    Raises:
        DocumentError: With ``fail_fast``, the first read or merge error
    """
    document_set = loader.load()
    if fail_fast and document_set.failures:
        error = document_set.failures[0].error
        if isinstance(error, DocumentError):
            raise error
        raise DocumentError(
            ErrorTemplate.document_unreadable(document_set.failures[0].source_id, str(error)),
            source_id=document_set.failures[0].source_id,
        ) from error
    return TranslationStore.load(
        document_set.documents, fail_fast=fail_fast, failures=document_set.failures
    )
