"""Tree flattening for locale documents.

Walks a nested document (mappings, sequences, scalar leaves) depth-first
and yields ``(dotted.key, TranslationValue)`` pairs in document declaration
order. Mapping keys become path segments, sequence items get their
zero-based index as a segment.

Traversal order is deterministic: merge conflicts and extraction diffs
depend on it being reproducible.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence

from dotlocale.constants import KEY_DELIMITER, MAX_DEPTH
from dotlocale.core.depth_guard import DepthGuard
from dotlocale.diagnostics import (
    DuplicateKeyInDocumentError,
    InvalidKeyError,
    UnsupportedLeafTypeError,
)
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.localization.types import Key, LocaleId, SourceId
from dotlocale.localization.values import TranslationValue

__all__ = [
    "flatten",
    "join_key",
    "split_key",
]

logger = logging.getLogger(__name__)


def split_key(key: Key) -> tuple[str, ...]:
    """Split a dotted key into segments, rejecting malformed keys.

    Raises:
        InvalidKeyError: If the key is empty or has an empty segment
    """
    if not key:
        raise InvalidKeyError(ErrorTemplate.invalid_key(key, "key has zero path segments"))
    segments = tuple(key.split(KEY_DELIMITER))
    if any(not segment for segment in segments):
        raise InvalidKeyError(ErrorTemplate.invalid_key(key, "empty path segment"))
    return segments


def join_key(segments: Sequence[str]) -> Key:
    """Join path segments into a dotted key."""
    return KEY_DELIMITER.join(segments)


def _segment(name: object, path: tuple[str, ...], source_id: SourceId) -> str:
    """Validate one mapping key and convert it to a path segment.

    Integer keys (YAML ``1:``) are stringified; booleans, None and other
    types cannot name a path segment.
    """
    if isinstance(name, bool) or not isinstance(name, (str, int)):
        raise InvalidKeyError(
            ErrorTemplate.invalid_key(
                join_key(path), f"mapping key {name!r} is not text", source_id
            ),
            source_id=source_id,
        )
    segment = str(name)
    if not segment:
        raise InvalidKeyError(
            ErrorTemplate.invalid_key(join_key(path), "empty path segment", source_id),
            source_id=source_id,
        )
    if KEY_DELIMITER in segment:
        raise InvalidKeyError(
            ErrorTemplate.invalid_key(
                join_key((*path, segment)),
                f"segment contains the delimiter '{KEY_DELIMITER}'",
                source_id,
            ),
            source_id=source_id,
        )
    return segment


def _is_sequence(node: object) -> bool:
    return isinstance(node, Sequence) and not isinstance(node, (str, bytes, bytearray))


def _walk(
    node: object,
    path: tuple[str, ...],
    guard: DepthGuard,
    source_id: SourceId,
) -> Iterator[tuple[Key, TranslationValue]]:
    if isinstance(node, Mapping):
        with guard:
            seen: set[str] = set()
            for name, child in node.items():
                segment = _segment(name, path, source_id)
                if segment in seen:
                    key = join_key((*path, segment))
                    raise DuplicateKeyInDocumentError(
                        ErrorTemplate.duplicate_key(key, source_id),
                        key=key,
                        source_id=source_id,
                    )
                seen.add(segment)
                yield from _walk(child, (*path, segment), guard, source_id)
        return

    if _is_sequence(node):
        with guard:
            for index, child in enumerate(node):  # type: ignore[arg-type]
                yield from _walk(child, (*path, str(index)), guard, source_id)
        return

    key = join_key(path)
    value = TranslationValue.from_scalar(node)
    if value is None:
        type_name = "null" if node is None else type(node).__name__
        raise UnsupportedLeafTypeError(
            ErrorTemplate.unsupported_leaf(key, type_name, source_id),
            key=key,
            type_name=type_name,
            source_id=source_id,
        )
    yield key, value


def flatten(
    tree: object,
    locale: LocaleId = "",
    source_id: SourceId = "",
    *,
    max_depth: int = MAX_DEPTH,
) -> Iterator[tuple[Key, TranslationValue]]:
    """Lazily flatten a document tree into ordered ``(key, value)`` pairs.

    Args:
        tree: Deserialized document; root must be a mapping or a sequence
        locale: Locale the document belongs to (diagnostics only)
        source_id: Document identifier for error messages
        max_depth: Maximum container nesting

    Yields:
        ``(dotted_key, TranslationValue)`` in document declaration order

    Raises:
        InvalidKeyError: Root is a scalar (zero-segment key) or a mapping key
            is empty, non-text or contains the delimiter
        DuplicateKeyInDocumentError: A path is reached twice
        UnsupportedLeafTypeError: A leaf is null or another unsupported type
        DepthLimitExceededError: Nesting deeper than ``max_depth``

    Example:
        >>> list(flatten({"messages": {"hello": "Hello"}, "n": [1, True]}))
        [('messages.hello', TranslationValue(raw='Hello', kind=<ValueKind.TEXT: 'text'>)),
         ('n.0', ...), ('n.1', ...)]
    """
    if not isinstance(tree, Mapping) and not _is_sequence(tree):
        raise InvalidKeyError(
            ErrorTemplate.invalid_key("", "key has zero path segments", source_id),
            source_id=source_id,
        )
    logger.debug("Flattening %s for locale %s", source_id or "<document>", locale or "?")
    guard = DepthGuard(max_depth=max_depth, source_id=source_id)
    yield from _walk(tree, (), guard, source_id)
