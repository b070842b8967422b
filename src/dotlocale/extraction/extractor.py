"""Static key extraction from source text.

Finds translation-request call sites by text pattern, not by parsing, and
records the literal key each one asks for::

    t("messages.hello")            -> messages.hello
    _.tr('menu.items.0', count=3)  -> menu.items.0
    t!("admin:users.title")        -> admin.users.title  (namespace "admin")
    translate(f"errors.{code}")    -> DynamicKeyIgnored warning

A call site is a configured marker name not preceded by an identifier
character, an optional ``!`` (macro form), ``(``, then a quoted literal
(``"``, ``'`` or backtick, optionally ``r``/``u`` prefixed, triple quotes
allowed) followed by ``,`` or ``)``. Anything else in key position is
dynamic and cannot be resolved statically.

Being text based, this also matches call-shaped text in comments and
strings, and never matches keys built at runtime.

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from dotlocale.constants import DEFAULT_CALL_MARKERS, KEY_DELIMITER, NAMESPACE_SEPARATOR
from dotlocale.core.position import span_at
from dotlocale.diagnostics import Diagnostic
from dotlocale.diagnostics.codes import SourceSpan
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.localization.types import Key

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Results
    "SiteRef",
    "ExtractedKey",
    "ExtractionWarning",
    "ExtractionResult",
    # Scanning
    "KeyExtractor",
    "extract",
]

logger = logging.getLogger(__name__)

_QUOTES = "\"'`"
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "'": "'", "`": "`"}
_SNIPPET_LENGTH = 40


@dataclass(frozen=True, slots=True, order=True)
class SiteRef:
    """Where a key was requested.

    Ordering is ``(path, offset)``: the global, deterministic traversal
    order used for minification numbering.

    Attributes:
        path: Source file
        offset: Character offset of the marker (0-indexed)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    path: str
    offset: int
    line: int = field(compare=False)
    column: int = field(compare=False)

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    @property
    def span(self) -> SourceSpan:
        """Zero-width SourceSpan at the marker, for diagnostics."""
        return SourceSpan(start=self.offset, end=self.offset, line=self.line, column=self.column)


@dataclass(frozen=True, slots=True)
class ExtractedKey:
    """A literal key found at a call site.

    Attributes:
        key: Full dotted key (namespace included)
        namespace_prefix: Namespace the key was requested under, if any
        site: Call site; None for keys registered manually
        text: Suggested translation for manually registered keys
    """

    key: Key
    namespace_prefix: str | None = None
    site: SiteRef | None = None
    text: str | None = None


@dataclass(frozen=True, slots=True)
class ExtractionWarning:
    """A call site whose key argument is not a literal (DynamicKeyIgnored).

    Attributes:
        site: Call site
        snippet: Source text at the key argument
    """

    site: SiteRef
    snippet: str

    @property
    def diagnostic(self) -> Diagnostic:
        return ErrorTemplate.dynamic_key_ignored(self.snippet, self.site.path, self.site.span)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Everything found in a set of sources, in ``(path, offset)`` order.

    Attributes:
        keys: One entry per call site (a key used twice appears twice)
        warnings: Dynamic call sites that were skipped
    """

    keys: tuple[ExtractedKey, ...] = ()
    warnings: tuple[ExtractionWarning, ...] = ()

    def key_set(self) -> frozenset[Key]:
        """Distinct keys requested."""
        return frozenset(extracted.key for extracted in self.keys)

    def ordered_keys(self) -> tuple[Key, ...]:
        """Distinct keys in first-seen order."""
        return tuple(dict.fromkeys(extracted.key for extracted in self.keys))

    def sites(self) -> dict[Key, tuple[SiteRef, ...]]:
        """Call sites per key, in first-seen key order."""
        grouped: dict[Key, list[SiteRef]] = {}
        for extracted in self.keys:
            bucket = grouped.setdefault(extracted.key, [])
            if extracted.site is not None:
                bucket.append(extracted.site)
        return {key: tuple(sites) for key, sites in grouped.items()}

    def merged(self, other: ExtractionResult) -> ExtractionResult:
        """Union of two results, re-sorted into ``(path, offset)`` order."""
        return ExtractionResult(
            keys=tuple(sorted((*self.keys, *other.keys), key=_key_order)),
            warnings=tuple(sorted((*self.warnings, *other.warnings), key=lambda w: w.site)),
        )


def _key_order(extracted: ExtractedKey) -> tuple[int, SiteRef | None]:
    # Manual keys (no site) sort after every real call site, keeping their order
    if extracted.site is None:
        return (1, None)
    return (0, extracted.site)


def _parse_literal(text: str, start: int) -> tuple[str, int] | None:
    """Decode the string literal at ``text[start]``.

    Returns:
        ``(value, end)`` with ``end`` just past the closing quote, or None
        when the text there is not a plain literal (f/b-strings,
        interpolated template literals, unterminated strings)
    """
    pos = start
    raw = False
    if pos < len(text) and text[pos] in "rRuU":
        raw = text[pos] in "rR"
        pos += 1
    if pos >= len(text) or text[pos] not in _QUOTES:
        return None

    quote = text[pos]
    delimiter = quote * 3 if quote != "`" and text.startswith(quote * 3, pos) else quote
    pos += len(delimiter)
    chars: list[str] = []
    while pos < len(text):
        if text.startswith(delimiter, pos):
            return "".join(chars), pos + len(delimiter)
        char = text[pos]
        if char == "\\" and pos + 1 < len(text):
            escaped = text[pos + 1]
            if raw:
                chars.append(char + escaped)
            else:
                chars.append(_SIMPLE_ESCAPES.get(escaped, char + escaped))
            pos += 2
            continue
        if char == "\n" and len(delimiter) == 1 and quote != "`":
            return None
        if quote == "`" and text.startswith("${", pos):
            return None
        chars.append(char)
        pos += 1
    return None


def _snippet(text: str, start: int) -> str:
    end = len(text)
    for stop in ("\n", ")"):
        found = text.find(stop, start)
        if found != -1:
            end = min(end, found)
    return text[start : min(end, start + _SNIPPET_LENGTH)].strip()


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


class KeyExtractor:
    """Call-site scanner bound to a set of marker names.

    Example:
        >>> extractor = KeyExtractor({"t"})
        >>> result = extractor.scan("app.py", 'print(t("messages.hello"))')
        >>> [k.key for k in result.keys]
        ['messages.hello']
    """

    __slots__ = ("_call_markers", "_namespace", "_pattern")

    def __init__(
        self, call_markers: Iterable[str] = DEFAULT_CALL_MARKERS, *, namespace: str | None = None
    ) -> None:
        """Compile the call-site pattern.

        Args:
            call_markers: Function or macro names that request a translation
            namespace: Prefix applied to every key found (``namespace.key``)

        Raises:
            ValueError: No markers, or a marker that is not an identifier
        """
        markers = frozenset(call_markers)
        if not markers:
            msg = "At least one call marker is required"
            raise ValueError(msg)
        invalid = sorted(marker for marker in markers if not marker.isidentifier())
        if invalid:
            msg = f"Call markers must be identifiers, got {invalid}"
            raise ValueError(msg)
        self._call_markers = markers
        self._namespace = namespace or None
        # Longest first so "tr" is not shadowed by "t"
        names = "|".join(re.escape(marker) for marker in sorted(markers, key=lambda m: (-len(m), m)))
        self._pattern = re.compile(rf"(?<![\w$])(?:{names})\s*!?\s*\(\s*")

    @property
    def call_markers(self) -> frozenset[str]:
        return self._call_markers

    def _make_key(self, literal: str, site: SiteRef) -> ExtractedKey:
        namespace_prefix = self._namespace
        segments: list[str] = [self._namespace] if self._namespace else []
        namespace, separator, rest = literal.partition(NAMESPACE_SEPARATOR)
        if separator and namespace and rest:
            namespace_prefix = namespace
            segments.extend((namespace, rest))
        else:
            segments.append(literal)
        return ExtractedKey(KEY_DELIMITER.join(segments), namespace_prefix, site)

    def iter_sites(
        self, path: str, text: str
    ) -> Iterator[ExtractedKey | ExtractionWarning]:
        """Yield keys and dynamic-site warnings in text order."""
        for match in self._pattern.finditer(text):
            span = span_at(text, match.start(), match.end())
            site = SiteRef(path=path, offset=match.start(), line=span.line, column=span.column)
            argument = match.end()
            parsed = _parse_literal(text, argument)
            if parsed is not None:
                literal, end = parsed
                follower = _skip_spaces(text, end)
                if follower < len(text) and text[follower] in ",)":
                    if not literal:
                        logger.debug("Empty key literal ignored at %s", site)
                        continue
                    extracted = self._make_key(literal, site)
                    logger.debug("Found key %s at %s", extracted.key, site)
                    yield extracted
                    continue
            if argument < len(text) and text[argument] == ")":
                # Marker called without arguments: not a translation request
                continue
            warning = ExtractionWarning(site=site, snippet=_snippet(text, argument))
            logger.warning("%s: %s", site, warning.diagnostic.message)
            yield warning

    def scan(self, path: str, text: str) -> ExtractionResult:
        """Extract every call site from one source text."""
        keys: list[ExtractedKey] = []
        warnings: list[ExtractionWarning] = []
        for item in self.iter_sites(path, text):
            if isinstance(item, ExtractionWarning):
                warnings.append(item)
            else:
                keys.append(item)
        return ExtractionResult(tuple(keys), tuple(warnings))


def extract(
    source_texts: Iterable[tuple[str, str]],
    call_markers: Iterable[str] = DEFAULT_CALL_MARKERS,
    *,
    namespace: str | None = None,
) -> ExtractionResult:
    """Extract literal keys from ``(path, text)`` pairs.

    Args:
        source_texts: Source files as ``(path, text)``
        call_markers: Names of translation-request functions/macros
        namespace: Prefix applied to every key found

    Returns:
        Keys and warnings sorted by ``(path, offset)`` regardless of input order
    """
    extractor = KeyExtractor(call_markers, namespace=namespace)
    keys: list[ExtractedKey] = []
    warnings: list[ExtractionWarning] = []
    for path, text in source_texts:
        scanned = extractor.scan(path, text)
        keys.extend(scanned.keys)
        warnings.extend(scanned.warnings)
    result = ExtractionResult(
        keys=tuple(sorted(keys, key=_key_order)),
        warnings=tuple(sorted(warnings, key=lambda w: w.site)),
    )
    logger.info(
        "Extracted %d call site(s), %d distinct key(s), %d dynamic",
        len(result.keys),
        len(result.key_set()),
        len(result.warnings),
    )
    return result
