"""Writers for extraction output, exports and sorted locale documents.

Every document written here uses the multi-locale ``_version: 2`` shape
that PathDocumentLoader reads back::

    _version: 2
    messages.hello:
      en: Hello
      fr: Bonjour

Output format follows the file suffix: ``.yml``/``.yaml``, ``.json``, and
for exports also ``.csv`` (``key,<locale>,...`` header row).

Python 3.13+.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from os import PathLike
from pathlib import Path

import yaml

from dotlocale.constants import DEFAULT_LOCALE, TODO_FILENAME, VERSION_KEY
from dotlocale.diagnostics import DocumentError
from dotlocale.enums import MissedBehavior
from dotlocale.extraction.report import ExtractionReport
from dotlocale.localization.flatten import flatten
from dotlocale.localization.loading import PathDocumentLoader
from dotlocale.localization.store import DocumentLoadResult, TranslationStore
from dotlocale.localization.types import Key, LocaleId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Extraction output
    "write_missing",
    "write_minified",
    # Export
    "export",
    "filter_locales",
    "render_table",
    # Sorting
    "sort_documents",
    "SORTED_SUFFIX",
]

logger = logging.getLogger(__name__)

SORTED_SUFFIX = "-sorted"

type Table = dict[Key, dict[LocaleId, str]]


def _dump(data: Mapping[str, object], suffix: str) -> str:
    match suffix.lower():
        case ".yml" | ".yaml":
            return yaml.safe_dump(
                dict(data), sort_keys=False, allow_unicode=True, default_flow_style=False
            )
        case ".json":
            return json.dumps(data, ensure_ascii=False, indent=2) + "\n"
        case _:
            msg = f"Unsupported output format '{suffix}' (use .yml, .yaml or .json)"
            raise ValueError(msg)


def _versioned(table: Table) -> dict[str, object]:
    document: dict[str, object] = {VERSION_KEY: 2}
    document.update(table)
    return document


def render_table(table: Table, suffix: str) -> str:
    """Serialize a ``key -> {locale: text}`` table for a file suffix."""
    if suffix.lower() != ".csv":
        return _dump(_versioned(table), suffix)
    locales: list[LocaleId] = list(next(iter(table.values()), {}))
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["key", *locales])
    for key, texts in table.items():
        writer.writerow([key, *(texts.get(locale, "") for locale in locales)])
    return buffer.getvalue()


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)
    return path


def write_missing(
    report: ExtractionReport,
    locales: Iterable[LocaleId],
    output_dir: str | PathLike[str],
    *,
    filename: str = TODO_FILENAME,
) -> Path | None:
    """Write every missing key, for every locale, into a TODO document.

    The suggested text of a key is its manual translation or the key
    itself; with minification the short code is the document key.

    Returns:
        The written path, or None when nothing is missing
    """
    if not report.missing:
        logger.info("No missing keys, %s not written", filename)
        return None
    targets = list(dict.fromkeys(locales)) or [report.base_locale]
    table: Table = {}
    for missing in report.missing:
        text = missing.text if missing.text is not None else missing.key
        table[report.minified.get(missing.key, missing.key)] = dict.fromkeys(targets, text)
    path = Path(output_dir) / filename
    return _write(path, render_table(table, path.suffix))


def write_minified(mapping: Mapping[Key, str], path: str | PathLike[str]) -> Path:
    """Persist the ``key -> short code`` mapping (YAML or JSON by suffix)."""
    target = Path(path)
    return _write(target, _dump(dict(mapping), target.suffix))


def filter_locales(
    available: Iterable[LocaleId], selectors: Iterable[str] = ()
) -> list[LocaleId]:
    """Apply a locale selection such as ``["en", "+es", "!fr"]``.

    Plain names keep only those locales, ``+name`` adds a locale even if
    it has no translations, ``!name`` removes one. Comma-separated items
    are split. The result is sorted.

    Example:
        >>> filter_locales(["en", "fr", "de"], ["+es,!fr"])
        ['de', 'en', 'es']
        >>> filter_locales(["en", "fr", "de"], ["en", "+es"])
        ['en', 'es']
    """
    items = [item.strip() for selector in selectors for item in selector.split(",")]
    items = [item for item in items if item]
    explicit = {item for item in items if item[0] not in "+!"}
    chosen = set(available)
    if explicit:
        chosen &= explicit
    for item in items:
        match item[0], item[1:]:
            case "!", locale:
                chosen.discard(locale)
            case "+", locale if locale:
                chosen.add(locale)
            case _:
                pass
    return sorted(chosen)


def export(
    store: TranslationStore,
    path: str | PathLike[str],
    *,
    locales: Sequence[str] = (),
    available_locales: Iterable[LocaleId] = (),
    default_locale: LocaleId = DEFAULT_LOCALE,
    missed: MissedBehavior | str = MissedBehavior.DEFAULT,
) -> Path:
    """Export every key x locale into one CSV, JSON or YAML file.

    Args:
        store: Loaded translations
        path: Output file; format from its suffix
        locales: Locale selectors (see filter_locales)
        available_locales: Configured locales added to those in the store
        default_locale: Source of texts for ``missed="default"``
        missed: Fill for absent translations: default locale text or empty

    Returns:
        The written path

    Raises:
        ValueError: Unsupported output suffix or missed behavior
    """
    behavior = MissedBehavior(missed)
    chosen = filter_locales((*available_locales, *store.locales), locales)
    logger.info("Exporting locales: %s", ", ".join(chosen))
    table: Table = {}
    for key in sorted(store.all_keys()):
        row: dict[LocaleId, str] = {}
        for locale in chosen:
            entry = store.get_entry(locale, key)
            if entry is None and behavior == MissedBehavior.DEFAULT:
                entry = store.get_entry(default_locale, key)
            row[locale] = entry.text if entry is not None else ""
        table[key] = row
    target = Path(path)
    return _write(target, render_table(table, target.suffix))


def _sorted_table(
    documents: Iterable[tuple[LocaleId, object]],
    source_id: str,
    extra_locales: Iterable[LocaleId],
    *,
    reverse: bool,
) -> Table:
    by_locale: dict[LocaleId, dict[Key, str]] = {}
    for locale, tree in documents:
        texts = by_locale.setdefault(locale, {})
        texts.update((key, value.text) for key, value in flatten(tree, locale, source_id))
    locales = sorted({*by_locale, *extra_locales}, reverse=reverse)
    keys = sorted({key for texts in by_locale.values() for key in texts}, reverse=reverse)
    table: Table = {}
    for key in keys:
        table[key] = {
            locale: by_locale[locale][key]
            for locale in locales
            if key in by_locale.get(locale, {})
        }
    return table


def sort_documents(
    root: str | PathLike[str],
    *,
    inplace: bool = False,
    reverse: bool = False,
    available_locales: Iterable[LocaleId] = (),
) -> list[Path]:
    """Rewrite every locale document under ``root`` with sorted keys and locales.

    Without ``inplace`` each ``name.ext`` is written to ``name-sorted.ext``
    and existing ``-sorted`` files are skipped. TOML documents are left
    untouched (no TOML writer).

    Returns:
        Paths written, in document order
    """
    loader = PathDocumentLoader(root)
    extra = tuple(available_locales)
    written: list[Path] = []
    for path in loader.paths():
        if not inplace and SORTED_SUFFIX in path.stem:
            continue
        if path.suffix.lower() == ".toml":
            logger.warning("Cannot rewrite TOML document %s, skipped", path)
            continue
        outcome = loader.read_path(path)
        if isinstance(outcome, DocumentLoadResult):
            continue
        source_id = loader.describe_path(path)
        try:
            table = _sorted_table(
                ((document.locale, document.tree) for document in outcome),
                source_id,
                extra,
                reverse=reverse,
            )
        except DocumentError as e:
            logger.error("Cannot sort %s: %s", source_id, e)
            continue
        target = path if inplace else path.with_name(f"{path.stem}{SORTED_SUFFIX}{path.suffix}")
        written.append(_write(target, render_table(table, target.suffix)))
    return written
