"""Extraction pipeline: sources + locale documents -> ExtractionReport.

    run_extraction(source_roots, locale_roots, call_markers, minify)

1. Walk every source root for files with a known suffix, sorted by path.
2. Scan them (optionally in a thread pool) and re-sort call sites by
   ``(path, offset)``; this is the one global order minification uses.
3. Add manually registered keys after all scanned ones.
4. Load and merge every locale root into one TranslationStore.
5. Minify (if enabled) and diff against the base locale.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from os import PathLike
from pathlib import Path

from dotlocale.config import MinifyConfig
from dotlocale.constants import (
    DEFAULT_CALL_MARKERS,
    DEFAULT_LOCALE,
    DEFAULT_SOURCE_SUFFIXES,
    EXCLUDED_SOURCE_DIRS,
)
from dotlocale.extraction.extractor import (
    ExtractedKey,
    ExtractionResult,
    ExtractionWarning,
    KeyExtractor,
)
from dotlocale.extraction.minify import minify_keys
from dotlocale.extraction.report import ExtractionReport, diff
from dotlocale.localization.loading import PathDocumentLoader
from dotlocale.localization.store import DocumentLoadResult, LocaleDocument, TranslationStore
from dotlocale.localization.types import Key, LocaleId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "run_extraction",
    "scan_sources",
    "iter_source_files",
    "load_locale_roots",
]

logger = logging.getLogger(__name__)

type PathArg = str | PathLike[str]


def iter_source_files(
    roots: Iterable[PathArg], suffixes: Iterable[str] = DEFAULT_SOURCE_SUFFIXES
) -> list[Path]:
    """Source files under ``roots``, deduplicated and sorted by path.

    A root may be a single file (scanned whatever its suffix). Hidden and
    tool directories (``.git``, ``node_modules``, ...) are skipped.
    """
    wanted = {suffix.lower() for suffix in suffixes}
    found: dict[Path, None] = {}
    for root in roots:
        path = Path(root)
        if path.is_file():
            found[path] = None
            continue
        if not path.is_dir():
            logger.warning("Source root %s does not exist", path)
            continue
        for candidate in path.rglob("*"):
            relative_dirs = candidate.relative_to(path).parts[:-1]
            if any(part in EXCLUDED_SOURCE_DIRS or part.startswith(".") for part in relative_dirs):
                continue
            if candidate.is_file() and candidate.suffix.lower() in wanted:
                found[candidate] = None
    return sorted(found, key=lambda p: p.as_posix())


def _scan_file(extractor: KeyExtractor, path: Path) -> ExtractionResult:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable source %s: %s", path, e)
        return ExtractionResult()
    return extractor.scan(path.as_posix(), text)


def scan_sources(
    paths: Iterable[Path],
    extractor: KeyExtractor,
    *,
    workers: int = 1,
) -> ExtractionResult:
    """Scan files and merge call sites into ``(path, offset)`` order.

    Raises:
        ValueError: If workers is less than 1
    """
    if workers < 1:
        msg = f"workers must be >= 1, got {workers}"
        raise ValueError(msg)
    files = list(paths)
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda p: _scan_file(extractor, p), files))
    else:
        results = [_scan_file(extractor, path) for path in files]

    keys: list[ExtractedKey] = []
    warnings: list[ExtractionWarning] = []
    for result in results:
        keys.extend(result.keys)
        warnings.extend(result.warnings)
    keys.sort(key=lambda extracted: extracted.site)  # type: ignore[arg-type,return-value]
    warnings.sort(key=lambda warning: warning.site)
    return ExtractionResult(tuple(keys), tuple(warnings))


def load_locale_roots(
    roots: Iterable[PathArg], *, workers: int = 1
) -> TranslationStore:
    """Merge documents of several locale roots; later roots win conflicts."""
    documents: list[LocaleDocument] = []
    failures: list[DocumentLoadResult] = []
    for root in roots:
        document_set = PathDocumentLoader(root, workers=workers).load()
        documents.extend(document_set.documents)
        failures.extend(document_set.failures)
    return TranslationStore.load(documents, failures=failures)


def _manual_keys(extra_keys: Iterable[str] | Mapping[str, str]) -> list[ExtractedKey]:
    if isinstance(extra_keys, Mapping):
        return [ExtractedKey(key, text=text) for key, text in extra_keys.items() if key]
    return [ExtractedKey(key, text=key) for key in extra_keys if key]


def run_extraction(
    source_roots: Iterable[PathArg],
    locale_roots: Iterable[PathArg],
    call_markers: Iterable[str] = DEFAULT_CALL_MARKERS,
    minify: bool | MinifyConfig = False,
    *,
    base_locale: LocaleId = DEFAULT_LOCALE,
    namespace: str | None = None,
    extra_keys: Iterable[str] | Mapping[str, str] = (),
    suffixes: Iterable[str] = DEFAULT_SOURCE_SUFFIXES,
    workers: int = 1,
) -> ExtractionReport:
    """Extract keys from sources and diff them against the locale documents.

    Args:
        source_roots: Directories (or files) to scan
        locale_roots: Directories holding locale documents
        call_markers: Translation-request function/macro names
        minify: True for default minification settings, or a MinifyConfig
        base_locale: Locale whose key set is authoritative
        namespace: Prefix applied to every extracted key
        extra_keys: Keys used only dynamically; a mapping supplies their
            suggested translation (``key -> text``)
        suffixes: Source file suffixes to scan
        workers: Threads for scanning and loading (1 = sequential)

    Returns:
        Report with sorted ``missing``/``unused``, warnings, and minified codes

    Raises:
        MinificationCollisionError: Codes could not be made unique
        ValueError: Invalid markers or workers
    """
    extractor = KeyExtractor(call_markers, namespace=namespace)
    paths = iter_source_files(source_roots, suffixes)
    logger.info("Scanning %d source file(s)", len(paths))
    scanned = scan_sources(paths, extractor, workers=workers)
    manual = _manual_keys(extra_keys)
    extraction = ExtractionResult((*scanned.keys, *manual), scanned.warnings)

    store = load_locale_roots(locale_roots, workers=workers)

    match minify:
        case MinifyConfig() as settings:
            minify_config = settings if settings.enabled else None
        case True:
            minify_config = MinifyConfig(enabled=True)
        case _:
            minify_config = None
    minified: dict[Key, str] = {}
    if minify_config is not None:
        minified = minify_keys(extraction.ordered_keys(), minify_config)

    report = diff(extraction, store, base_locale, minified=minified)
    logger.info("Extraction finished: %s", report.summary())
    return report
