"""Key extraction tool.

Submodules:
    extractor - Text-pattern call-site scanner (SiteRef, ExtractedKey, extract)
    minify    - Stable short codes for keys
    report    - ExtractionReport and the missing/unused diff
    runner    - run_extraction pipeline (sources + locale roots)
    generator - TODO documents, minified mapping, export, sort

Python 3.13+.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability

from dotlocale.extraction.extractor import (
    ExtractedKey,
    ExtractionResult,
    ExtractionWarning,
    KeyExtractor,
    SiteRef,
    extract,
)
from dotlocale.extraction.generator import (
    export,
    filter_locales,
    sort_documents,
    write_minified,
    write_missing,
)
from dotlocale.extraction.minify import minify_key, minify_keys
from dotlocale.extraction.report import ExtractionReport, MissingKey, UnusedKey, diff
from dotlocale.extraction.runner import iter_source_files, run_extraction

__all__ = [
    # Pipeline
    "run_extraction",
    "iter_source_files",
    # Scanning
    "extract",
    "KeyExtractor",
    "ExtractedKey",
    "ExtractionResult",
    "ExtractionWarning",
    "SiteRef",
    # Minification
    "minify_key",
    "minify_keys",
    # Report
    "diff",
    "ExtractionReport",
    "MissingKey",
    "UnusedKey",
    # Writers
    "write_missing",
    "write_minified",
    "export",
    "filter_locales",
    "sort_documents",
]
