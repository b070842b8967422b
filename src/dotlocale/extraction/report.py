"""Extraction report: extracted keys diffed against the translation store.

    missing = extracted keys - store keys (base locale)
    unused  = store keys (base locale) - extracted keys

Both are sorted by key. ``missing`` entries keep their call sites and
``unused`` entries their defining document, for diagnostics.

Python 3.13+.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from dotlocale.diagnostics import Diagnostic, DiagnosticFormatter, OutputFormat
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.extraction.extractor import ExtractionResult, ExtractionWarning, SiteRef
from dotlocale.localization.store import TranslationStore
from dotlocale.localization.types import Key, LocaleId, SourceId

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    "ExtractionReport",
    "MissingKey",
    "UnusedKey",
    "diff",
]


@dataclass(frozen=True, slots=True)
class MissingKey:
    """Key requested in source but absent from the base locale.

    Attributes:
        key: The key
        sites: Every call site requesting it (empty for manual keys)
        text: Suggested translation (manual keys), else None
    """

    key: Key
    sites: tuple[SiteRef, ...] = ()
    text: str | None = None


@dataclass(frozen=True, slots=True)
class UnusedKey:
    """Key defined for the base locale but requested nowhere.

    Attributes:
        key: The key
        source_id: Document defining it
    """

    key: Key
    source_id: SourceId


def _empty_mapping() -> Mapping[Key, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class ExtractionReport:
    """Outcome of one extraction run. Recomputed per run, never persisted.

    Attributes:
        base_locale: Locale the diff was computed against
        missing: Sorted missing keys (actionable)
        unused: Sorted unused keys (advisory)
        minified: ``key -> short code`` when minification ran, else empty
        warnings: DynamicKeyIgnored call sites
        extracted_count: Distinct keys requested by the sources
        locales: Locales present in the store
    """

    base_locale: LocaleId
    missing: tuple[MissingKey, ...] = ()
    unused: tuple[UnusedKey, ...] = ()
    minified: Mapping[Key, str] = field(default_factory=_empty_mapping)
    warnings: tuple[ExtractionWarning, ...] = ()
    extracted_count: int = 0
    locales: tuple[LocaleId, ...] = ()

    @property
    def missing_keys(self) -> tuple[Key, ...]:
        return tuple(item.key for item in self.missing)

    @property
    def unused_keys(self) -> tuple[Key, ...]:
        return tuple(item.key for item in self.unused)

    @property
    def is_clean(self) -> bool:
        """True when no requested key is missing (unused keys are advisory)."""
        return not self.missing

    def exit_code(self, strict: bool = False) -> int:
        """Process exit status: 1 only for missing keys in strict mode."""
        return 1 if strict and self.missing else 0

    def diagnostics(self) -> list[Diagnostic]:
        """Missing keys (one per call site), then unused keys, then warnings."""
        items: list[Diagnostic] = []
        for missing in self.missing:
            if not missing.sites:
                items.append(
                    ErrorTemplate.missing_translation(missing.key, self.base_locale, None, None)
                )
            for site in missing.sites:
                items.append(
                    ErrorTemplate.missing_translation(
                        missing.key, self.base_locale, site.path, site.span
                    )
                )
        items.extend(
            ErrorTemplate.unused_translation(unused.key, self.base_locale, unused.source_id)
            for unused in self.unused
        )
        items.extend(warning.diagnostic for warning in self.warnings)
        return items

    def summary(self) -> str:
        return (
            f"{self.extracted_count} key(s) used, {len(self.missing)} missing, "
            f"{len(self.unused)} unused, {len(self.warnings)} dynamic "
            f"(base locale '{self.base_locale}')"
        )

    def to_dict(self) -> dict[str, object]:
        """JSON-ready representation."""
        return {
            "base_locale": self.base_locale,
            "missing": [
                {"key": item.key, "sites": [str(site) for site in item.sites]}
                for item in self.missing
            ],
            "unused": [{"key": item.key, "source": item.source_id} for item in self.unused],
            "minified": dict(self.minified),
            "warnings": [DiagnosticFormatter.to_dict(w.diagnostic) for w in self.warnings],
        }

    def format(
        self, output_format: OutputFormat | str = OutputFormat.RUST, *, color: bool = False
    ) -> str:
        """Render the report for humans (rust/simple) or tools (json)."""
        output_format = OutputFormat(output_format)
        if output_format == OutputFormat.JSON:
            return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)
        formatter = DiagnosticFormatter(output_format=output_format, color=color)
        body = formatter.format_all(self.diagnostics())
        return f"{body}\n\n{self.summary()}" if body else self.summary()


def diff(
    extraction: ExtractionResult,
    store: TranslationStore,
    base_locale: LocaleId,
    *,
    minified: Mapping[Key, str] | None = None,
) -> ExtractionReport:
    """Compare requested keys with the keys defined for ``base_locale``.

    With ``minified``, a store key equal to the short code of a requested
    key counts as that key (minified locale documents).

    Args:
        extraction: Keys and warnings from the extractor
        store: Loaded translations
        base_locale: Locale whose key set is authoritative
        minified: ``key -> code`` from the minification pass
    """
    codes = dict(minified or {})
    texts = {item.key: item.text for item in extraction.keys if item.text is not None}
    defined = store.entries(base_locale)
    sites = extraction.sites()

    satisfied: set[Key] = set()
    missing: list[MissingKey] = []
    for key in sorted(sites):
        code = codes.get(key)
        if key in defined:
            satisfied.add(key)
        elif code is not None and code in defined:
            satisfied.add(code)
        else:
            missing.append(MissingKey(key, sites[key], texts.get(key)))

    unused = [
        UnusedKey(key, defined[key].source_id)
        for key in sorted(defined)
        if key not in satisfied and key not in sites
    ]
    return ExtractionReport(
        base_locale=base_locale,
        missing=tuple(missing),
        unused=tuple(unused),
        minified=MappingProxyType(codes),
        warnings=extraction.warnings,
        extracted_count=len(sites),
        locales=store.locales,
    )

