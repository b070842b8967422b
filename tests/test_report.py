"""Tests for the extraction diff and report rendering.

Python 3.13+.
"""

import json

import pytest

from dotlocale.diagnostics import DiagnosticCode, OutputFormat
from dotlocale.extraction.extractor import ExtractedKey, ExtractionResult, extract
from dotlocale.extraction.report import ExtractionReport, MissingKey, diff
from dotlocale.localization.store import TranslationStore


@pytest.fixture
def store() -> TranslationStore:
    return TranslationStore.load(
        [
            ("en", "locales/en.yml", {"a": "A", "old": "Old", "z": "Z"}),
            ("fr", "locales/fr.yml", {"b": "B"}),
        ]
    )


@pytest.fixture
def extraction() -> ExtractionResult:
    return extract([("app.py", 't("z")\nt("b")\nt("a")\nt("b")\nt(name)')], {"t"})


class TestDiff:
    """missing = extracted - store, unused = store - extracted."""

    def test_missing_and_unused(
        self, extraction: ExtractionResult, store: TranslationStore
    ) -> None:
        report = diff(extraction, store, "en")
        assert report.missing_keys == ("b",)
        assert report.unused_keys == ("old",)

    def test_other_locales_do_not_satisfy(
        self, extraction: ExtractionResult, store: TranslationStore
    ) -> None:
        """``b`` exists for fr only; the base locale decides."""
        assert "b" in diff(extraction, store, "en").missing_keys

    def test_base_locale_selectable(
        self, extraction: ExtractionResult, store: TranslationStore
    ) -> None:
        report = diff(extraction, store, "fr")
        assert report.missing_keys == ("a", "z")
        assert report.unused_keys == ()

    def test_missing_sites_retained(
        self, extraction: ExtractionResult, store: TranslationStore
    ) -> None:
        (missing,) = diff(extraction, store, "en").missing
        assert [site.line for site in missing.sites] == [2, 4]

    def test_unused_source(self, extraction: ExtractionResult, store: TranslationStore) -> None:
        (unused,) = diff(extraction, store, "en").unused
        assert unused.source_id == "locales/en.yml"

    def test_results_sorted(self, store: TranslationStore) -> None:
        extraction = extract([("app.py", 't("y")\nt("c")\nt("m")')], {"t"})
        assert diff(extraction, store, "en").missing_keys == ("c", "m", "y")

    def test_manual_key_text(self, store: TranslationStore) -> None:
        extraction = ExtractionResult((ExtractedKey("manual", text="Manual text"),))
        (missing,) = diff(extraction, store, "en").missing
        assert missing == MissingKey("manual", (), "Manual text")

    def test_minified_code_satisfies_key(self) -> None:
        store = TranslationStore.load([("en", "en.yml", {"Xy12": "Hello"})])
        extraction = extract([("app.py", 't("messages.hello")')], {"t"})
        report = diff(extraction, store, "en", minified={"messages.hello": "Xy12"})
        assert report.missing == ()
        assert report.unused == ()
        assert report.minified["messages.hello"] == "Xy12"

    def test_empty_store(self, extraction: ExtractionResult) -> None:
        report = diff(extraction, TranslationStore(), "en")
        assert report.missing_keys == ("a", "b", "z")
        assert report.unused == ()

    def test_counts(self, extraction: ExtractionResult, store: TranslationStore) -> None:
        report = diff(extraction, store, "en")
        assert report.extracted_count == 3
        assert len(report.warnings) == 1
        assert report.locales == ("en", "fr")


class TestExtractionReport:
    """Exit codes, diagnostics and output formats."""

    @pytest.fixture
    def report(self, extraction: ExtractionResult, store: TranslationStore) -> ExtractionReport:
        return diff(extraction, store, "en")

    def test_clean_report(self) -> None:
        report = ExtractionReport(base_locale="en")
        assert report.is_clean
        assert report.exit_code(strict=True) == 0

    def test_exit_code(self, report: ExtractionReport) -> None:
        assert not report.is_clean
        assert report.exit_code() == 0
        assert report.exit_code(strict=True) == 1

    def test_diagnostics_order(self, report: ExtractionReport) -> None:
        codes = [diagnostic.code for diagnostic in report.diagnostics()]
        assert codes == [
            DiagnosticCode.MISSING_TRANSLATION,
            DiagnosticCode.MISSING_TRANSLATION,
            DiagnosticCode.UNUSED_TRANSLATION,
            DiagnosticCode.DYNAMIC_KEY_IGNORED,
        ]

    def test_manual_missing_key_has_one_diagnostic(self) -> None:
        report = ExtractionReport(base_locale="en", missing=(MissingKey("manual"),))
        (diagnostic,) = report.diagnostics()
        assert diagnostic.span is None

    def test_summary(self, report: ExtractionReport) -> None:
        assert report.summary() == (
            "3 key(s) used, 1 missing, 1 unused, 1 dynamic (base locale 'en')"
        )

    def test_rust_format(self, report: ExtractionReport) -> None:
        text = report.format()
        assert "error[MISSING_TRANSLATION]: Key 'b' is used but not defined for 'en'" in text
        assert "  --> app.py:2:1" in text
        assert "warning[UNUSED_TRANSLATION]" in text
        assert text.endswith(report.summary())

    def test_simple_format(self, report: ExtractionReport) -> None:
        lines = report.format(OutputFormat.SIMPLE).splitlines()
        assert lines[0] == (
            "app.py:2:1: MISSING_TRANSLATION: Key 'b' is used but not defined for 'en'"
        )

    def test_json_format(self, report: ExtractionReport) -> None:
        data = json.loads(report.format("json"))
        assert data["missing"] == [{"key": "b", "sites": ["app.py:2:1", "app.py:4:1"]}]
        assert data["unused"] == [{"key": "old", "source": "locales/en.yml"}]
        assert data["warnings"][0]["code"] == "DYNAMIC_KEY_IGNORED"

    def test_clean_format_is_summary(self) -> None:
        report = ExtractionReport(base_locale="en")
        assert report.format() == report.summary()
