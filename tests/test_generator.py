"""Tests for TODO documents, minified mappings, exports and sorting.

Python 3.13+.
"""

import csv
import json
from pathlib import Path

import pytest
import yaml

from dotlocale.enums import MissedBehavior
from dotlocale.extraction.generator import (
    export,
    filter_locales,
    render_table,
    sort_documents,
    write_minified,
    write_missing,
)
from dotlocale.extraction.report import ExtractionReport, MissingKey
from dotlocale.localization.store import TranslationStore


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _read_yaml(path: Path) -> object:
    return yaml.safe_load(path.read_text(encoding="utf-8"))


@pytest.fixture
def store() -> TranslationStore:
    return TranslationStore.load(
        [
            ("en", "en.yml", {"b": "Bee", "a": "Ay"}),
            ("fr", "fr.yml", {"a": "A (fr)"}),
        ]
    )


class TestWriteMissing:
    """TODO document for missing keys."""

    def test_written_for_every_locale(self, tmp_path: Path) -> None:
        report = ExtractionReport(
            base_locale="en",
            missing=(MissingKey("new.key"), MissingKey("manual", text="Manual text")),
        )
        path = write_missing(report, ["en", "fr"], tmp_path)
        assert path == tmp_path / "TODO.yml"
        assert _read_yaml(path) == {
            "_version": 2,
            "new.key": {"en": "new.key", "fr": "new.key"},
            "manual": {"en": "Manual text", "fr": "Manual text"},
        }

    def test_minified_codes_used_as_keys(self, tmp_path: Path) -> None:
        report = ExtractionReport(
            base_locale="en", missing=(MissingKey("long.key"),), minified={"long.key": "Xy"}
        )
        path = write_missing(report, [], tmp_path, filename="TODO.json")
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "_version": 2,
            "Xy": {"en": "long.key"},
        }

    def test_nothing_missing(self, tmp_path: Path) -> None:
        assert write_missing(ExtractionReport(base_locale="en"), ["en"], tmp_path) is None
        assert not (tmp_path / "TODO.yml").exists()

    def test_readable_as_locale_document(self, tmp_path: Path) -> None:
        report = ExtractionReport(base_locale="en", missing=(MissingKey("a.b"),))
        write_missing(report, ["en"], tmp_path)
        assert TranslationStore.from_path(tmp_path).lookup("en", "a.b").text == "a.b"


class TestWriteMinified:
    """Persisted key -> code mapping."""

    def test_yaml(self, tmp_path: Path) -> None:
        path = write_minified({"messages.hello": "Ab3"}, tmp_path / "out" / "keys.yml")
        assert _read_yaml(path) == {"messages.hello": "Ab3"}

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unsupported output format"):
            write_minified({"a": "b"}, tmp_path / "keys.txt")


class TestFilterLocales:
    """Locale selector syntax."""

    def test_all_by_default(self) -> None:
        assert filter_locales(["fr", "en"]) == ["en", "fr"]

    def test_explicit(self) -> None:
        assert filter_locales(["en", "fr", "de"], ["en", "+es"]) == ["en", "es"]

    def test_add_and_remove(self) -> None:
        assert filter_locales(["en", "fr", "de"], ["+es,!fr"]) == ["de", "en", "es"]

    def test_blank_items_ignored(self) -> None:
        assert filter_locales(["en"], [" , ", "+"]) == ["en"]


class TestExport:
    """key x locale tables."""

    def test_csv_default_fill(self, store: TranslationStore, tmp_path: Path) -> None:
        path = export(store, tmp_path / "out.csv")
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
        assert rows == [["key", "en", "fr"], ["a", "Ay", "A (fr)"], ["b", "Bee", "Bee"]]

    def test_empty_fill(self, store: TranslationStore, tmp_path: Path) -> None:
        path = export(store, tmp_path / "out.csv", missed=MissedBehavior.EMPTY)
        assert path.read_text(encoding="utf-8").splitlines()[2] == "b,Bee,"

    def test_locale_selection(self, store: TranslationStore, tmp_path: Path) -> None:
        path = export(store, tmp_path / "out.json", locales=["fr", "+de"], missed="empty")
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "_version": 2,
            "a": {"de": "", "fr": "A (fr)"},
            "b": {"de": "", "fr": ""},
        }

    def test_available_locales_included(self, store: TranslationStore, tmp_path: Path) -> None:
        path = export(store, tmp_path / "out.yml", available_locales=["es"], missed="empty")
        assert _read_yaml(path)["a"] == {"en": "Ay", "es": "", "fr": "A (fr)"}

    def test_invalid_missed(self, store: TranslationStore, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            export(store, tmp_path / "out.csv", missed="skip")

    def test_unsupported_suffix(self, store: TranslationStore, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            export(store, tmp_path / "out.xlsx")


class TestRenderTable:
    """Serialization helper."""

    def test_csv_empty_table(self) -> None:
        assert render_table({}, ".csv") == "key\n"

    def test_yaml_keeps_insertion_order(self) -> None:
        text = render_table({"z": {"en": "Z"}, "a": {"en": "A"}}, ".yaml")
        assert text.index("z:") < text.index("a:")


class TestSortDocuments:
    """Sorted copies and in-place rewrites."""

    def test_sorted_copy(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "b: Bee\na:\n  z: Zed\n  c: See\n")
        (written,) = sort_documents(tmp_path)
        assert written == tmp_path / "en-sorted.yml"
        assert list(_read_yaml(written)) == ["_version", "a.c", "a.z", "b"]
        assert (tmp_path / "en.yml").read_text(encoding="utf-8").startswith("b: Bee")

    def test_inplace_preserves_translations(self, tmp_path: Path) -> None:
        _write(tmp_path / "fr.json", '{"b": "Bé", "a": "A"}')
        before = TranslationStore.from_path(tmp_path)
        sort_documents(tmp_path, inplace=True)
        after = TranslationStore.from_path(tmp_path)
        assert after.keys("fr") == ("a", "b")
        assert after.lookup("fr", "b") == before.lookup("fr", "b")

    def test_reverse(self, tmp_path: Path) -> None:
        _write(tmp_path / "app.yml", "_version: 2\na:\n  en: A\n  fr: A\nb:\n  en: B\n")
        (written,) = sort_documents(tmp_path, reverse=True)
        document = _read_yaml(written)
        assert list(document) == ["_version", "b", "a"]
        assert list(document["a"]) == ["fr", "en"]

    def test_sorted_files_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\n")
        sort_documents(tmp_path)
        assert sort_documents(tmp_path) == [tmp_path / "en-sorted.yml"]

    def test_toml_and_broken_documents_skipped(self, tmp_path: Path) -> None:
        _write(tmp_path / "de.toml", 'a = "A"\n')
        _write(tmp_path / "fr.yml", "a: [\n")
        assert sort_documents(tmp_path) == []
