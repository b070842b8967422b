"""Tests for file system document loading.

Python 3.13+.
"""

from pathlib import Path

import pytest
import yaml

from dotlocale.diagnostics import (
    DocumentError,
    DuplicateKeyInDocumentError,
    InvalidKeyError,
    UnsupportedLeafTypeError,
)
from dotlocale.localization.loading import (
    DocumentSet,
    PathDocumentLoader,
    load_store,
    parse_document,
    split_multi_locale,
)
from dotlocale.localization.store import LocaleDocument, TranslationStore


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


class TestParseDocument:
    """Deserialization by suffix."""

    def test_yaml(self) -> None:
        assert parse_document("a:\n  b: text\n", ".yml") == {"a": {"b": "text"}}

    def test_json(self) -> None:
        assert parse_document('{"a": {"b": "text"}}', ".json") == {"a": {"b": "text"}}

    def test_toml(self) -> None:
        assert parse_document('[a]\nb = "text"\n', ".toml") == {"a": {"b": "text"}}

    def test_empty_yaml_is_empty_mapping(self) -> None:
        assert parse_document("", ".yaml") == {}

    def test_yaml_dates_stay_text(self) -> None:
        assert parse_document("released: 2024-01-01\n", ".yml") == {"released": "2024-01-01"}

    def test_yaml_duplicate_key(self) -> None:
        with pytest.raises(DuplicateKeyInDocumentError) as exc_info:
            parse_document("a: 1\nb: 2\na: 3\n", ".yml", "en.yml")
        assert exc_info.value.key == "a"
        assert exc_info.value.source_id == "en.yml"

    def test_yaml_nested_duplicate_key(self) -> None:
        with pytest.raises(DuplicateKeyInDocumentError):
            parse_document("menu:\n  title: A\n  title: B\n", ".yml")

    def test_yaml_merge_key(self) -> None:
        """Shared strings pulled in with ``<<: *anchor`` load normally."""
        text = "base: &base\n  hello: Hello\nmessages:\n  <<: *base\n  bye: Bye\n"
        assert parse_document(text, ".yml") == {
            "base": {"hello": "Hello"},
            "messages": {"hello": "Hello", "bye": "Bye"},
        }

    def test_yaml_merge_key_clash(self) -> None:
        """A merged key redefined explicitly is a duplicate path."""
        text = "base: &base\n  hello: Hello\nmessages:\n  <<: *base\n  hello: Hi\n"
        with pytest.raises(DuplicateKeyInDocumentError) as exc_info:
            parse_document(text, ".yml", "en.yml")
        assert exc_info.value.key == "hello"

    def test_yaml_complex_key(self) -> None:
        with pytest.raises(InvalidKeyError, match="complex mapping key"):
            parse_document("? [a, b]\n: x\n", ".yml", "en.yml")

    def test_json_duplicate_key(self) -> None:
        with pytest.raises(DuplicateKeyInDocumentError):
            parse_document('{"a": 1, "a": 2}', ".json")

    def test_yaml_syntax_error(self) -> None:
        with pytest.raises(yaml.YAMLError):
            parse_document("a: [unclosed\n", ".yml")

    def test_json_syntax_error(self) -> None:
        with pytest.raises(ValueError):
            parse_document("{not json", ".json")

    def test_unknown_suffix(self) -> None:
        with pytest.raises(ValueError, match="Unsupported document type"):
            parse_document("", ".ini")


class TestSplitMultiLocale:
    """``_version: 2`` documents."""

    def test_split_per_locale(self) -> None:
        tree = {
            "_version": 2,
            "messages.hello": {"en": "Hello", "fr": "Bonjour"},
            "messages.bye": {"en": "Bye"},
        }
        documents = split_multi_locale(tree, "app.yml")
        assert documents == [
            LocaleDocument("en", "app.yml", {"messages": {"hello": "Hello", "bye": "Bye"}}),
            LocaleDocument("fr", "app.yml", {"messages": {"hello": "Bonjour"}}),
        ]

    def test_non_mapping_translations_rejected(self) -> None:
        with pytest.raises(UnsupportedLeafTypeError):
            split_multi_locale({"_version": 2, "a": "text"}, "app.yml")

    def test_leaf_group_clash_rejected(self) -> None:
        tree = {"_version": 2, "a": {"en": "x"}, "a.b": {"en": "y"}}
        with pytest.raises(DuplicateKeyInDocumentError):
            split_multi_locale(tree, "app.yml")


class TestPathDocumentLoader:
    """Directory layouts, locale detection and failure isolation."""

    def test_locale_from_file_stem(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\n")
        _write(tmp_path / "fr.json", '{"a": "A"}')
        _write(tmp_path / "de.toml", 'a = "A"\n')
        document_set = PathDocumentLoader(tmp_path).load()
        assert document_set.locales == ("de", "en", "fr")
        assert document_set.failures == ()

    def test_locale_from_dotted_stem(self, tmp_path: Path) -> None:
        _write(tmp_path / "app.pt-BR.yml", "a: A\n")
        assert PathDocumentLoader(tmp_path).load().locales == ("pt-BR",)

    def test_locale_from_directory(self, tmp_path: Path) -> None:
        _write(tmp_path / "fr" / "app.yml", "a: A\n")
        _write(tmp_path / "fr" / "nested" / "more.yml", "b: B\n")
        documents = PathDocumentLoader(tmp_path).load().documents
        assert [document.locale for document in documents] == ["fr", "fr"]

    def test_multi_locale_document(self, tmp_path: Path) -> None:
        _write(
            tmp_path / "app.yml",
            "_version: 2\nmessages.hello:\n  en: Hello\n  fr: Bonjour\n",
        )
        store = TranslationStore.from_path(tmp_path)
        assert store.lookup("fr", "messages.hello").text == "Bonjour"
        assert store.lookup("en", "messages.hello").text == "Hello"

    def test_sorted_path_order(self, tmp_path: Path) -> None:
        _write(tmp_path / "en" / "b.yml", "k: from b\n")
        _write(tmp_path / "en" / "a.yml", "k: from a\n")
        store = TranslationStore.from_path(tmp_path)
        assert store.lookup("en", "k").text == "from b"
        assert len(store.conflicts) == 1

    def test_ignores_other_files(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\n")
        _write(tmp_path / "README.md", "# Locales\n")
        assert len(PathDocumentLoader(tmp_path).paths()) == 1

    def test_missing_root_is_empty(self, tmp_path: Path) -> None:
        document_set = PathDocumentLoader(tmp_path / "absent").load()
        assert document_set == DocumentSet()

    def test_bad_file_isolated(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\n")
        _write(tmp_path / "fr.yml", "a: A\na: B\n")
        _write(tmp_path / "de.json", "{broken")
        document_set = PathDocumentLoader(tmp_path).load()
        assert document_set.locales == ("en",)
        assert [failure.locale for failure in document_set.failures] == ["de", "fr"]
        assert all(failure.is_error for failure in document_set.failures)

    def test_complex_key_isolated(self, tmp_path: Path) -> None:
        """A document with a sequence as mapping key fails alone."""
        _write(tmp_path / "en.yml", "a: A\n")
        _write(tmp_path / "fr.yml", "? [a, b]\n: x\n")
        store = TranslationStore.from_path(tmp_path)
        assert store.lookup("en", "a").text == "A"
        (failure,) = store.load_errors
        assert failure.locale == "fr"
        assert isinstance(failure.error, InvalidKeyError)

    def test_version_marker_dropped(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "_version: 1\na: A\n")
        store = TranslationStore.from_path(tmp_path)
        assert store.keys("en") == ("a",)

    def test_failures_reach_store_summary(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\n")
        _write(tmp_path / "fr.yml", "a: [\n")
        store = TranslationStore.from_path(tmp_path)
        assert store.lookup("en", "a").text == "A"
        assert [error.source_id for error in store.load_errors] == [
            (tmp_path / "fr.yml").as_posix()
        ]

    def test_workers_keep_order(self, tmp_path: Path) -> None:
        for index in range(8):
            _write(tmp_path / "en" / f"{index:02d}.yml", f"k: v{index}\nk{index}: x\n")
        sequential = PathDocumentLoader(tmp_path).load()
        threaded = PathDocumentLoader(tmp_path, workers=4).load()
        assert threaded == sequential

    def test_workers_validated(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="workers"):
            PathDocumentLoader(tmp_path, workers=0)


class TestLoadStore:
    """load_store with fail_fast."""

    def test_fail_fast_raises_document_error(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: A\na: B\n")
        with pytest.raises(DuplicateKeyInDocumentError):
            load_store(PathDocumentLoader(tmp_path), fail_fast=True)

    def test_fail_fast_wraps_syntax_errors(self, tmp_path: Path) -> None:
        _write(tmp_path / "en.yml", "a: [\n")
        with pytest.raises(DocumentError) as exc_info:
            load_store(PathDocumentLoader(tmp_path), fail_fast=True)
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    def test_custom_loader(self) -> None:
        class FixtureLoader:
            def load(self) -> DocumentSet:
                return DocumentSet((LocaleDocument("en", "memory", {"a": "A"}),))

        store = load_store(FixtureLoader())
        assert store.lookup("en", "a").text == "A"
