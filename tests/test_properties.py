"""Property-based tests for flattening, merging, interpolation and minification.

Python 3.13+.
"""

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from dotlocale.config import MinifyConfig
from dotlocale.diagnostics import UnterminatedPlaceholderError
from dotlocale.extraction.extractor import KeyExtractor
from dotlocale.extraction.minify import minify_keys
from dotlocale.localization.fallback import build_fallback_chain
from dotlocale.localization.flatten import flatten, split_key
from dotlocale.localization.interpolate import placeholders, render
from dotlocale.localization.store import TranslationStore

segments = st.text(
    alphabet=st.characters(categories=["Ll", "Lu", "Nd"], include_characters="_-"),
    min_size=1,
    max_size=8,
)
leaves = st.one_of(st.text(max_size=20), st.integers(), st.booleans())
nodes = st.recursive(
    leaves,
    lambda children: st.dictionaries(segments, children, max_size=4),
    max_leaves=15,
)
trees = st.dictionaries(segments, nodes, max_size=5)
locales = st.sampled_from(["en", "en-GB", "fr", "fr-CA", "de", "zh-Hant-TW"])
plain_text = st.text(alphabet=st.characters(exclude_characters="%{}"), max_size=20)
names = st.text(alphabet="abcdefghij_", min_size=1, max_size=6)


def _count_leaves(tree: object) -> int:
    if isinstance(tree, dict):
        return sum(_count_leaves(child) for child in tree.values())
    return 1


class TestFlattenProperties:
    """Flattening invariants."""

    @given(trees)
    def test_one_pair_per_leaf_and_unique_keys(self, tree: dict[str, object]) -> None:
        pairs = list(flatten(tree))
        event(f"pairs={min(len(pairs), 5)}")
        assert len(pairs) == _count_leaves(tree)
        keys = [key for key, _ in pairs]
        assert len(set(keys)) == len(keys)

    @given(trees)
    def test_keys_are_well_formed(self, tree: dict[str, object]) -> None:
        for key, _value in flatten(tree):
            assert all(split_key(key))

    @given(trees)
    def test_deterministic(self, tree: dict[str, object]) -> None:
        assert list(flatten(tree)) == list(flatten(tree))


class TestMergeProperties:
    """Store merge invariants."""

    @given(trees, trees)
    def test_later_document_wins(
        self, first: dict[str, object], second: dict[str, object]
    ) -> None:
        store = TranslationStore.load([("en", "1", first), ("en", "2", second)])
        if store.load_errors:
            event("leaf/group clash")
            return
        for key, value in flatten(second):
            assert store.lookup("en", key) == value

    @given(trees)
    def test_single_document_round_trip(self, tree: dict[str, object]) -> None:
        store = TranslationStore.load([("en", "en.yml", tree)])
        assert dict(flatten(tree)) == {
            key: entry.value for key, entry in store.entries("en").items()
        }


class TestFallbackProperties:
    """Chain shape."""

    @given(locales, st.lists(locales, max_size=3), locales)
    def test_chain(self, requested: str, fallbacks: list[str], default: str) -> None:
        chain = build_fallback_chain(requested, fallbacks, default)
        assert chain[0] == requested
        assert default in chain
        assert len(set(chain)) == len(chain)


class TestInterpolationProperties:
    """Rendering invariants."""

    @given(plain_text)
    def test_text_without_markers_unchanged(self, text: str) -> None:
        assert render(text) == text

    @given(plain_text, names, plain_text, plain_text)
    def test_substitution(self, before: str, name: str, value: str, after: str) -> None:
        template = f"{before}%{{{name}}}{after}"
        assert render(template, {name: value}) == f"{before}{value}{after}"
        assert placeholders(template) == (name,)

    @given(st.text(max_size=20))
    def test_arguments_inserted_verbatim(self, value: str) -> None:
        assert render("[%{v}]", {"v": value}) == f"[{value}]"


class TestMinifyProperties:
    """Minification invariants."""

    @given(st.lists(st.text(min_size=1, max_size=12), max_size=40), st.integers(4, 8))
    def test_unique_and_stable(self, keys: list[str], length: int) -> None:
        config = MinifyConfig(length=length)
        mapping = minify_keys(keys, config)
        assert set(mapping) == set(keys)
        assert len(set(mapping.values())) == len(mapping)
        assert minify_keys(keys, config) == mapping


class TestExtractorProperties:
    """Literal keys always come back out."""

    @given(st.lists(st.text(alphabet="abcdefghij.", min_size=1, max_size=10), max_size=10))
    def test_literal_calls(self, keys: list[str]) -> None:
        source = "\n".join(f'value = t("{key}")' for key in keys)
        result = KeyExtractor({"t"}).scan("app.py", source)
        assert [extracted.key for extracted in result.keys] == keys


@pytest.mark.fuzz
class TestFuzz:
    """Intensive inputs; run with ``pytest -m fuzz``."""

    @given(st.text(max_size=200))
    def test_render_only_rejects_unterminated(self, template: str) -> None:
        try:
            render(template, dict.fromkeys(placeholders(template), "x"))
        except UnterminatedPlaceholderError:
            event("unterminated")

    @given(st.text(max_size=400))
    def test_scan_arbitrary_text(self, text: str) -> None:
        result = KeyExtractor({"t", "tr"}).scan("fuzz.py", text)
        assert all(extracted.key for extracted in result.keys)
