"""Tests for placeholder interpolation.

Python 3.13+.
"""

import pytest

from dotlocale.diagnostics import (
    InterpolationError,
    MissingInterpolationArgError,
    UnterminatedPlaceholderError,
)
from dotlocale.localization.interpolate import (
    DEFAULT_MARKERS,
    Interpolator,
    PlaceholderMarkers,
    placeholders,
    render,
)
from dotlocale.localization.values import TranslationValue


class TestPlaceholderMarkers:
    """Marker validation and escape derivation."""

    def test_defaults(self) -> None:
        assert DEFAULT_MARKERS.open == "%{"
        assert DEFAULT_MARKERS.close == "}"
        assert DEFAULT_MARKERS.sigil_escape == "%%"

    @pytest.mark.parametrize(("open_marker", "close_marker"), [("", "}"), ("{", ""), ("$", "$")])
    def test_invalid_markers(self, open_marker: str, close_marker: str) -> None:
        with pytest.raises(ValueError, match="marker"):
            PlaceholderMarkers(open_marker, close_marker)

    def test_no_sigil_escape_for_doubled_open(self) -> None:
        """``{{`` already starts with the doubled sigil."""
        assert PlaceholderMarkers("{{", "}}").sigil_escape is None

    def test_no_sigil_escape_for_single_char_open(self) -> None:
        assert PlaceholderMarkers("{", "}").sigil_escape is None


class TestRender:
    """Substitution with the default ``%{name}`` markers."""

    def test_single_placeholder(self) -> None:
        assert render("Hello, %{name}!", {"name": "World"}) == "Hello, World!"

    def test_repeated_placeholder(self) -> None:
        assert render("%{x} and %{x}", {"x": "y"}) == "y and y"

    def test_no_placeholders_returned_unchanged(self) -> None:
        assert render("Plain text", {"unused": "arg"}) == "Plain text"

    def test_args_optional_without_placeholders(self) -> None:
        assert render("Plain") == "Plain"

    def test_non_text_arguments(self) -> None:
        assert render("%{n} items, %{ok}", {"n": 3, "ok": True}) == "3 items, true"

    def test_translation_value_template(self) -> None:
        template = TranslationValue.text_value("Hi %{who}")
        assert render(template, {"who": "there"}) == "Hi there"

    def test_escaped_sigil(self) -> None:
        assert render("100%%") == "100%"

    def test_escaped_open_marker(self) -> None:
        assert render("Literal %{%{name}") == "Literal %{name}"

    def test_lone_sigil_kept(self) -> None:
        assert render("50% off") == "50% off"

    def test_substituted_text_not_rescanned(self) -> None:
        assert render("%{a}", {"a": "%{b}"}) == "%{b}"

    def test_missing_argument(self) -> None:
        with pytest.raises(MissingInterpolationArgError) as exc_info:
            render("Hello, %{name}!", {})
        assert exc_info.value.name == "name"
        assert exc_info.value.diagnostic is not None
        assert str(exc_info.value) == "MissingInterpolationArg(name)"

    def test_unterminated_placeholder(self) -> None:
        with pytest.raises(UnterminatedPlaceholderError) as exc_info:
            render("Hello %{name", {"name": "x"})
        assert exc_info.value.position == 6

    def test_errors_share_base_class(self) -> None:
        with pytest.raises(InterpolationError):
            render("%{missing}")


class TestCustomMarkers:
    """Substitution with configured markers."""

    def test_double_brace(self) -> None:
        interpolator = Interpolator(PlaceholderMarkers("{{", "}}"))
        assert interpolator.render("{{n}} items", {"n": 3}) == "3 items"

    def test_double_brace_escape(self) -> None:
        interpolator = Interpolator(PlaceholderMarkers("{{", "}}"))
        assert interpolator.render("{{{{literal}}", {}) == "{{literal}}"

    def test_default_syntax_is_plain_text_under_custom_markers(self) -> None:
        markers = PlaceholderMarkers("${", "}")
        assert render("%{x} ${x}", {"x": "y"}, markers) == "%{x} y"


class TestPlaceholders:
    """Placeholder name discovery."""

    def test_first_use_order_without_duplicates(self) -> None:
        assert placeholders("%{b} %{a} %{b}") == ("b", "a")

    def test_escapes_are_not_placeholders(self) -> None:
        assert placeholders("%%{a} %{%{b}") == ()

    def test_unterminated(self) -> None:
        with pytest.raises(UnterminatedPlaceholderError):
            placeholders("%{open")
