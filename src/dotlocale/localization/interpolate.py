"""Placeholder interpolation for translation templates.

Single left-to-right scan of the template: an open marker starts a
placeholder whose name runs to the next close marker and is replaced by the
caller's argument. Substituted text is inserted verbatim and never scanned
again, so arguments cannot inject placeholders.

Escapes (default markers ``%{`` / ``}``):
    ``%{%{``  -> ``%{``   doubled open marker
    ``%%``    -> ``%``    doubled sigil (first character of the open marker)

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from dotlocale.constants import DEFAULT_PLACEHOLDER_CLOSE, DEFAULT_PLACEHOLDER_OPEN
from dotlocale.diagnostics import (
    MissingInterpolationArgError,
    UnterminatedPlaceholderError,
)
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.localization.values import TranslationValue, coerce_text

__all__ = [
    "DEFAULT_MARKERS",
    "Interpolator",
    "PlaceholderMarkers",
    "placeholders",
    "render",
]


@dataclass(frozen=True, slots=True)
class PlaceholderMarkers:
    """Open/close delimiters of a placeholder.

    Attributes:
        open: Marker starting a placeholder (default ``%{``)
        close: Marker ending a placeholder (default ``}``)
    """

    open: str = DEFAULT_PLACEHOLDER_OPEN
    close: str = DEFAULT_PLACEHOLDER_CLOSE

    def __post_init__(self) -> None:
        """Validate markers.

        Raises:
            ValueError: If a marker is empty or both markers are equal
        """
        if not self.open or not self.close:
            msg = f"Placeholder markers must be non-empty, got ({self.open!r}, {self.close!r})"
            raise ValueError(msg)
        if self.open == self.close:
            msg = f"Open and close placeholder markers must differ, got {self.open!r}"
            raise ValueError(msg)

    @property
    def sigil(self) -> str:
        """First character of the open marker."""
        return self.open[0]

    @property
    def sigil_escape(self) -> str | None:
        """Doubled sigil, or None when it would be ambiguous with the open marker."""
        pair = self.sigil * 2
        if len(self.open) == 1 or self.open.startswith(pair):
            return None
        return pair


DEFAULT_MARKERS = PlaceholderMarkers()


def _scan(text: str, markers: PlaceholderMarkers) -> Iterator[tuple[str, int, bool]]:
    """Split a template into literal chunks and placeholder names.

    Yields:
        ``(chunk, offset, is_placeholder)``; for placeholders ``chunk`` is the
        name and ``offset`` the position of the open marker.

    Raises:
        UnterminatedPlaceholderError: Open marker without close marker
    """
    open_marker, close_marker = markers.open, markers.close
    escaped_open = open_marker * 2
    sigil = markers.sigil
    sigil_escape = markers.sigil_escape
    pos = 0
    length = len(text)

    while pos < length:
        next_sigil = text.find(sigil, pos)
        if next_sigil == -1:
            yield text[pos:], pos, False
            return
        if next_sigil > pos:
            yield text[pos:next_sigil], pos, False
        pos = next_sigil

        if text.startswith(escaped_open, pos):
            yield open_marker, pos, False
            pos += len(escaped_open)
        elif sigil_escape is not None and text.startswith(sigil_escape, pos):
            yield sigil, pos, False
            pos += len(sigil_escape)
        elif text.startswith(open_marker, pos):
            name_start = pos + len(open_marker)
            end = text.find(close_marker, name_start)
            if end == -1:
                raise UnterminatedPlaceholderError(
                    ErrorTemplate.unterminated_placeholder(pos, close_marker),
                    position=pos,
                )
            yield text[name_start:end], pos, True
            pos = end + len(close_marker)
        else:
            yield sigil, pos, False
            pos += 1


def _template_text(template: TranslationValue | str) -> str:
    return template.text if isinstance(template, TranslationValue) else template


@dataclass(frozen=True, slots=True)
class Interpolator:
    """Placeholder substitution service bound to one marker pair.

    Attributes:
        markers: Placeholder delimiters

    Example:
        >>> Interpolator().render("Hello, %{name}!", {"name": "World"})
        'Hello, World!'
        >>> Interpolator(PlaceholderMarkers("{{", "}}")).render("{{n}} items", {"n": 3})
        '3 items'
    """

    markers: PlaceholderMarkers = DEFAULT_MARKERS

    def render(
        self,
        template: TranslationValue | str,
        args: Mapping[str, object] | None = None,
    ) -> str:
        """Substitute every placeholder in ``template`` with its argument.

        Args:
            template: Stored translation (or raw template text)
            args: Placeholder name -> value; non-text values use the
                canonical scalar rendering (``true``, ``3``, ``0.5``)

        Returns:
            Rendered text

        Raises:
            MissingInterpolationArgError: A placeholder has no argument
            UnterminatedPlaceholderError: An open marker is never closed
        """
        arguments = args if args is not None else {}
        parts: list[str] = []
        for chunk, _offset, is_placeholder in _scan(_template_text(template), self.markers):
            if not is_placeholder:
                parts.append(chunk)
                continue
            if chunk not in arguments:
                raise MissingInterpolationArgError(
                    ErrorTemplate.missing_interpolation_arg(chunk), name=chunk
                )
            parts.append(coerce_text(arguments[chunk]))
        return "".join(parts)

    def placeholders(self, template: TranslationValue | str) -> tuple[str, ...]:
        """Placeholder names in first-use order, without duplicates.

        Raises:
            UnterminatedPlaceholderError: An open marker is never closed
        """
        names = (
            chunk
            for chunk, _offset, is_placeholder in _scan(_template_text(template), self.markers)
            if is_placeholder
        )
        return tuple(dict.fromkeys(names))


def render(
    template: TranslationValue | str,
    args: Mapping[str, object] | None = None,
    markers: PlaceholderMarkers = DEFAULT_MARKERS,
) -> str:
    """Render ``template`` with ``args``; see Interpolator.render."""
    return Interpolator(markers).render(template, args)


def placeholders(
    template: TranslationValue | str,
    markers: PlaceholderMarkers = DEFAULT_MARKERS,
) -> tuple[str, ...]:
    """Placeholder names of ``template``; see Interpolator.placeholders."""
    return Interpolator(markers).placeholders(template)
