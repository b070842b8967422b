"""Translation leaf values.

Documents allow heterogeneous leaves (text, numbers, booleans). Each leaf is
kept as a tagged TranslationValue with one explicit "to text" conversion
rule, instead of relying on ad-hoc str() calls at lookup time.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from dotlocale.enums import ValueKind

__all__ = [
    "TranslationValue",
    "coerce_text",
]

type Scalar = str | bool | int | float


def coerce_text(value: object) -> str:
    """Convert a scalar to its canonical text form.

    Booleans render as ``true``/``false`` (document spelling, not Python's),
    integers in decimal, floats in shortest round-trip form. Any other
    object falls back to ``str()``.

    Example:
        >>> coerce_text(True)
        'true'
        >>> coerce_text(0.1)
        '0.1'
    """
    match value:
        case str():
            return value
        case bool():
            return "true" if value else "false"
        case int():
            return str(value)
        case float():
            return repr(value)
        case _:
            return str(value)


@dataclass(frozen=True, slots=True)
class TranslationValue:
    """A scalar leaf from a locale document.

    Attributes:
        raw: The deserialized scalar
        kind: Which scalar variant ``raw`` holds
    """

    raw: Scalar
    kind: ValueKind

    @classmethod
    def from_scalar(cls, value: object) -> TranslationValue | None:
        """Wrap a scalar, or return None when ``value`` is not a supported scalar."""
        match value:
            case str():
                return cls(value, ValueKind.TEXT)
            case bool():
                return cls(value, ValueKind.BOOLEAN)
            case int():
                return cls(value, ValueKind.INTEGER)
            case float():
                return cls(value, ValueKind.FLOAT)
            case _:
                return None

    @classmethod
    def text_value(cls, text: str) -> TranslationValue:
        """Shorthand for a TEXT value."""
        return cls(text, ValueKind.TEXT)

    @property
    def text(self) -> str:
        """Canonical text of the value."""
        return coerce_text(self.raw)

    def __str__(self) -> str:
        return self.text
