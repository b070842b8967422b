"""Enumerations for dotlocale type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ValueKind(StrEnum):
    """Kind of scalar stored in a translation leaf.

    StrEnum provides automatic string conversion: str(ValueKind.TEXT) == "text"
    """

    TEXT = "text"
    """String leaf: hello: Hello"""

    INTEGER = "integer"
    """Integer leaf: retries: 3"""

    FLOAT = "float"
    """Floating point leaf: ratio: 0.5"""

    BOOLEAN = "boolean"
    """Boolean leaf: enabled: true"""


class LoadStatus(StrEnum):
    """Outcome of loading a single locale document.

    StrEnum provides automatic string conversion: str(LoadStatus.SUCCESS) == "success"
    """

    SUCCESS = "success"
    """Document parsed, flattened and merged into the store."""

    ERROR = "error"
    """Document rejected (I/O, parse or structural error); store unaffected."""


class MissedBehavior(StrEnum):
    """How exports fill cells for keys absent from a locale."""

    DEFAULT = "default"
    """Use the default locale's text."""

    EMPTY = "empty"
    """Leave the cell empty."""


__all__ = [
    "LoadStatus",
    "MissedBehavior",
    "ValueKind",
]
