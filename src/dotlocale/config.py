"""Project configuration.

Two frozen dataclasses carry every tunable of the lookup engine and the
extraction tool. ``LocalizationConfig.load(root)`` reads them from the
``[tool.dotlocale]`` table of ``<root>/pyproject.toml``::

    [tool.dotlocale]
    default-locale = "en"
    fallback = ["en-GB", "en"]          # a single string is accepted too
    available-locales = ["en", "fr"]
    load-path = "locales"
    placeholder-markers = ["%{", "}"]
    call-markers = ["t", "tr"]
    strict = false
    minify-key = true
    minify-key-len = 12
    minify-key-prefix = "T."
    minify-key-thresh = 8

Option names accept ``kebab-case`` or ``snake_case``. Unknown options and
ill-typed values raise ConfigError.

Python 3.13+.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from os import PathLike
from pathlib import Path

from dotlocale.constants import (
    DEFAULT_CALL_MARKERS,
    DEFAULT_LOAD_PATH,
    DEFAULT_LOCALE,
    DEFAULT_MINIFY_LENGTH,
    DEFAULT_MINIFY_PREFIX,
    DEFAULT_MINIFY_THRESHOLD,
    MAX_MINIFY_LENGTH,
)
from dotlocale.diagnostics import ConfigError
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.localization.fallback import build_fallback_chain
from dotlocale.localization.interpolate import DEFAULT_MARKERS, PlaceholderMarkers
from dotlocale.localization.types import LocaleId

__all__ = [
    "CONFIG_TABLE",
    "LocalizationConfig",
    "MinifyConfig",
]

logger = logging.getLogger(__name__)

CONFIG_TABLE: str = "dotlocale"
"""Name of the table under ``[tool]`` in pyproject.toml."""


def _invalid(option: str, reason: str) -> ConfigError:
    return ConfigError(ErrorTemplate.invalid_config(option, reason))


@dataclass(frozen=True, slots=True)
class MinifyConfig:
    """Key minification settings.

    Attributes:
        enabled: Replace keys with short codes during extraction
        length: Length of the hash part of a code
        prefix: Text prepended to every code
        threshold: Keys no longer than this stay verbatim (0 minifies every key)
    """

    enabled: bool = False
    length: int = DEFAULT_MINIFY_LENGTH
    prefix: str = DEFAULT_MINIFY_PREFIX
    threshold: int = DEFAULT_MINIFY_THRESHOLD

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ConfigError: If length is outside 1..MAX_MINIFY_LENGTH or threshold
                is negative
        """
        if not 0 < self.length <= MAX_MINIFY_LENGTH:
            raise _invalid(
                "minify-key-len",
                f"must be between 1 and {MAX_MINIFY_LENGTH}, got {self.length}",
            )
        if self.threshold < 0:
            raise _invalid("minify-key-thresh", f"must not be negative, got {self.threshold}")


@dataclass(frozen=True, slots=True)
class LocalizationConfig:
    """Immutable configuration for lookup and extraction.

    Constructing ``LocalizationConfig()`` with no arguments produces a usable
    configuration: English default, no extra fallbacks, ``%{name}``
    placeholders.

    Attributes:
        default_locale: Locale tried last in every fallback chain
        fallback_locales: Locales tried after the requested one, in order
        placeholder_markers: Interpolation delimiters
        call_markers: Function/macro names whose first argument is a key
        minify: Key minification settings
        load_path: Directory holding locale documents
        available_locales: Explicit locale list; empty means "whatever loads"
        strict: Raise KeyNotFoundError on lookup misses, fail extraction on
            missing keys

    Example:
        >>> config = LocalizationConfig(default_locale="en", fallback_locales=("fr",))
        >>> config.fallback_chain("de-AT")
        ('de-AT', 'de', 'fr', 'en')
    """

    default_locale: LocaleId = DEFAULT_LOCALE
    fallback_locales: tuple[LocaleId, ...] = ()
    placeholder_markers: PlaceholderMarkers = DEFAULT_MARKERS
    call_markers: frozenset[str] = DEFAULT_CALL_MARKERS
    minify: MinifyConfig = field(default_factory=MinifyConfig)
    load_path: str = DEFAULT_LOAD_PATH
    available_locales: tuple[LocaleId, ...] = ()
    strict: bool = False

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ConfigError: If the default locale is empty or no call marker is set
        """
        if not self.default_locale:
            raise _invalid("default-locale", "must not be empty")
        if not self.call_markers:
            raise _invalid("call-markers", "at least one marker is required")
        if any(not marker.isidentifier() for marker in self.call_markers):
            raise _invalid(
                "call-markers", f"markers must be identifiers, got {sorted(self.call_markers)}"
            )

    def fallback_chain(self, locale: LocaleId) -> tuple[LocaleId, ...]:
        """Fallback chain for ``locale`` under this configuration."""
        return build_fallback_chain(locale, self.fallback_locales, self.default_locale)

    def with_overrides(self, **changes: object) -> LocalizationConfig:
        """Copy with some fields replaced (CLI flags over file settings)."""
        return replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_mapping(cls, options: Mapping[str, object]) -> LocalizationConfig:
        """Build a configuration from a ``[tool.dotlocale]``-style mapping.

        Raises:
            ConfigError: Unknown option or ill-typed value
        """
        normalized = {str(name).replace("-", "_"): value for name, value in options.items()}
        unknown = sorted(set(normalized) - _OPTION_NAMES)
        if unknown:
            known = ", ".join(sorted(_OPTION_NAMES))
            raise _invalid(unknown[0], f"unknown option (known: {known})")

        kwargs: dict[str, object] = {}
        minify_kwargs: dict[str, object] = {}
        for name, value in normalized.items():
            match name:
                case "default_locale" | "load_path":
                    kwargs[name] = _as_str(name, value)
                case "fallback" | "fallback_locales":
                    kwargs["fallback_locales"] = _as_str_tuple(name, value)
                case "available_locales":
                    kwargs[name] = _as_str_tuple(name, value)
                case "call_markers":
                    kwargs[name] = frozenset(_as_str_tuple(name, value))
                case "placeholder_markers":
                    markers = _as_str_tuple(name, value)
                    if len(markers) != 2:
                        raise _invalid(name, "expected [open, close]")
                    try:
                        kwargs[name] = PlaceholderMarkers(*markers)
                    except ValueError as e:
                        raise _invalid(name, str(e)) from e
                case "strict":
                    kwargs[name] = _as_bool(name, value)
                case "minify_key":
                    minify_kwargs["enabled"] = _as_bool(name, value)
                case "minify_key_len":
                    minify_kwargs["length"] = _as_int(name, value)
                case "minify_key_prefix":
                    minify_kwargs["prefix"] = _as_str(name, value, allow_empty=True)
                case "minify_key_thresh":
                    minify_kwargs["threshold"] = _as_int(name, value)
        if minify_kwargs:
            kwargs["minify"] = MinifyConfig(**minify_kwargs)  # type: ignore[arg-type]
        return cls(**kwargs)  # type: ignore[arg-type]

    @classmethod
    def load(cls, root: str | PathLike[str] = ".") -> LocalizationConfig:
        """Read ``[tool.dotlocale]`` from ``<root>/pyproject.toml``.

        A missing file or table yields the defaults.

        Raises:
            ConfigError: Malformed TOML, unknown option or ill-typed value
        """
        path = Path(root) / "pyproject.toml"
        if not path.is_file():
            logger.debug("No %s, using default configuration", path)
            return cls()
        try:
            with path.open("rb") as f:
                document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise _invalid(str(path), str(e)) from e

        table = document.get("tool", {}).get(CONFIG_TABLE)
        if table is None:
            logger.debug("No [tool.%s] table in %s, using defaults", CONFIG_TABLE, path)
            return cls()
        if not isinstance(table, dict):
            raise _invalid(f"tool.{CONFIG_TABLE}", "must be a table")
        config = cls.from_mapping(table)
        logger.info("Loaded configuration from %s", path)
        return config


_OPTION_NAMES = frozenset({
    "available_locales",
    "call_markers",
    "default_locale",
    "fallback",
    "fallback_locales",
    "load_path",
    "minify_key",
    "minify_key_len",
    "minify_key_prefix",
    "minify_key_thresh",
    "placeholder_markers",
    "strict",
})


def _as_str(name: str, value: object, *, allow_empty: bool = False) -> str:
    if not isinstance(value, str) or (not value and not allow_empty):
        raise _invalid(name, f"expected a non-empty string, got {value!r}")
    return value


def _as_str_tuple(name: str, value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Iterable) or isinstance(value, Mapping):
        raise _invalid(name, f"expected a string or a list of strings, got {value!r}")
    return tuple(_as_str(name, item) for item in value)


def _as_bool(name: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise _invalid(name, f"expected true or false, got {value!r}")
    return value


def _as_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _invalid(name, f"expected an integer, got {value!r}")
    return value
