"""Locale fallback chains.

A fallback chain is the ordered, deduplicated list of locales tried when
the requested locale lacks a key::

    [requested, *parents(requested), *configured_fallbacks, default]

Parents come from truncating subtags: ``zh-Hant-TW`` -> ``zh-Hant`` -> ``zh``.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from dotlocale.localization.types import Key, LocaleId

__all__ = [
    "FallbackInfo",
    "build_fallback_chain",
    "locale_parents",
]

_SUBTAG_SEPARATOR = re.compile(r"[-_]")


def locale_parents(locale: LocaleId) -> tuple[LocaleId, ...]:
    """Progressively truncated forms of ``locale``, most specific first.

    Example:
        >>> locale_parents("zh-Hant-TW")
        ('zh-Hant', 'zh')
        >>> locale_parents("en")
        ()
    """
    parents: list[LocaleId] = []
    current = locale
    while True:
        separators = list(_SUBTAG_SEPARATOR.finditer(current))
        if not separators:
            break
        current = current[: separators[-1].start()]
        if not current:
            break
        parents.append(current)
    return tuple(parents)


def build_fallback_chain(
    requested: LocaleId,
    fallbacks: Iterable[LocaleId] = (),
    default: LocaleId | None = None,
    *,
    implicit_parents: bool = True,
) -> tuple[LocaleId, ...]:
    """Build the deduplicated fallback chain for ``requested``.

    Args:
        requested: Locale asked for by the caller
        fallbacks: Configured fallback locales, in order
        default: Default locale, always tried last
        implicit_parents: Insert truncated parents of ``requested`` right after it

    Returns:
        Chain in try order; first occurrence wins on duplicates

    Raises:
        ValueError: If ``requested`` is empty

    Example:
        >>> build_fallback_chain("en-US", ["fr"], "en")
        ('en-US', 'en', 'fr')
    """
    if not requested:
        msg = "Locale identifier cannot be empty"
        raise ValueError(msg)
    chain: list[LocaleId] = [requested]
    if implicit_parents:
        chain.extend(locale_parents(requested))
    chain.extend(locale for locale in fallbacks if locale)
    if default:
        chain.append(default)
    # dict.fromkeys() removes duplicates while maintaining insertion order
    return tuple(dict.fromkeys(chain))


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Provided to the ``on_fallback`` callback when a key is resolved from a
    later locale of the chain instead of the requested one.

    Attributes:
        requested_locale: Locale the caller asked for
        resolved_locale: Locale that actually contained the key
        key: The key that was resolved
    """

    requested_locale: LocaleId
    resolved_locale: LocaleId
    key: Key
