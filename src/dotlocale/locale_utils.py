"""Locale utilities: BCP-47/POSIX conversion, negotiation, system locale.

Locale identifiers in locale documents are opaque, case-sensitive strings.
These helpers exist for the edges of the system where a locale has to be
chosen from user preferences or the environment.

Python 3.13+.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence

from dotlocale.localization.fallback import locale_parents

__all__ = [
    "get_system_locale",
    "negotiate_locale",
    "to_bcp47",
]


def to_bcp47(locale_code: str) -> str:
    """Convert a POSIX locale code to BCP-47 form (``pt_BR`` -> ``pt-BR``)."""
    return locale_code.replace("_", "-")


def negotiate_locale(
    preferred: Iterable[str], available: Sequence[str]
) -> str | None:
    """Pick the best available locale for a list of user preferences.

    Uses Babel's ``negotiate_locale`` (case-insensitive, with its alias
    table so ``de`` can match ``de-DE``), then retries each preference with
    its subtags truncated (``en-GB`` matches ``en``).

    Args:
        preferred: Preferences, best first (e.g. from Accept-Language)
        available: Locales that have translations

    Returns:
        The matching entry from ``available`` (original spelling), or None

    Example:
        >>> negotiate_locale(["fr-CA", "en"], ["en", "fr"])
        'fr'
    """
    from babel.core import negotiate_locale as babel_negotiate  # noqa: PLC0415

    preferences = [to_bcp47(code) for code in preferred if code]
    if not preferences or not available:
        return None
    by_canonical = {to_bcp47(code).lower(): code for code in available}

    chosen = babel_negotiate(preferences, list(by_canonical), sep="-")
    if chosen is not None:
        return by_canonical[chosen.lower()]

    for code in preferences:
        for parent in locale_parents(code):
            if parent.lower() in by_canonical:
                return by_canonical[parent.lower()]
    return None


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Filters out "C" and "POSIX" pseudo-locales and strips the encoding.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return "en" as fallback.

    Returns:
        Detected locale code in BCP-47 form (``de-DE``)

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return to_bcp47(system_locale.split(".")[0])
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX", ""):
            return to_bcp47(value.split(".")[0])

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return "en"
