"""Lookup API: translation store + configuration + interpolation.

``Localization`` is the boundary generated accessors and application code
call. It resolves a key through the configured fallback chain and renders
the winning template:

    get_translation(locale, key, args)
        = render(store.lookup_with_fallback(locale, key, chain), args)

Lookup misses are visible, never blank: the key itself is returned, or
KeyNotFoundError is raised in strict mode. Interpolation errors always
propagate to the caller.

The store is immutable, so one Localization can serve any number of
threads without locking.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from os import PathLike
from pathlib import Path

from dotlocale.config import LocalizationConfig
from dotlocale.diagnostics import KeyNotFoundError
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.locale_utils import get_system_locale, negotiate_locale
from dotlocale.localization.fallback import FallbackInfo
from dotlocale.localization.interpolate import Interpolator
from dotlocale.localization.store import TranslationEntry, TranslationStore
from dotlocale.localization.types import Key, LocaleId

__all__ = ["Localization"]

logger = logging.getLogger(__name__)


class Localization:
    """Translated, interpolated text by key and locale with fallback.

    Example:
        >>> store = TranslationStore.load([
        ...     ("en", "en.yml", {"hello": "Hello, %{name}!"}),
        ...     ("fr", "fr.yml", {"hello": "Bonjour, %{name} !"}),
        ... ])
        >>> l10n = Localization(store)
        >>> l10n.get_translation("fr-CA", "hello", {"name": "Anna"})
        'Bonjour, Anna !'
        >>> l10n.get_translation("fr", "missing.key")
        'missing.key'

    Attributes:
        store: The merged translations
        config: Default locale, fallbacks, placeholder markers, strictness
    """

    __slots__ = ("_config", "_interpolator", "_on_fallback", "_store")

    def __init__(
        self,
        store: TranslationStore,
        config: LocalizationConfig | None = None,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Initialize the lookup API.

        Args:
            store: Loaded translations
            config: Lookup settings; defaults to ``LocalizationConfig()``
            on_fallback: Optional callback invoked when a key resolves from a
                locale other than the requested one. Useful for finding
                untranslated keys at runtime.
        """
        self._store = store
        self._config = config if config is not None else LocalizationConfig()
        self._interpolator = Interpolator(self._config.placeholder_markers)
        self._on_fallback = on_fallback

    @classmethod
    def from_path(
        cls,
        root: str | PathLike[str] | None = None,
        config: LocalizationConfig | None = None,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
        workers: int = 1,
    ) -> Localization:
        """Load every locale document under ``root`` (default: ``config.load_path``).

        Document-level load errors are kept in ``store.load_errors``; in
        strict mode the first one is raised instead.
        """
        config = config if config is not None else LocalizationConfig()
        path = Path(root) if root is not None else Path(config.load_path)
        store = TranslationStore.from_path(path, workers=workers, fail_fast=config.strict)
        return cls(store, config, on_fallback=on_fallback)

    def __repr__(self) -> str:
        return (
            f"Localization(default_locale={self._config.default_locale!r}, "
            f"locales={self.available_locales!r})"
        )

    @property
    def store(self) -> TranslationStore:
        return self._store

    @property
    def config(self) -> LocalizationConfig:
        return self._config

    @property
    def available_locales(self) -> tuple[LocaleId, ...]:
        """Configured locale list, or every loaded locale when none is configured."""
        return self._config.available_locales or self._store.locales

    def fallback_chain(self, locale: LocaleId) -> tuple[LocaleId, ...]:
        """Locales tried for ``locale``, in order."""
        return self._config.fallback_chain(locale)

    def resolve(self, locale: LocaleId, key: Key) -> TranslationEntry | None:
        """Winning entry for ``key`` along the fallback chain, or None (NotFound).

        Invokes ``on_fallback`` when the entry comes from another locale.
        """
        entry = self._store.find(locale, key, self.fallback_chain(locale))
        if entry is not None and entry.locale != locale:
            logger.debug("Key %s resolved from %s instead of %s", key, entry.locale, locale)
            if self._on_fallback is not None:
                self._on_fallback(
                    FallbackInfo(requested_locale=locale, resolved_locale=entry.locale, key=key)
                )
        return entry

    def has_key(self, key: Key, locale: LocaleId | None = None) -> bool:
        """Check whether ``key`` resolves for ``locale`` (default locale if omitted)."""
        locale = locale or self._config.default_locale
        return self._store.find(locale, key, self.fallback_chain(locale)) is not None

    def get_translation(
        self,
        locale: LocaleId,
        key: Key,
        args: Mapping[str, object] | None = None,
    ) -> str:
        """Rendered translation of ``key`` for ``locale``.

        Args:
            locale: Requested locale
            key: Dotted key
            args: Placeholder values

        Returns:
            Rendered text, or ``key`` itself when no locale in the chain has it

        Raises:
            KeyNotFoundError: Key missing everywhere and ``config.strict`` is set
            MissingInterpolationArgError: Placeholder without argument
            UnterminatedPlaceholderError: Malformed template
        """
        entry = self.resolve(locale, key)
        if entry is None:
            chain = self.fallback_chain(locale)
            if self._config.strict:
                raise KeyNotFoundError(
                    ErrorTemplate.key_not_found(key, chain), key=key, chain=chain
                )
            logger.warning("Translation missing: %s (tried %s)", key, ", ".join(chain))
            return key
        return self._interpolator.render(entry.value, args)

    def negotiate(
        self,
        preferred: Iterable[LocaleId] | None = None,
        *,
        default: LocaleId | None = None,
    ) -> LocaleId:
        """Best available locale for user preferences (Accept-Language order).

        Without ``preferred`` the system locale (LC_ALL, LC_MESSAGES, LANG)
        is the only preference. Falls back to ``default`` or the configured
        default locale.
        """
        if preferred is None:
            preferred = [get_system_locale()]
        chosen = negotiate_locale(preferred, self.available_locales)
        if chosen is not None:
            return chosen
        return default or self._config.default_locale
