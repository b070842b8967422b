"""Key minification: short, stable codes for long keys.

A code is ``prefix + base62(sha256(key))[:length]``. Keys no longer than
the threshold are kept verbatim. When two keys in one run would share a
code, the later key (in first-seen order) is re-hashed with a counter
salt until it is unique.

Codes depend only on the keys and the order they were first seen, so
repeated runs over unchanged sources produce the same mapping.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable

from dotlocale.config import MinifyConfig
from dotlocale.constants import MAX_MINIFY_ATTEMPTS, MAX_MINIFY_LENGTH
from dotlocale.diagnostics import MinificationCollisionError
from dotlocale.diagnostics.templates import ErrorTemplate
from dotlocale.localization.types import Key

__all__ = [
    "BASE62_ALPHABET",
    "base62",
    "minify_key",
    "minify_keys",
]

logger = logging.getLogger(__name__)

BASE62_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def base62(data: bytes) -> str:
    """Encode bytes as a base62 string (big-endian, no padding).

    Example:
        >>> base62(b"\\x00\\x3d")
        'z'
    """
    number = int.from_bytes(data, "big")
    if number == 0:
        return BASE62_ALPHABET[0]
    digits: list[str] = []
    while number:
        number, remainder = divmod(number, 62)
        digits.append(BASE62_ALPHABET[remainder])
    return "".join(reversed(digits))


def minify_key(key: Key, length: int, prefix: str = "", *, salt: int = 0) -> str:
    """Short code for ``key``; ``salt`` > 0 derives alternative codes."""
    material = key if salt == 0 else f"{key}\x00{salt}"
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return prefix + base62(digest).rjust(MAX_MINIFY_LENGTH, BASE62_ALPHABET[0])[:length]


def minify_keys(keys: Iterable[Key], config: MinifyConfig) -> dict[Key, str]:
    """Assign every distinct key a collision-free code.

    Args:
        keys: Keys in the global deterministic order (first-seen wins)
        config: Length, prefix and threshold; ``enabled`` is not consulted

    Returns:
        ``key -> code`` in first-seen key order

    Raises:
        MinificationCollisionError: No unique code within MAX_MINIFY_ATTEMPTS
    """
    mapping: dict[Key, str] = {}
    used: dict[str, Key] = {}
    for key in dict.fromkeys(keys):
        if len(key) <= config.threshold:
            code = key
        else:
            for salt in range(MAX_MINIFY_ATTEMPTS):
                code = minify_key(key, config.length, config.prefix, salt=salt)
                if used.get(code, key) == key:
                    break
                logger.debug("Code %s of %s collides with %s, probing", code, key, used[code])
            else:
                raise MinificationCollisionError(
                    ErrorTemplate.minification_collision(key, MAX_MINIFY_ATTEMPTS), key=key
                )
        if used.get(code, key) != key:
            # Verbatim short key equal to an earlier key's code
            raise MinificationCollisionError(
                ErrorTemplate.minification_collision(key, 1), key=key
            )
        used[code] = key
        mapping[key] = code
    logger.info("Minified %d key(s)", len(mapping))
    return mapping
