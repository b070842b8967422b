"""dotlocale exception hierarchy with structured diagnostics.

All exceptions can carry a Diagnostic object for rich error information.

Hierarchy:
    DotLocaleError
    ├─ DocumentError (abort loading of one document)
    │   ├─ DuplicateKeyInDocumentError
    │   ├─ UnsupportedLeafTypeError
    │   ├─ InvalidKeyError
    │   └─ DepthLimitExceededError
    ├─ InterpolationError (surfaced to the caller of render)
    │   ├─ MissingInterpolationArgError
    │   └─ UnterminatedPlaceholderError
    ├─ KeyNotFoundError (strict lookups only)
    ├─ MinificationCollisionError
    └─ ConfigError (also a ValueError)

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "ConfigError",
    "DepthLimitExceededError",
    "DocumentError",
    "DotLocaleError",
    "DuplicateKeyInDocumentError",
    "InterpolationError",
    "InvalidKeyError",
    "KeyNotFoundError",
    "MinificationCollisionError",
    "MissingInterpolationArgError",
    "UnsupportedLeafTypeError",
    "UnterminatedPlaceholderError",
]


class DotLocaleError(Exception):
    """Base exception for all dotlocale errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize DotLocaleError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)


class DocumentError(DotLocaleError):
    """Structural error in one locale document.

    Aborts loading of that document only; other documents still load.

    Attributes:
        source_id: Document the error was found in (empty if unknown)
    """

    def __init__(self, message: str | Diagnostic, *, source_id: str = "") -> None:
        super().__init__(message)
        self.source_id = source_id


class DuplicateKeyInDocumentError(DocumentError):
    """The same key path is defined twice.

    Raised for duplicate mapping keys inside one document, for paths that
    a document reaches twice, and for a leaf/branch clash on one path
    (``a.b`` as text in one document, ``a.b.c`` in another).

    Attributes:
        key: The clashing dotted key
    """

    def __init__(
        self, message: str | Diagnostic, *, key: str, source_id: str = ""
    ) -> None:
        super().__init__(message, source_id=source_id)
        self.key = key


class UnsupportedLeafTypeError(DocumentError):
    """A leaf is neither text, number, bool, sequence nor mapping (e.g. null).

    Attributes:
        key: Dotted path of the offending leaf
        type_name: Python type name of the leaf
    """

    def __init__(
        self, message: str | Diagnostic, *, key: str, type_name: str, source_id: str = ""
    ) -> None:
        super().__init__(message, source_id=source_id)
        self.key = key
        self.type_name = type_name


class InvalidKeyError(DocumentError):
    """Key has zero segments, an empty segment, or a segment with the delimiter."""


class DepthLimitExceededError(DocumentError):
    """Document nesting exceeds the configured maximum depth."""


class InterpolationError(DotLocaleError):
    """Placeholder substitution failed; never silently falls back to the template."""


class MissingInterpolationArgError(InterpolationError):
    """Template references a placeholder the caller did not supply.

    Attributes:
        name: Placeholder name that had no argument
    """

    def __init__(self, message: str | Diagnostic, *, name: str) -> None:
        super().__init__(message)
        self.name = name


class UnterminatedPlaceholderError(InterpolationError):
    """Open marker without a matching close marker before end of text.

    Attributes:
        position: Character offset of the open marker
    """

    def __init__(self, message: str | Diagnostic, *, position: int) -> None:
        super().__init__(message)
        self.position = position


class KeyNotFoundError(DotLocaleError, LookupError):
    """Key missing from every locale of the fallback chain (strict mode).

    Non-strict lookups report NotFound through the return value instead.

    Attributes:
        key: The key that was looked up
        chain: Locales that were tried, in order
    """

    def __init__(
        self, message: str | Diagnostic, *, key: str, chain: tuple[str, ...]
    ) -> None:
        super().__init__(message)
        self.key = key
        self.chain = chain


class MinificationCollisionError(DotLocaleError):
    """Short-code generation could not resolve a collision in bounded attempts.

    Attributes:
        key: Key that could not be assigned a unique code
    """

    def __init__(self, message: str | Diagnostic, *, key: str) -> None:
        super().__init__(message)
        self.key = key


class ConfigError(DotLocaleError, ValueError):
    """Invalid configuration value or unknown configuration option."""
