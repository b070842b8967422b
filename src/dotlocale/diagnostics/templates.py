"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    @staticmethod
    def key_not_found(key: str, chain: tuple[str, ...]) -> Diagnostic:
        """Key absent from every locale in the fallback chain.

        Args:
            key: The key that was looked up
            chain: Locales tried, in order

        Returns:
            Diagnostic for KEY_NOT_FOUND
        """
        tried = ", ".join(chain) if chain else "<empty chain>"
        msg = f"Key '{key}' not found in any locale ({tried})"
        return Diagnostic(
            code=DiagnosticCode.KEY_NOT_FOUND,
            message=msg,
            hint="Add the key to the default locale or run 'dotlocale extract'",
            key=key,
            locale=chain[0] if chain else None,
        )

    @staticmethod
    def missing_interpolation_arg(name: str) -> Diagnostic:
        """Placeholder without a matching argument.

        Args:
            name: Placeholder name

        Returns:
            Diagnostic for MISSING_INTERPOLATION_ARG
        """
        msg = f"MissingInterpolationArg({name})"
        return Diagnostic(
            code=DiagnosticCode.MISSING_INTERPOLATION_ARG,
            message=msg,
            hint=f"Pass a value for '{name}' when rendering this translation",
        )

    @staticmethod
    def unterminated_placeholder(position: int, close_marker: str) -> Diagnostic:
        """Open marker with no close marker before end of text.

        Args:
            position: Offset of the open marker
            close_marker: The expected close marker

        Returns:
            Diagnostic for UNTERMINATED_PLACEHOLDER
        """
        msg = f"UnterminatedPlaceholder at offset {position}"
        return Diagnostic(
            code=DiagnosticCode.UNTERMINATED_PLACEHOLDER,
            message=msg,
            hint=f"Close the placeholder with '{close_marker}' or escape the marker",
        )

    @staticmethod
    def duplicate_key(key: str, source_id: str, *, clash: str | None = None) -> Diagnostic:
        """Key path defined more than once.

        Args:
            key: Dotted key path
            source_id: Document where the duplicate was found
            clash: Optional description of the clashing definition

        Returns:
            Diagnostic for DUPLICATE_KEY_IN_DOCUMENT
        """
        msg = f"DuplicateKeyInDocument: '{key}'"
        if clash:
            msg = f"{msg} ({clash})"
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_KEY_IN_DOCUMENT,
            message=msg,
            hint="Each key path may be defined once; a key cannot be both text and a group",
            source_ref=source_id or None,
            key=key,
        )

    @staticmethod
    def unsupported_leaf(key: str, type_name: str, source_id: str) -> Diagnostic:
        """Leaf of a type that cannot be coerced to text.

        Args:
            key: Dotted key path of the leaf
            type_name: Type of the leaf value
            source_id: Document containing the leaf

        Returns:
            Diagnostic for UNSUPPORTED_LEAF_TYPE
        """
        msg = f"UnsupportedLeafType: '{key}' is {type_name}"
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_LEAF_TYPE,
            message=msg,
            hint="Use text, a number, a boolean, a list or a nested mapping",
            source_ref=source_id or None,
            key=key,
        )

    @staticmethod
    def invalid_key(key: str, reason: str, source_id: str = "") -> Diagnostic:
        """Malformed key.

        Args:
            key: Offending key (as far as it could be built)
            reason: Why the key was rejected
            source_id: Document containing the key

        Returns:
            Diagnostic for INVALID_KEY
        """
        msg = f"Invalid key {key!r}: {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_KEY,
            message=msg,
            source_ref=source_id or None,
            key=key or None,
        )

    @staticmethod
    def max_depth_exceeded(max_depth: int, source_id: str = "") -> Diagnostic:
        """Document nesting too deep.

        Args:
            max_depth: Configured limit

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        msg = f"Maximum nesting depth ({max_depth}) exceeded"
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=msg,
            hint="Flatten the document or split it into several files",
            source_ref=source_id or None,
        )

    @staticmethod
    def document_unreadable(source_id: str, reason: str) -> Diagnostic:
        """Document could not be read or deserialized.

        Args:
            source_id: Path or identifier of the document
            reason: Underlying error text

        Returns:
            Diagnostic for DOCUMENT_UNREADABLE
        """
        msg = f"Cannot load '{source_id}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.DOCUMENT_UNREADABLE,
            message=msg,
            source_ref=source_id,
        )

    @staticmethod
    def merge_conflict(locale: str, key: str, winner: str, loser: str) -> Diagnostic:
        """Same (locale, key) defined by two documents; later document wins.

        Args:
            locale: Locale of the entry
            key: Dotted key
            winner: Source of the effective value
            loser: Source of the overwritten value

        Returns:
            Diagnostic (warning) for MERGE_CONFLICT
        """
        msg = f"'{locale}:{key}' from '{loser}' overridden by '{winner}'"
        return Diagnostic(
            code=DiagnosticCode.MERGE_CONFLICT,
            message=msg,
            source_ref=loser,
            key=key,
            locale=locale,
            severity="warning",
        )

    @staticmethod
    def dynamic_key_ignored(snippet: str, path: str, span: SourceSpan) -> Diagnostic:
        """Call site whose key is not a literal.

        Args:
            snippet: Source text starting at the key argument
            path: Source file
            span: Location of the call site

        Returns:
            Diagnostic (warning) for DYNAMIC_KEY_IGNORED
        """
        msg = f"DynamicKeyIgnored: non-literal key argument {snippet!r}"
        return Diagnostic(
            code=DiagnosticCode.DYNAMIC_KEY_IGNORED,
            message=msg,
            span=span,
            hint="Use a string literal, or register the key with --translate",
            source_ref=path,
            severity="warning",
        )

    @staticmethod
    def minification_collision(key: str, attempts: int) -> Diagnostic:
        """Short code could not be made unique.

        Args:
            key: Key being minified
            attempts: Number of probes made

        Returns:
            Diagnostic for MINIFICATION_COLLISION
        """
        msg = f"MinificationCollision: no unique code for '{key}' after {attempts} attempts"
        return Diagnostic(
            code=DiagnosticCode.MINIFICATION_COLLISION,
            message=msg,
            hint="Increase the minify length",
            key=key,
        )

    @staticmethod
    def missing_translation(
        key: str, locale: str, path: str | None, span: SourceSpan | None
    ) -> Diagnostic:
        """Key referenced in source but not defined.

        Returns:
            Diagnostic for MISSING_TRANSLATION
        """
        msg = f"Key '{key}' is used but not defined for '{locale}'"
        return Diagnostic(
            code=DiagnosticCode.MISSING_TRANSLATION,
            message=msg,
            span=span,
            source_ref=path,
            key=key,
            locale=locale,
        )

    @staticmethod
    def unused_translation(key: str, locale: str, source_id: str) -> Diagnostic:
        """Key defined but never referenced.

        Returns:
            Diagnostic (warning) for UNUSED_TRANSLATION
        """
        msg = f"Key '{key}' is defined for '{locale}' but never used"
        return Diagnostic(
            code=DiagnosticCode.UNUSED_TRANSLATION,
            message=msg,
            source_ref=source_id,
            key=key,
            locale=locale,
            severity="warning",
        )

    @staticmethod
    def invalid_config(option: str, reason: str) -> Diagnostic:
        """Configuration option rejected.

        Args:
            option: Option name
            reason: Why it was rejected

        Returns:
            Diagnostic for INVALID_CONFIG
        """
        msg = f"Invalid configuration '{option}': {reason}"
        return Diagnostic(
            code=DiagnosticCode.INVALID_CONFIG,
            message=msg,
            hint="See [tool.dotlocale] in pyproject.toml",
        )
