"""Exception hierarchy for specfront.

All exceptions inherit from :class:`SpecfrontError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specfront.exit_codes`
and an optional ``context`` -- the
:meth:`~specfront.context.Context.description` active when the error was
raised. When a context is present the error renders as
``"path.to.field: message"`` so the top-level caller can report a precise
location instead of an opaque traceback.

Every error is fatal to the enclosing compilation; none are retried.

Subclass hierarchy::

    SpecfrontError               (exit 1)
    +-- InvalidUsageError        (exit 2)
    +-- ConfigError              (exit 1)
    +-- FetchError               (exit 6)
    +-- FileNotFoundError_       (exit 4)
    +-- ParseError               (exit 7)
    +-- UnresolvedReferenceError (exit 8)
    +-- ExtensionError           (exit 10)
    +-- ExtensionProtocolError   (exit 11)
"""

from __future__ import annotations

from typing import Optional

from specfront.exit_codes import (
    EXIT_EXTENSION_ERROR,
    EXIT_EXTENSION_PROTOCOL_ERROR,
    EXIT_FETCH_ERROR,
    EXIT_FILE_NOT_FOUND,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_PARSE_ERROR,
    EXIT_UNRESOLVED_REFERENCE,
)


class SpecfrontError(Exception):
    """Base exception for all specfront errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specfront.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        context: Optional context description (e.g. ``"$root.paths./pets"``)
            prefixed to the message when rendered.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        exit_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        if exit_code is not None:
            self.exit_code = exit_code

    def __str__(self) -> str:
        if self.context:
            return f"{self.context}: {self.message}"
        return self.message

    def with_context(self, context: str) -> "SpecfrontError":
        """Attach *context* unless a more specific one is already present.

        Errors raised deep in a descent get annotated by the innermost
        caller that knows its position; outer callers leave that alone.

        Returns:
            This same error instance, for ``raise exc.with_context(...)``.
        """
        if not self.context:
            self.context = context
        return self


class InvalidUsageError(SpecfrontError):
    """Raised for invalid CLI arguments, such as an unknown config key."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(SpecfrontError):
    """Raised for configuration problems (invalid JSON, unknown handler names)."""

    exit_code = EXIT_GENERIC_FAILURE


class FetchError(SpecfrontError):
    """Raised when a URL locator cannot be fetched.

    Covers network-level failures (DNS, refused connection, timeout when one
    is configured) and any non-2xx response. There is exactly one attempt
    per locator.

    Attributes:
        url: The URL that failed.
        status_code: The HTTP status, or ``None`` for network failures.
    """

    exit_code = EXIT_FETCH_ERROR

    def __init__(
        self,
        message: str,
        url: str = "",
        status_code: Optional[int] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, context=context)
        self.url = url
        self.status_code = status_code


class FileNotFoundError_(SpecfrontError, FileNotFoundError):
    """Raised when a filesystem locator names a file that does not exist.

    Named with a trailing underscore to avoid shadowing the built-in
    ``FileNotFoundError``, which it also subclasses so that generic
    ``except FileNotFoundError`` handlers keep working.
    """

    exit_code = EXIT_FILE_NOT_FOUND

    def __init__(self, message: str, path: str = "", context: Optional[str] = None):
        super().__init__(message, context=context)
        self.path = path


class ParseError(SpecfrontError):
    """Raised when a document is not well-formed YAML/JSON or cannot be read.

    Attributes:
        locator: The document that failed to parse.
        line: 1-based line of the problem, when the parser reports one.
        column: 1-based column of the problem, when the parser reports one.
    """

    exit_code = EXIT_PARSE_ERROR

    def __init__(
        self,
        message: str,
        locator: str = "",
        line: Optional[int] = None,
        column: Optional[int] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, context=context)
        self.locator = locator
        self.line = line
        self.column = column


class UnresolvedReferenceError(SpecfrontError):
    """Raised when a ``$ref`` pointer cannot be followed.

    Attributes:
        ref: The full reference string as written.
        segment: The pointer segment that failed.
        path: The pointer path up to and including the failing segment,
            e.g. ``"definitions/Missing"``.
    """

    exit_code = EXIT_UNRESOLVED_REFERENCE

    def __init__(
        self,
        message: str,
        ref: str = "",
        segment: str = "",
        path: str = "",
        context: Optional[str] = None,
    ):
        super().__init__(message, context=context)
        self.ref = ref
        self.segment = segment
        self.path = path


class ExtensionError(SpecfrontError):
    """Raised when an extension handler reports errors for a vendor extension.

    Attributes:
        handler: Name of the handler that reported the errors.
        extension_name: The vendor extension field being compiled.
        messages: The error messages returned by the handler.
    """

    exit_code = EXIT_EXTENSION_ERROR

    def __init__(
        self,
        message: str,
        handler: str = "",
        extension_name: str = "",
        messages: Optional[list[str]] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, context=context)
        self.handler = handler
        self.extension_name = extension_name
        self.messages = list(messages or [])


class ExtensionProtocolError(SpecfrontError):
    """Raised when an extension handler process cannot be run or misbehaves.

    A missing executable, a non-zero exit status, and output that does not
    decode to a valid response are all treated identically: fatal.

    Attributes:
        handler: Name of the handler executable.
        returncode: The process exit status, when the process ran.
    """

    exit_code = EXIT_EXTENSION_PROTOCOL_ERROR

    def __init__(
        self,
        message: str,
        handler: str = "",
        returncode: Optional[int] = None,
        context: Optional[str] = None,
    ):
        super().__init__(message, context=context)
        self.handler = handler
        self.returncode = returncode
