"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specfront.exceptions.SpecfrontError` subclass.
External tooling (CI scripts, shell wrappers) can inspect the exit code to
determine the failure class without parsing stderr.

Example::

    $ specfront resolve openapi.yaml '#/definitions/Missing'
    $ echo $?
    8   # EXIT_UNRESOLVED_REFERENCE -- the pointer named a missing key
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_FILE_NOT_FOUND = 4
"""A local document named by a locator does not exist."""

EXIT_FETCH_ERROR = 6
"""A remote document could not be fetched (network failure or non-2xx status)."""

EXIT_PARSE_ERROR = 7
"""A document could not be read or is not well-formed YAML/JSON."""

EXIT_UNRESOLVED_REFERENCE = 8
"""A ``$ref`` pointer named a key or index that does not exist."""

EXIT_EXTENSION_ERROR = 10
"""An extension handler reported errors for a vendor extension."""

EXIT_EXTENSION_PROTOCOL_ERROR = 11
"""An extension handler process crashed or produced undecodable output."""
