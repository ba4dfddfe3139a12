"""Exception hierarchy for restplate.

All exceptions inherit from :class:`RestplateError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`restplate.exit_codes`.
The CLI entry point :func:`restplate.app.main` catches ``RestplateError``
and exits with the appropriate code.

Templating errors are raised by the core before any I/O happens.  Transport
errors are raised by a transport (for example
:class:`~restplate.client.AsyncClient`) and travel through
:class:`~restplate.datasource.ConfigurableDataSource` unchanged.

Subclass hierarchy::

    RestplateError (exit 1)
    +-- InvalidUsageError     (exit 2)
    +-- TemplateParseError    (exit 7)
    +-- DefinitionError       (exit 8)
    +-- ConfigError           (exit 1)
    +-- TransportError        (exit 5)
        +-- AuthError         (exit 3)
        +-- NotFoundError     (exit 4)
        +-- ClientError       (exit 5)
        +-- ServerError       (exit 5)
        +-- ConnectionError_  (exit 6)
"""

from __future__ import annotations

from restplate.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DEFINITION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_TEMPLATE_ERROR,
)


class RestplateError(Exception):
    """Base exception for all restplate errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`restplate.exit_codes`.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RestplateError):
    """Raised for invalid CLI arguments (e.g. ``--arg`` without ``=``)."""

    exit_code = EXIT_INVALID_USAGE


class TemplateParseError(RestplateError):
    """Raised when a template cannot be interpreted as a value tree.

    Templates are compositions of mappings with string keys, sequences,
    strings, numbers, booleans and ``None``.  Anything else found while
    substituting is a configuration error and is never retried.
    """

    exit_code = EXIT_TEMPLATE_ERROR


class DefinitionError(RestplateError):
    """Raised when an endpoint definition file is missing, unparseable, or invalid."""

    exit_code = EXIT_DEFINITION_ERROR


class ConfigError(RestplateError):
    """Raised for configuration problems (invalid JSON, failed validation)."""

    exit_code = EXIT_GENERIC_FAILURE


class TransportError(RestplateError):
    """Base class for failures reported by a transport.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, when there was one.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(TransportError):
    """Raised when the API returns HTTP 401 or 403."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(TransportError):
    """Raised when the API returns HTTP 404 (resource not found)."""

    exit_code = EXIT_NOT_FOUND


class ClientError(TransportError):
    """Raised for the remaining HTTP 4xx responses."""

    exit_code = EXIT_SERVER_ERROR


class ServerError(TransportError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(TransportError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
