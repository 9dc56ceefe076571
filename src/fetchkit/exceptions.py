"""Exception hierarchy for fetchkit.

All exceptions inherit from :class:`FetchError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fetchkit.exit_codes`.
The fetch pipeline reports these through :class:`~fetchkit.client.result.DecodeResult`
or raises them from the ``fetch``/``request`` helpers; the command-line entry
point in :func:`fetchkit.app.main` catches ``FetchError`` and exits with the
matching code.

Subclass hierarchy::

    FetchError (exit 1)
    +-- InvalidRequestError    (exit 2)
    +-- TransportError         (exit 6)
    +-- UnexpectedStatusError  (exit 5)
    +-- EmptyBodyError         (exit 7)
    +-- DecodeError            (exit 8)
    +-- RepositoryError        (exit 1)
    |   +-- NotFoundError      (exit 4)
    +-- ConfigError            (exit 1)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from fetchkit.exit_codes import (
    EXIT_DECODE_ERROR,
    EXIT_EMPTY_BODY,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_REQUEST,
    EXIT_NOT_FOUND,
    EXIT_TRANSPORT_ERROR,
    EXIT_UNEXPECTED_STATUS,
)

if TYPE_CHECKING:
    import httpx


class FetchError(Exception):
    """Base exception for all fetchkit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidRequestError(FetchError):
    """Raised before any I/O when a request is malformed (e.g. relative URL)."""

    exit_code = EXIT_INVALID_REQUEST


class TransportError(FetchError):
    """Raised when no HTTP response was obtained (DNS, connect, timeout, protocol).

    The underlying :mod:`httpx` exception is kept on ``__cause__`` and on
    :attr:`cause`. Not retried internally.
    """

    exit_code = EXIT_TRANSPORT_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class UnexpectedStatusError(FetchError):
    """Raised when the server answers with a status outside ``[200, 300)``.

    The full response, body included, stays available on :attr:`response`
    so callers can inspect error payloads.
    """

    exit_code = EXIT_UNEXPECTED_STATUS

    def __init__(self, status_code: int, response: Optional[httpx.Response] = None):
        super().__init__(f"Unexpected HTTP status {status_code}")
        self.status_code = status_code
        self.response = response


class EmptyBodyError(FetchError):
    """Raised when a 2xx response carries no body to decode."""

    exit_code = EXIT_EMPTY_BODY

    def __init__(self, message: str = "Response body is empty", response: Optional[httpx.Response] = None):
        super().__init__(message)
        self.response = response


class DecodeError(FetchError):
    """Raised when the body is malformed or does not match the requested shape."""

    exit_code = EXIT_DECODE_ERROR

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        response: Optional[httpx.Response] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.response = response


class RepositoryError(FetchError):
    """Raised when a repository cannot perform the requested operation."""

    exit_code = EXIT_GENERIC_FAILURE


class NotFoundError(RepositoryError):
    """Raised when a repository lookup yields no item."""

    exit_code = EXIT_NOT_FOUND


class ConfigError(FetchError):
    """Raised for configuration problems (invalid JSON, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
