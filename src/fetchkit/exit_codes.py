"""Numeric process exit codes for the ``fetchkit`` command line.

Each constant maps to one error category and is referenced by the
corresponding :class:`~fetchkit.exceptions.FetchError` subclass, so shell
scripts can tell a network outage from a bad payload without parsing stderr.

Example::

    $ fetchkit get https://jsonplaceholder.typicode.com/nope
    $ echo $?
    5   # EXIT_UNEXPECTED_STATUS -- the server answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_REQUEST = 2
"""The request or the command line was malformed (no network call was made)."""

EXIT_NOT_FOUND = 4
"""A repository lookup found nothing for the requested id."""

EXIT_UNEXPECTED_STATUS = 5
"""The server answered with a status outside the 2xx range."""

EXIT_TRANSPORT_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_EMPTY_BODY = 7
"""The server answered 2xx but sent no body to decode."""

EXIT_DECODE_ERROR = 8
"""The body was not valid JSON or did not match the requested shape."""
