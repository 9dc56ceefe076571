"""Response formatting bridge -- maps fetch outcomes to the output system.

After a fetch completes, :func:`format_api_response` writes the status line
(and a served-from-cache notice when relevant) to stderr and renders the
decoded value to stdout through :meth:`~fetchkit.output.OutputManager.format_response`.

See Also:
    :mod:`fetchkit.output` -- the output manager that renders data.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from fetchkit.cache import is_from_cache
from fetchkit.models import CACHED_AT_EXTENSION
from fetchkit.output import get_output


def format_api_response(response: httpx.Response, value: Any) -> None:
    """Print the status of *response* to stderr and *value* to stdout.

    Args:
        response: The response the value was decoded from.
        value: The decoded value (Pydantic models are dumped to JSON types).
    """
    output = get_output()
    output.info(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())
    if is_from_cache(response):
        cached_at = response.extensions.get(CACHED_AT_EXTENSION)
        output.warning(f"Network unavailable; showing cached response from {cached_at}")
    output.format_response(to_jsonable_python(value))


def extract_response_data(response: httpx.Response) -> Any:
    """Best-effort body extraction for error reporting.

    Returns the parsed JSON body, the raw text when it is not JSON, or
    ``None`` for an empty body.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
