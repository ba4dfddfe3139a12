"""Response decoding and error mapping for the shipped transport.

:func:`extract_response_data` turns an :class:`httpx.Response` into the
value a transport returns to the data source.  :func:`raise_for_response`
maps error status codes to the :class:`~restplate.exceptions.TransportError`
family.
"""

from __future__ import annotations

from typing import Any

import httpx

from restplate.exceptions import AuthError, ClientError, NotFoundError, ServerError


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Returns ``None`` for an empty body, the decoded JSON when the body
    parses as JSON, and the raw text otherwise.
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def raise_for_response(response: httpx.Response) -> None:
    """Raise a typed exception for an error HTTP status code.

    Raises:
        AuthError: On 401 / 403.
        NotFoundError: On 404.
        ClientError: On any other 4xx.
        ServerError: On 5xx.
    """
    status = response.status_code
    if status < 400:
        return

    msg = _error_detail(response)
    full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"

    if status in (401, 403):
        raise AuthError(full_msg, status_code=status)
    if status == 404:
        raise NotFoundError(full_msg, status_code=status)
    if status >= 500:
        raise ServerError(full_msg, status_code=status)
    raise ClientError(full_msg, status_code=status)


def _error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body."""
    try:
        detail = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("error") or detail.get("detail") or "")
    return str(detail)
