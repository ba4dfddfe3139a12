"""Asynchronous HTTP transport backed by :mod:`httpx`.

:class:`AsyncClient` implements :class:`~restplate.transport.Transport` on
top of :class:`httpx.AsyncClient` and layers on:

- **Response caching** -- GET responses are stored in a
  :class:`~restplate.cache.ResponseCache` for the ttl carried by each
  request's :class:`~restplate.models.RequestOptions`, keyed on the
  URL, query and headers.
- **Dry-run mode** -- the request is printed to stderr and a synthetic
  result is returned without sending traffic.
- **Error mapping** -- error status codes and network failures become
  :class:`~restplate.exceptions.TransportError` subclasses.

Requests are sent once; failures are not retried.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

import httpx

from restplate.client.response import extract_response_data, raise_for_response
from restplate.exceptions import ConnectionError_
from restplate.models import RequestConfig, RequestOptions
from restplate.output import get_output

if TYPE_CHECKING:
    from restplate.cache import ResponseCache

QueryPairs = list[tuple[str, str]]


class AsyncClient:
    """Transport that sends resolved requests with :class:`httpx.AsyncClient`.

    Must be used as an async context manager so that the underlying
    connection pool is opened and closed.

    Args:
        config: Base URL, timeout and SSL settings.
        cache: Optional disk-based response cache for GET requests.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic result is returned without network I/O.
        transport: Optional :mod:`httpx` transport, e.g.
            :class:`httpx.MockTransport` in tests.

    Example::

        async with AsyncClient(RequestConfig(timeout=10), cache=cache) as client:
            users = await client.get("https://api.example.com/users", [("page", "2")], options)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        cache: Optional[ResponseCache] = None,
        dry_run: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._cache = cache
        self._dry_run = dry_run
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url or "",
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport verbs
    # ------------------------------------------------------------------ #

    async def get(self, url: str, query: QueryPairs, options: RequestOptions) -> Any:
        """Send a GET request, serving it from the cache when possible."""
        return await self.request("GET", url, options, query=query)

    async def delete(self, url: str, query: QueryPairs, options: RequestOptions) -> Any:
        """Send a DELETE request."""
        return await self.request("DELETE", url, options, query=query)

    async def post(self, url: str, body: Any, options: RequestOptions) -> Any:
        """Send a POST request."""
        return await self.request("POST", url, options, body=body)

    async def put(self, url: str, body: Any, options: RequestOptions) -> Any:
        """Send a PUT request."""
        return await self.request("PUT", url, options, body=body)

    async def patch(self, url: str, body: Any, options: RequestOptions) -> Any:
        """Send a PATCH request."""
        return await self.request("PATCH", url, options, body=body)

    async def request(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        query: Optional[QueryPairs] = None,
        body: Any = None,
    ) -> Any:
        """Send one request and return the decoded response body.

        Args:
            method: HTTP method.
            url: Absolute URL, or a path relative to ``config.base_url``.
            options: Headers and cache ttl for this request.
            query: Query pairs (read verbs).
            body: Text, structured value, bytes, or ``None`` (write verbs).

        Returns:
            Decoded JSON, text, or ``None`` for an empty body.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ClientError: On other 4xx.
            ServerError: On 5xx.
            ConnectionError_: On network or timeout errors.
        """
        query = list(query or [])
        headers = list(options.headers)
        ttl = options.cache_options.ttl

        if self._dry_run:
            return self._print_dry_run(method, url, query, headers, body)

        cached = self._cache_get(method, url, query, headers)
        if cached is not None:
            get_output().debug(f"Cache hit: {method} {url}")
            return cached["body"]

        response = await self._send(method, url, query, headers, body)
        raise_for_response(response)
        data = extract_response_data(response)

        self._cache_set(method, url, query, headers, data, ttl)
        return data

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _send(
        self,
        method: str,
        url: str,
        query: QueryPairs,
        headers: list[tuple[str, str]],
        body: Any,
    ) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as async context manager"

        kwargs: dict[str, Any] = {"method": method, "url": url, "headers": headers}
        if query:
            kwargs["params"] = query
        if isinstance(body, (Mapping, list, tuple)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["content"] = body

        get_output().debug(f"{method} {url}")
        try:
            return await self._client.request(**kwargs)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Request to {url} failed: {exc}") from exc

    def _cache_get(
        self, method: str, url: str, query: QueryPairs, headers: QueryPairs
    ) -> Optional[dict]:
        if self._cache is None:
            return None
        return self._cache.get(method, url, query, headers)

    def _cache_set(
        self, method: str, url: str, query: QueryPairs, headers: QueryPairs, data: Any, ttl: int
    ) -> None:
        if self._cache is None:
            return
        self._cache.set(method, url, query, {"body": data}, ttl=ttl, headers=headers)

    def _print_dry_run(
        self,
        method: str,
        url: str,
        query: QueryPairs,
        headers: list[tuple[str, str]],
        body: Any,
    ) -> dict[str, Any]:
        """Print request details to stderr and return a synthetic result."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")
        for key, value in headers:
            output.info(f"  Header: {key}: {value}")
        for key, value in query:
            output.info(f"  Param: {key}={value}")
        if isinstance(body, (Mapping, list, tuple)):
            output.info(f"  Body (JSON): {json.dumps(body, indent=2, default=str)}")
        elif body is not None:
            output.info(f"  Body: {body!r}" if isinstance(body, bytes) else f"  Body: {body}")

        return {"dry_run": True, "message": "Request was not sent"}
