"""The transport interface consumed by :class:`~restplate.datasource.ConfigurableDataSource`.

A transport sends fully resolved requests and returns decoded responses.
It owns everything the templating core does not: connections, timeouts,
caching and response decoding.  :class:`~restplate.client.AsyncClient` is
the implementation shipped with restplate; tests substitute a recorder.

Read verbs receive the URL and the query pairs separately.  Write verbs
receive the URL with the query already appended, plus the body.  All five
receive a :class:`~restplate.models.RequestOptions` carrying the headers and
the cache ttl.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from restplate.models import RequestOptions


@runtime_checkable
class Transport(Protocol):
    """Five async verb operations returning the decoded response."""

    async def get(self, url: str, query: list[tuple[str, str]], options: RequestOptions) -> Any:
        ...

    async def delete(self, url: str, query: list[tuple[str, str]], options: RequestOptions) -> Any:
        ...

    async def post(self, url: str, body: Any, options: RequestOptions) -> Any:
        ...

    async def put(self, url: str, body: Any, options: RequestOptions) -> Any:
        ...

    async def patch(self, url: str, body: Any, options: RequestOptions) -> Any:
        ...
