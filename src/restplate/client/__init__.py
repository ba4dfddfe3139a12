"""HTTP transport shipped with restplate.

:class:`AsyncClient` implements :class:`~restplate.transport.Transport` with
:mod:`httpx`, serving GET requests from a
:class:`~restplate.cache.ResponseCache` when one is configured.

Example::

    from restplate.client import AsyncClient

    async with AsyncClient(config, cache=cache) as client:
        source = ConfigurableDataSource(client, template)
        data = await source.configured_get({"id": 42})
"""

from restplate.client.async_client import AsyncClient

__all__ = ["AsyncClient"]
