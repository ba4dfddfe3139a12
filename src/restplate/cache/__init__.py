"""Disk-based response caching for restplate.

This package provides :class:`ResponseCache`, the storage behind the cache
hint that every resolved request carries.  Successful GET responses are
stored with :mod:`diskcache`, keyed by method, URL and query, and expire
after the request's ttl.

The cache is consumed by :class:`~restplate.client.AsyncClient` and is
controlled by the ``cache`` section of the global configuration
(:class:`~restplate.models.CacheConfig`).
"""

from restplate.cache.cache import ResponseCache

__all__ = ["ResponseCache"]
