"""GET response storage keyed by resolved request.

Every resolved request carries a cache hint (the endpoint's ``cache_time``
or a per-call override).  :class:`ResponseCache` stores the decoded body of
a successful GET under that hint using :mod:`diskcache`, so the next
identical request within the ttl is answered from disk.

A key is the SHA-256 of the method, the URL, the query pairs in the order
they are sent, and the request headers.  Header names are compared without
regard to case or order, so a response fetched with one caller's
``Authorization`` header is never served to another.  Write verbs and
DELETE are never stored.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Optional, Sequence

import diskcache

from restplate.models import CacheConfig

Pairs = Sequence[tuple[str, str]]

_CACHEABLE_METHOD = "GET"


class ResponseCache:
    """Disk-backed store for decoded GET responses.

    Args:
        cache_dir: Root cache directory; entries live in its
            ``responses/`` subdirectory.
        config: ``enabled`` switch and the fallback ``ttl_seconds`` used
            when :meth:`set` is called without a ttl.

    Example::

        cache = ResponseCache(get_cache_dir(), CacheConfig())
        cache.set("GET", "https://api.example.com/users", [("page", "2")],
                  {"body": [{"id": 1}]}, ttl=60)
        cache.get("GET", "https://api.example.com/users", [("page", "2")])
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._directory = Path(cache_dir) / "responses"
        self._store: Optional[diskcache.Cache] = (
            diskcache.Cache(str(self._directory)) if config.enabled else None
        )

    @property
    def enabled(self) -> bool:
        return self._store is not None

    def get(
        self,
        method: str,
        url: str,
        params: Optional[Pairs] = None,
        headers: Optional[Pairs] = None,
    ) -> Optional[dict]:
        """Return the stored entry for a request, or ``None``.

        Only GET lookups can hit; any other method returns ``None``.
        """
        if not self._cacheable(method):
            return None
        return self._store.get(self._make_key(method, url, params, headers))

    def set(
        self,
        method: str,
        url: str,
        params: Optional[Pairs],
        response_data: dict,
        ttl: Optional[int] = None,
        headers: Optional[Pairs] = None,
    ) -> None:
        """Store *response_data* for a GET request.

        Args:
            method: HTTP method; anything but GET is ignored.
            url: Request URL as sent.
            params: Query pairs as sent.
            response_data: The entry, a ``dict`` with a ``body`` key.
            ttl: Lifetime in seconds.  ``None`` means ``config.ttl_seconds``;
                zero or less means the entry is not stored.
            headers: Request headers as sent.
        """
        if not self._cacheable(method):
            return
        lifetime = self._config.ttl_seconds if ttl is None else ttl
        if lifetime <= 0:
            return
        key = self._make_key(method, url, params, headers)
        self._store.set(key, response_data, expire=lifetime)

    def invalidate(
        self,
        method: str,
        url: str,
        params: Optional[Pairs] = None,
        headers: Optional[Pairs] = None,
    ) -> None:
        """Drop the entry for one request, if there is one."""
        if self._store is not None:
            self._store.delete(self._make_key(method, url, params, headers))

    def clear(self) -> int:
        """Drop every entry and return how many were removed."""
        if self._store is None:
            return 0
        return self._store.clear()

    def stats(self) -> dict[str, Any]:
        """Summarise the cache for ``restplate cache stats``.

        Returns ``{"enabled": False}`` for a disabled cache; otherwise the
        entry count, directory and fallback ttl.
        """
        if self._store is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._store),
            "directory": str(self._directory),
            "default_ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        if self._store is not None:
            self._store.close()

    def _cacheable(self, method: str) -> bool:
        return self._store is not None and method.upper() == _CACHEABLE_METHOD

    @staticmethod
    def _make_key(
        method: str,
        url: str,
        params: Optional[Pairs],
        headers: Optional[Pairs] = None,
    ) -> str:
        raw = f"{method.upper()}|{url}"
        if params:
            raw += "|" + json.dumps([list(pair) for pair in params])
        if headers:
            raw += "|h|" + json.dumps(sorted([name.lower(), value] for name, value in headers))
        return hashlib.sha256(raw.encode()).hexdigest()
