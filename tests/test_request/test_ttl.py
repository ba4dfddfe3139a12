"""Tests for cache ttl resolution."""

from __future__ import annotations

from restplate.request.ttl import resolve_ttl


class TestResolveTtl:
    def test_override_wins(self) -> None:
        assert resolve_ttl(5, 60) == 5

    def test_default_when_no_override(self) -> None:
        assert resolve_ttl(None, 60) == 60

    def test_zero_override_falls_back(self) -> None:
        assert resolve_ttl(0, 60) == 60
