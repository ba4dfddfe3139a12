"""Tests for response decoding and error mapping."""

from __future__ import annotations

import httpx
import pytest

from restplate.client.response import extract_response_data, raise_for_response
from restplate.exceptions import AuthError, ClientError, NotFoundError, ServerError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(
    status_code: int = 200,
    json_data: object | None = None,
    text: str | None = None,
) -> httpx.Response:
    """Build an httpx.Response with a JSON, text, or empty body."""
    request = httpx.Request("GET", "https://api.example.com/test")
    if json_data is not None:
        return httpx.Response(status_code=status_code, json=json_data, request=request)
    if text is not None:
        return httpx.Response(status_code=status_code, text=text, request=request)
    return httpx.Response(status_code=status_code, content=b"", request=request)


# ---------------------------------------------------------------------------
# extract_response_data
# ---------------------------------------------------------------------------


class TestExtractResponseData:
    def test_json_body(self) -> None:
        assert extract_response_data(_make_response(json_data={"id": 1})) == {"id": 1}

    def test_json_list(self) -> None:
        assert extract_response_data(_make_response(json_data=[1, 2])) == [1, 2]

    def test_text_body(self) -> None:
        assert extract_response_data(_make_response(text="hello")) == "hello"

    def test_empty_body(self) -> None:
        assert extract_response_data(_make_response(status_code=204)) is None


# ---------------------------------------------------------------------------
# raise_for_response
# ---------------------------------------------------------------------------


class TestRaiseForResponse:
    def test_success_does_not_raise(self) -> None:
        raise_for_response(_make_response(200, json_data={}))
        raise_for_response(_make_response(304))

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, status: int) -> None:
        with pytest.raises(AuthError) as exc_info:
            raise_for_response(_make_response(status, json_data={"message": "denied"}))
        assert exc_info.value.status_code == status
        assert "denied" in str(exc_info.value)

    def test_not_found(self) -> None:
        with pytest.raises(NotFoundError, match="HTTP 404"):
            raise_for_response(_make_response(404))

    def test_other_client_error(self) -> None:
        with pytest.raises(ClientError) as exc_info:
            raise_for_response(_make_response(422, json_data={"detail": "bad field"}))
        assert exc_info.value.status_code == 422
        assert "bad field" in str(exc_info.value)

    def test_server_error_with_text(self) -> None:
        with pytest.raises(ServerError, match="HTTP 502: upstream down"):
            raise_for_response(_make_response(502, text="upstream down"))

    def test_exit_codes(self) -> None:
        assert AuthError("x").exit_code == 3
        assert NotFoundError("x").exit_code == 4
        assert ServerError("x").exit_code == 5
