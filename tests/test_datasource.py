"""Tests for ConfigurableDataSource and resolve_request."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qsl, urlsplit

import pytest

from conftest import RecordingTransport
from restplate.datasource import ConfigurableDataSource, resolve_request
from restplate.exceptions import DefinitionError, NotFoundError, TemplateParseError
from restplate.models import CallOptions, EndpointTemplate, HTTPMethod, RequestOptions
from restplate.transport import Transport


DEFAULT_ARG = "default-argument"
ARGS = {"arg1": "mock-arg-1", "arg2": "mock-arg-2"}


def _search_template(**overrides) -> EndpointTemplate:
    fields = dict(
        url="https://api.test/$id",
        params={"q": "$term"},
        headers={"auth": "$token"},
        cache_time=60,
    )
    fields.update(overrides)
    return EndpointTemplate(**fields)


class NestedSource(ConfigurableDataSource):
    """Endpoint with nested params, headers and body plus a default argument."""

    template = EndpointTemplate(
        url="https://test.url/$arg1/$arg2/$default",
        default_args={"default": DEFAULT_ARG},
        params={
            "param1": "$arg1",
            "param2": 22,
            "param3": {"param31": "$arg2", "param32": 33},
        },
        headers={
            "header1": "$arg1",
            "header2": "$default",
            "header3": {"headerField31": "arg2: $arg2", "headerField32": "headerField32"},
        },
        body={
            "bodyField1": "$arg2",
            "bodyField2": "$default",
            "bodyField3": {"bodyField31": "arg2: $arg2", "bodyField32": "arg2: $arg2"},
        },
        cache_time=5000,
    )


EXPECTED_URL = f"https://test.url/mock-arg-1/mock-arg-2/{DEFAULT_ARG}"
EXPECTED_QUERY = [
    ("param1", "mock-arg-1"),
    ("param2", "22"),
    ("param3", '{"param31":"mock-arg-2","param32":33}'),
]
EXPECTED_HEADERS = [
    ("header1", "mock-arg-1"),
    ("header2", DEFAULT_ARG),
    ("header3", '{"headerField31":"arg2: mock-arg-2","headerField32":"headerField32"}'),
]
EXPECTED_BODY = {
    "bodyField1": "mock-arg-2",
    "bodyField2": DEFAULT_ARG,
    "bodyField3": {"bodyField31": "arg2: mock-arg-2", "bodyField32": "arg2: mock-arg-2"},
}


# ------------------------------------------------------------------ #
# Construction
# ------------------------------------------------------------------ #


class TestConstruction:
    def test_template_argument(self, transport: RecordingTransport) -> None:
        template = _search_template()
        source = ConfigurableDataSource(transport, template)
        assert source.endpoint is template

    def test_class_level_template(self, transport: RecordingTransport) -> None:
        assert NestedSource(transport).endpoint is NestedSource.template

    def test_argument_overrides_class_template(self, transport: RecordingTransport) -> None:
        template = _search_template()
        assert NestedSource(transport, template).endpoint is template

    def test_missing_template_raises(self, transport: RecordingTransport) -> None:
        with pytest.raises(DefinitionError, match="no endpoint template"):
            ConfigurableDataSource(transport)

    def test_recording_transport_satisfies_protocol(self, transport: RecordingTransport) -> None:
        assert isinstance(transport, Transport)


# ------------------------------------------------------------------ #
# Read verbs
# ------------------------------------------------------------------ #


class TestConfiguredGet:
    @pytest.mark.asyncio
    async def test_missing_argument_drops_header(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        result = await source.configured_get({"id": "42", "term": "cats"})

        assert result == {"ok": True}
        assert len(transport.calls) == 1
        verb, url, query, options = transport.calls[0]
        assert verb == "get"
        assert url == "https://api.test/42"
        assert query == [("q", "cats")]
        assert options.headers == []
        assert options.cache_options.ttl == 60

    @pytest.mark.asyncio
    async def test_cache_time_override(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await source.configured_get({"id": "42"}, {"cache_time": 5})
        assert transport.calls[0][3].cache_options.ttl == 5

    @pytest.mark.asyncio
    async def test_cache_time_override_model(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await source.configured_get({"id": "42"}, CallOptions(cache_time=5))
        assert transport.calls[0][3].cache_options.ttl == 5

    @pytest.mark.asyncio
    async def test_zero_cache_time_uses_template(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await source.configured_get({"id": "42"}, {"cache_time": 0})
        assert transport.calls[0][3].cache_options.ttl == 60

    @pytest.mark.asyncio
    async def test_nested_values_and_defaults(self, transport: RecordingTransport) -> None:
        await NestedSource(transport).configured_get(ARGS)
        _, url, query, options = transport.calls[0]
        assert url == EXPECTED_URL
        assert query == EXPECTED_QUERY
        assert options.headers == EXPECTED_HEADERS
        assert options.cache_options.ttl == 5000

    @pytest.mark.asyncio
    async def test_missing_arguments_remove_params_and_headers(
        self, transport: RecordingTransport
    ) -> None:
        await NestedSource(transport).configured_get({"arg2": "mock-arg-2"})
        _, url, query, options = transport.calls[0]
        assert url == f"https://test.url/$arg1/mock-arg-2/{DEFAULT_ARG}"
        assert query == [("param2", "22"), ("param3", '{"param31":"mock-arg-2","param32":33}')]
        assert [key for key, _ in options.headers] == ["header2", "header3"]

    @pytest.mark.asyncio
    async def test_call_args_override_defaults(self, transport: RecordingTransport) -> None:
        await NestedSource(transport).configured_get({**ARGS, "default": "override"})
        _, url, _, options = transport.calls[0]
        assert url.endswith("/override")
        assert ("header2", "override") in options.headers

    @pytest.mark.asyncio
    async def test_no_params_template(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, EndpointTemplate(url="https://api.test/x"))
        await source.configured_get()
        assert transport.calls[0][2] == []

    @pytest.mark.asyncio
    async def test_concurrent_calls(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await asyncio.gather(*(source.configured_get({"id": str(i)}) for i in range(5)))
        assert sorted(call[1] for call in transport.calls) == [
            f"https://api.test/{i}" for i in range(5)
        ]

    @pytest.mark.asyncio
    async def test_template_reused_across_calls(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await source.configured_get({"id": "1", "term": "a"})
        await source.configured_get({"id": "2"})
        assert transport.calls[0][1:3] == ("https://api.test/1", [("q", "a")])
        assert transport.calls[1][1:3] == ("https://api.test/2", [])
        assert source.endpoint.params == {"q": "$term"}


class TestConfiguredDelete:
    @pytest.mark.asyncio
    async def test_delete_uses_query_and_override(self, transport: RecordingTransport) -> None:
        source = ConfigurableDataSource(transport, _search_template())
        await source.configured_delete({"id": "9", "term": "x", "token": "t"}, {"cache_time": 7})
        verb, url, query, options = transport.calls[0]
        assert verb == "delete"
        assert url == "https://api.test/9"
        assert query == [("q", "x")]
        assert options.headers == [("auth", "t")]
        assert options.cache_options.ttl == 7


# ------------------------------------------------------------------ #
# Write verbs
# ------------------------------------------------------------------ #


class TestWriteVerbs:
    @pytest.mark.asyncio
    async def test_post_substitutes_body(self, transport: RecordingTransport) -> None:
        template = EndpointTemplate(url="https://api.test/users", body={"name": "$id"})
        await ConfigurableDataSource(transport, template).configured_post({"id": "7"})
        verb, url, body, options = transport.calls[0]
        assert verb == "post"
        assert url == "https://api.test/users"
        assert body == {"name": "7"}
        assert options.cache_options.ttl == 300

    @pytest.mark.asyncio
    async def test_post_appends_query_to_url(self, transport: RecordingTransport) -> None:
        await NestedSource(transport).configured_post(ARGS)
        _, url, body, options = transport.calls[0]
        parts = urlsplit(url)
        assert f"{parts.scheme}://{parts.netloc}{parts.path}" == EXPECTED_URL
        assert parse_qsl(parts.query) == EXPECTED_QUERY
        assert body == EXPECTED_BODY
        assert options.headers == EXPECTED_HEADERS
        assert options.cache_options.ttl == 5000

    @pytest.mark.asyncio
    async def test_query_appended_with_ampersand(self, transport: RecordingTransport) -> None:
        template = EndpointTemplate(url="https://api.test/x?v=1", params={"a": "$a"})
        await ConfigurableDataSource(transport, template).configured_put({"a": "b"})
        assert transport.calls[0][1] == "https://api.test/x?v=1&a=b"

    @pytest.mark.asyncio
    async def test_body_override_replaces_template(self, transport: RecordingTransport) -> None:
        await NestedSource(transport).configured_put(ARGS, {"only": "$arg1"})
        verb, _, body, _ = transport.calls[0]
        assert verb == "put"
        assert body == {"only": "mock-arg-1"}

    @pytest.mark.asyncio
    async def test_text_body(self, transport: RecordingTransport) -> None:
        template = EndpointTemplate(url="https://api.test/x", body="name=$name&raw=$missing")
        await ConfigurableDataSource(transport, template).configured_patch({"name": "Ada"})
        verb, _, body, _ = transport.calls[0]
        assert verb == "patch"
        assert body == "name=Ada&raw=$missing"

    @pytest.mark.asyncio
    async def test_no_body(self, transport: RecordingTransport) -> None:
        template = EndpointTemplate(url="https://api.test/x")
        await ConfigurableDataSource(transport, template).configured_post()
        assert transport.calls[0][2] is None


# ------------------------------------------------------------------ #
# Errors
# ------------------------------------------------------------------ #


class TestErrors:
    @pytest.mark.asyncio
    async def test_transport_error_propagates(self) -> None:
        failing = RecordingTransport(error=NotFoundError("HTTP 404", status_code=404))
        source = ConfigurableDataSource(failing, _search_template())
        with pytest.raises(NotFoundError) as exc_info:
            await source.configured_get({"id": "1"})
        assert exc_info.value.status_code == 404
        assert len(failing.calls) == 1

    @pytest.mark.asyncio
    async def test_template_error_raised_before_transport(
        self, transport: RecordingTransport
    ) -> None:
        template = EndpointTemplate(url="https://api.test/x", params=["$a"])
        with pytest.raises(TemplateParseError):
            await ConfigurableDataSource(transport, template).configured_get({"a": 1})
        assert transport.calls == []


# ------------------------------------------------------------------ #
# resolve_request
# ------------------------------------------------------------------ #


class TestResolveRequest:
    def test_method_from_string(self) -> None:
        request = resolve_request(_search_template(), "get", {"id": "1"})
        assert request.method == HTTPMethod.GET

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ValueError):
            resolve_request(_search_template(), "HEAD")

    def test_write_verb_ignores_cache_override(self) -> None:
        request = resolve_request(_search_template(), HTTPMethod.POST, options={"cache_time": 5})
        assert request.cache_ttl == 60

    def test_read_verb_ignores_body(self) -> None:
        request = resolve_request(_search_template(body={"a": 1}), HTTPMethod.GET, body={"b": 2})
        assert request.body is None

    def test_request_options(self) -> None:
        request = resolve_request(_search_template(), HTTPMethod.GET, {"token": "t"})
        options = request.request_options()
        assert isinstance(options, RequestOptions)
        assert options.headers == [("auth", "t")]
        assert options.cache_options.ttl == 60

    def test_url_with_query_without_pairs(self) -> None:
        request = resolve_request(_search_template(), HTTPMethod.GET, {"id": "1"})
        assert request.url_with_query == "https://api.test/1"

    def test_resolve_on_source(self, transport: RecordingTransport) -> None:
        request = NestedSource(transport).resolve(HTTPMethod.GET, ARGS)
        assert request.url == EXPECTED_URL
        assert transport.calls == []
