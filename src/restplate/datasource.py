"""Configurable REST data source -- declare an endpoint once, call it many times.

:class:`ConfigurableDataSource` pairs a frozen
:class:`~restplate.models.EndpointTemplate` with a
:class:`~restplate.transport.Transport`.  Each call merges the arguments
over the template defaults, resolves URL, query, headers, body and cache
hint, and hands the result to the transport exactly once.

Endpoints can be declared on a subclass::

    class UserSource(ConfigurableDataSource):
        template = EndpointTemplate(
            url="https://api.example.com/users/$id",
            params={"fields": "$fields"},
            headers={"Authorization": "Bearer $token"},
            default_args={"fields": "id,name"},
            cache_time=60,
        )

    async with AsyncClient(config) as client:
        users = UserSource(client)
        user = await users.configured_get({"id": 42, "token": token})

or passed to the constructor directly.

Transport errors are not caught or wrapped here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Optional, Union

from restplate.exceptions import DefinitionError
from restplate.models import CallOptions, EndpointTemplate, HTTPMethod, ResolvedRequest
from restplate.request.body import build_body, select_body
from restplate.request.pairs import build_headers, build_query
from restplate.request.ttl import resolve_ttl
from restplate.templating.arguments import merge_args
from restplate.templating.engine import substitute_in_string
from restplate.transport import Transport

logger = logging.getLogger(__name__)

ArgsRecord = Mapping[str, Any]
OptionsLike = Union[CallOptions, Mapping[str, Any], None]


class ConfigurableDataSource:
    """Resolves an endpoint template per call and dispatches to a transport.

    Args:
        transport: The collaborator that performs HTTP calls.
        template: The endpoint declaration.  Defaults to the class-level
            :attr:`template` of a subclass.

    Raises:
        DefinitionError: If neither the argument nor the class provides a
            template.
    """

    template: ClassVar[Optional[EndpointTemplate]] = None

    def __init__(
        self,
        transport: Transport,
        template: Optional[EndpointTemplate] = None,
    ) -> None:
        endpoint = template if template is not None else type(self).template
        if endpoint is None:
            raise DefinitionError(
                f"{type(self).__name__} has no endpoint template"
            )
        self._template = endpoint
        self._transport = transport

    @property
    def endpoint(self) -> EndpointTemplate:
        """The endpoint template used by every call."""
        return self._template

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #

    def resolve(
        self,
        method: HTTPMethod | str,
        args: Optional[ArgsRecord] = None,
        options: OptionsLike = None,
        body: Any = None,
    ) -> ResolvedRequest:
        """Build the request a call would send, without sending it.

        Args:
            method: HTTP verb.
            args: Call arguments, layered over the template defaults.
            options: Per-call options; only honoured by GET and DELETE.
            body: Body override for POST, PUT and PATCH.

        Returns:
            The fully substituted request.

        Raises:
            TemplateParseError: If a template is not a valid value tree.
        """
        return resolve_request(self._template, method, args, options=options, body=body)

    # ------------------------------------------------------------------ #
    # Verb operations
    # ------------------------------------------------------------------ #

    async def call(
        self,
        method: HTTPMethod | str,
        args: Optional[ArgsRecord] = None,
        options: OptionsLike = None,
        body: Any = None,
    ) -> Any:
        """Resolve and send one request, returning the transport's result."""
        request = self.resolve(method, args, options=options, body=body)
        request_options = request.request_options()
        logger.debug(
            "%s %s (query=%d, headers=%d, ttl=%ds)",
            request.method.value,
            request.url,
            len(request.query),
            len(request.headers),
            request.cache_ttl,
        )

        if request.method == HTTPMethod.GET:
            return await self._transport.get(request.url, request.query, request_options)
        if request.method == HTTPMethod.DELETE:
            return await self._transport.delete(request.url, request.query, request_options)
        if request.method == HTTPMethod.POST:
            return await self._transport.post(request.url_with_query, request.body, request_options)
        if request.method == HTTPMethod.PUT:
            return await self._transport.put(request.url_with_query, request.body, request_options)
        return await self._transport.patch(request.url_with_query, request.body, request_options)

    async def configured_get(
        self, args: Optional[ArgsRecord] = None, options: OptionsLike = None
    ) -> Any:
        """Send a GET request built from the template."""
        return await self.call(HTTPMethod.GET, args, options=options)

    async def configured_delete(
        self, args: Optional[ArgsRecord] = None, options: OptionsLike = None
    ) -> Any:
        """Send a DELETE request built from the template."""
        return await self.call(HTTPMethod.DELETE, args, options=options)

    async def configured_post(self, args: Optional[ArgsRecord] = None, body: Any = None) -> Any:
        """Send a POST request; *body* replaces the template body when given."""
        return await self.call(HTTPMethod.POST, args, body=body)

    async def configured_put(self, args: Optional[ArgsRecord] = None, body: Any = None) -> Any:
        """Send a PUT request; *body* replaces the template body when given."""
        return await self.call(HTTPMethod.PUT, args, body=body)

    async def configured_patch(self, args: Optional[ArgsRecord] = None, body: Any = None) -> Any:
        """Send a PATCH request; *body* replaces the template body when given."""
        return await self.call(HTTPMethod.PATCH, args, body=body)


def resolve_request(
    template: EndpointTemplate,
    method: HTTPMethod | str,
    args: Optional[ArgsRecord] = None,
    options: OptionsLike = None,
    body: Any = None,
) -> ResolvedRequest:
    """Resolve *template* for one call.

    The per-call ``cache_time`` option applies to GET and DELETE; write
    verbs use the template's ``cache_time`` and resolve a body instead.
    """
    verb = HTTPMethod(method.upper()) if isinstance(method, str) else method
    merged = merge_args(template.default_args, args)

    cache_override: Optional[int] = None
    resolved_body = None
    if verb.has_body:
        resolved_body = build_body(select_body(template.body, body), merged)
    else:
        cache_override = _call_options(options).cache_time

    return ResolvedRequest(
        method=verb,
        url=substitute_in_string(template.url, merged),
        query=build_query(template.params, merged),
        headers=build_headers(template.headers, merged),
        body=resolved_body,
        cache_ttl=resolve_ttl(cache_override, template.cache_time),
    )


def _call_options(options: OptionsLike) -> CallOptions:
    if options is None:
        return CallOptions()
    if isinstance(options, CallOptions):
        return options
    return CallOptions.model_validate(dict(options))
