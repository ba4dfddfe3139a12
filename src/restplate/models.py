"""Canonical Pydantic models shared across all restplate modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Endpoint models** -- what an endpoint author declares and what a call
produces:
    :class:`HTTPMethod`, :class:`EndpointTemplate`,
    :class:`EndpointDefinition`, :class:`CallOptions`,
    :class:`CacheOptions`, :class:`RequestOptions`, and
    :class:`ResolvedRequest`.

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`OutputConfig`, :class:`CacheConfig`, :class:`RequestConfig`, and
    :class:`GlobalConfig`.

All models use Pydantic v2.  :class:`EndpointTemplate` is frozen: it is built
once per endpoint and shared by every call made through it, so its template
fields are stored as read-only copies (see :func:`_freeze`).
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# --- Endpoint models ---


def _freeze(value: Any) -> Any:
    """Return a read-only deep copy of a template value.

    Mappings become :class:`~types.MappingProxyType` views over fresh dicts
    and lists become tuples.  Other values (text, numbers, bytes) are kept.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of :func:`_freeze`, used when a template is serialised."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


class HTTPMethod(str, enum.Enum):
    """HTTP verbs a configured endpoint can be called with."""

    GET = "GET"
    DELETE = "DELETE"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"

    @property
    def has_body(self) -> bool:
        """Whether requests with this verb carry a body instead of a query."""
        return self in (HTTPMethod.POST, HTTPMethod.PUT, HTTPMethod.PATCH)


class EndpointTemplate(BaseModel):
    """Static declaration of one REST endpoint.

    String leaves anywhere in ``url``, ``params``, ``headers`` and ``body``
    may contain ``$name`` placeholders that are filled from the call
    arguments merged over ``default_args``.

    Example::

        EndpointTemplate(
            url="https://api.example.com/users/$id",
            params={"fields": "$fields"},
            headers={"Authorization": "Bearer $token"},
            cache_time=60,
        )
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    url: str = Field(description="URL pattern; placeholders left unresolved stay verbatim")
    default_args: Mapping[str, Any] = Field(
        default_factory=dict, description="Arguments used when a call omits them"
    )
    params: Any = Field(
        default_factory=dict, description="Query-string template (top-level mapping)"
    )
    headers: Any = Field(
        default_factory=dict, description="Header template (top-level mapping)"
    )
    body: Any = Field(
        default=None, description="Body template: text, structure, or opaque payload"
    )
    cache_time: int = Field(
        default=300, gt=0, description="Default cache time-to-live in seconds"
    )

    @field_validator("default_args", "params", "headers", "body")
    @classmethod
    def freeze_templates(cls, value: Any) -> Any:
        return _freeze(value)

    @field_serializer("default_args", "params", "headers", "body")
    def thaw_templates(self, value: Any) -> Any:
        return _thaw(value)


class EndpointDefinition(EndpointTemplate):
    """An :class:`EndpointTemplate` as stored in a definition file.

    Adds a ``name`` (defaults to the file stem when loaded from disk) and
    the ``method`` used when the CLI is not told otherwise.

    See Also:
        :func:`~restplate.loader.load_endpoint`: Read a definition from disk.
    """

    name: str
    method: HTTPMethod = HTTPMethod.GET
    description: Optional[str] = None

    def to_template(self) -> EndpointTemplate:
        """Return the plain template without the file-level metadata."""
        return EndpointTemplate(**self.model_dump(include=set(EndpointTemplate.model_fields)))


class CallOptions(BaseModel):
    """Per-call options recognised by the read verbs."""

    cache_time: Optional[int] = Field(
        default=None, ge=0, description="Overrides the template cache_time for one call"
    )


class CacheOptions(BaseModel):
    """Cache directive handed to the transport."""

    ttl: int


class RequestOptions(BaseModel):
    """Everything besides URL, query and body that a transport receives."""

    cache_options: CacheOptions
    headers: list[tuple[str, str]] = Field(default_factory=list)


class ResolvedRequest(BaseModel):
    """A fully substituted request, produced fresh for every call."""

    method: HTTPMethod
    url: str
    query: list[tuple[str, str]] = Field(default_factory=list)
    headers: list[tuple[str, str]] = Field(default_factory=list)
    body: Any = None
    cache_ttl: int

    @property
    def url_with_query(self) -> str:
        """The URL with the encoded query appended (used by write verbs)."""
        if not self.query:
            return self.url
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{urlencode(self.query)}"

    def request_options(self) -> RequestOptions:
        """Build the options structure passed to the transport."""
        return RequestOptions(
            cache_options=CacheOptions(ttl=self.cache_ttl),
            headers=list(self.headers),
        )


# --- Configuration models ---


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class CacheConfig(BaseModel):
    """HTTP response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    ttl_seconds: int = Field(
        default=300, description="TTL used when a request carries no cache hint"
    )


class RequestConfig(BaseModel):
    """HTTP settings applied to every call made by the shipped transport."""

    base_url: Optional[str] = Field(
        default=None, description="Prefix for endpoint URLs that are relative"
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/restplate/config.json``.

    Loaded and saved by :func:`~restplate.config.load_global_config` and
    :func:`~restplate.config.save_global_config`.  See
    :func:`~restplate.config.resolve_config` for the precedence chain.
    """

    endpoints_dir: Optional[str] = Field(
        default=None, description="Directory searched for named endpoint definitions"
    )
    output: OutputConfig = Field(default_factory=OutputConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    request: RequestConfig = Field(default_factory=RequestConfig)
