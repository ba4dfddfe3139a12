"""restplate -- declare a REST endpoint once, call it with different arguments.

An endpoint is an :class:`~restplate.models.EndpointTemplate`: a URL
pattern plus query, header and body templates containing ``$name``
placeholders, default arguments, and a cache time-to-live.  A
:class:`~restplate.datasource.ConfigurableDataSource` resolves the template
for every call and hands the result to a transport such as
:class:`~restplate.client.AsyncClient`.

Typical use::

    template = EndpointTemplate(url="https://api.example.com/users/$id")
    async with AsyncClient() as client:
        user = await ConfigurableDataSource(client, template).configured_get({"id": 42})

Modules:
    templating: Placeholder substitution and value coercion.
    request: Query, header, body and ttl builders.
    datasource: The verb operations.
    client: The httpx transport.
    cache: diskcache-backed response storage.
    loader: Endpoint definition files.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"
