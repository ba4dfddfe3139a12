"""Built-in CLI sub-commands for restplate.

* :mod:`~restplate.commands.request` -- ``resolve`` and ``call`` an
  endpoint definition.
* :mod:`~restplate.commands.endpoints` -- list and show definitions.
* :mod:`~restplate.commands.cache` -- inspect and clear the response cache.
* :mod:`~restplate.commands.config` -- view and modify global settings.

Single commands are exported as plain callbacks registered on the root app;
command groups are exported as :class:`typer.Typer` sub-applications.
"""
