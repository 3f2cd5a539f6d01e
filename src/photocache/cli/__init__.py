"""CLI for photocache."""

# Import commands to register them with the app
# These imports have side effects (registering commands with @app.command())
from photocache.cli.commands import list as _list_module  # noqa: F401
from photocache.cli.main import app, main


__all__ = ["app", "main"]
