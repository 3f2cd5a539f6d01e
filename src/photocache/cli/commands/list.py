"""List command for CLI."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from photocache.cli.formatting import _format_status_with_color
from photocache.cli.main import (
    API_KEY_OPTION,
    CACHE_DIR_OPTION,
    _report_error,
    app,
    fetch_listing,
    load_settings_context,
)
from photocache.core.exceptions import PhotocacheError


@app.command(name="list")
def list_photos(
    status: bool = typer.Option(
        False,
        "--status",
        help="Show cache state (cached/missing/no url).",
    ),
    api_key: str | None = API_KEY_OPTION,
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """List the photos of the current interesting-photos listing."""
    settings = load_settings_context(api_key, cache_dir)

    try:
        rows = asyncio.run(fetch_listing(settings, with_state=status))
    except PhotocacheError as e:
        _report_error(e)
        raise typer.Exit(1) from None

    if not rows:
        typer.echo("The listing is empty.")
        return

    # Build Rich table
    table = Table()
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Taken", no_wrap=True)
    if status:
        table.add_column("Status", no_wrap=True)

    for photo, state in rows:
        taken = photo.date_taken.strftime("%Y-%m-%d %H:%M")
        if status:
            table.add_row(photo.photo_id, photo.title, taken, _format_status_with_color(state))
        else:
            table.add_row(photo.photo_id, photo.title, taken)

    # Force terminal output to ensure tables render correctly in all environments
    console = Console(force_terminal=True)
    console.print(table)
