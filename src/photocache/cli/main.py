"""CLI commands for photocache."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import typer

from photocache.core.exceptions import FetchError, PhotocacheError


if TYPE_CHECKING:
    from photocache.config import Settings
    from photocache.core.models import Photo


app = typer.Typer(
    name="photocache",
    help="Fetch interesting Flickr photos and keep their images cached locally.",
    no_args_is_help=True,
)


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log cache hits, misses and downloads.",
    ),
) -> None:
    """Fetch interesting Flickr photos and keep their images cached locally."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
        # httpx logs every request at INFO; keep the focus on the cache
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


API_KEY_OPTION = typer.Option(
    None,
    "--api-key",
    "-k",
    help="Flickr API key. Defaults to $PHOTOCACHE_API_KEY.",
)
CACHE_DIR_OPTION = typer.Option(
    None,
    "--cache-dir",
    help="Image cache directory. Defaults to $PHOTOCACHE_CACHE_DIR or .photocache/images.",
)


def _create_client() -> httpx.AsyncClient:
    """Create the HTTP client used by network commands."""
    return httpx.AsyncClient(follow_redirects=True)


def _report_error(error: PhotocacheError) -> None:
    """Print an error and its recovery hint to stderr."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)


def load_settings_context(api_key: str | None, cache_dir: str | None) -> Settings:
    """Resolve settings for CLI commands that need the network.

    Raises:
        typer.Exit: If no API key is configured.
    """
    from photocache.config import load_settings

    try:
        return load_settings(api_key=api_key, cache_dir=cache_dir)
    except PhotocacheError as e:
        _report_error(e)
        raise typer.Exit(1) from None


def _cache_dir_context(cache_dir: str | None) -> Path:
    from photocache.config import resolve_cache_dir

    return resolve_cache_dir(cache_dir)


async def fetch_listing(settings: Settings, *, with_state: bool = False) -> list[tuple[Photo, str]]:
    """Fetch the listing, optionally with each photo's cache state."""
    from photocache.cli.formatting import _get_cache_state
    from photocache.core.services import PhotoStore

    async with _create_client() as client:
        store = PhotoStore.from_settings(settings, client=client)
        try:
            photos = await store.fetch_interesting_photos()
            return [
                (photo, _get_cache_state(store.images, photo) if with_state else "")
                for photo in photos
            ]
        finally:
            await store.aclose()


async def _fetch_images(
    settings: Settings, photo_id: str | None, all_photos: bool
) -> dict[str, Any]:
    """Fetch the listing, then one or all images. Writes land before returning."""
    from photocache.core.services import PhotoStore
    from photocache.progress import RichProgressReporter

    async with _create_client() as client:
        store = PhotoStore.from_settings(settings, client=client)
        try:
            photos = await store.fetch_interesting_photos()
            if all_photos:
                with RichProgressReporter() as reporter:
                    return await store.fetch_images(photos, progress=reporter)

            matches = [photo for photo in photos if photo.photo_id == photo_id]
            if not matches:
                return {}
            try:
                return {matches[0].photo_id: await store.fetch_image(matches[0])}
            except FetchError as e:
                return {matches[0].photo_id: e}
        finally:
            await store.aclose()


@app.command()
def init(
    directory: str | None = typer.Argument(
        None,
        help="Directory to initialize. Defaults to current directory.",
    ),
) -> None:
    """Create the .photocache/ project marker and image cache directory."""
    target = Path(directory) if directory else Path.cwd()
    target = target.resolve()

    images_dir = target / ".photocache" / "images"
    if images_dir.exists():
        typer.echo(f"Already initialized: {images_dir.relative_to(target)}/")
        return

    images_dir.mkdir(parents=True)
    typer.echo(f"Created {images_dir.relative_to(target)}/")


@app.command()
def fetch(
    photo_id: str | None = typer.Argument(None, help="ID of the photo to fetch."),
    all_photos: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Fetch the images of every photo in the listing.",
    ),
    api_key: str | None = API_KEY_OPTION,
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """Fetch photo images, downloading only those not cached yet."""
    from photocache.adapters.cache.image_store import filename_for_key

    if photo_id is None and not all_photos:
        typer.echo("Error: Either provide a photo ID or use --all.")
        raise typer.Exit(1)

    if photo_id is not None and all_photos:
        typer.echo("Error: Cannot use both a photo ID and --all.")
        raise typer.Exit(1)

    settings = load_settings_context(api_key, cache_dir)

    try:
        results = asyncio.run(_fetch_images(settings, photo_id, all_photos))
    except PhotocacheError as e:
        _report_error(e)
        raise typer.Exit(1) from None

    if not results:
        typer.echo(f"Photo '{photo_id}' not found in the current listing.")
        raise typer.Exit(1)

    failed = 0
    for key, result in results.items():
        if isinstance(result, FetchError):
            failed += 1
            typer.echo(f"{key}: error: {result}")
        else:
            typer.echo(f"{key}: {settings.cache_dir / filename_for_key(key)}")

    if failed:
        if not all_photos:
            error = results[next(iter(results))]
            if error.recovery_hint:
                typer.echo(f"Hint: {error.recovery_hint}")
        raise typer.Exit(1)


@app.command()
def invalidate(
    photo_id: str = typer.Argument(help="ID of the photo whose image to drop."),
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """Remove a cached image, forcing a download on next fetch."""
    from photocache.adapters.cache import ImageStore
    from photocache.core.exceptions import InvalidPhotoIDError

    with ImageStore(_cache_dir_context(cache_dir)) as images:
        try:
            cached = images.contains(photo_id)
        except ValueError as e:
            _report_error(InvalidPhotoIDError(photo_id, cause=e))
            raise typer.Exit(1) from None
        if not cached:
            typer.echo(f"Photo '{photo_id}' is not cached.")
            raise typer.Exit(1)
        images.delete(photo_id)

    typer.echo(f"Invalidated '{photo_id}'. Next fetch will re-download.")


@app.command()
def clean(
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """Remove every cached image."""
    from photocache.adapters.cache import ImageStore

    with ImageStore(_cache_dir_context(cache_dir)) as images:
        count = images.clear()

    if count == 0:
        typer.echo("Cache is already empty.")
    else:
        typer.echo(f"Removed {count} cached image(s).")


@app.command()
def stats(
    cache_dir: str | None = CACHE_DIR_OPTION,
) -> None:
    """Show how many images are cached and how much space they use."""
    from photocache.adapters.cache import ImageStore
    from photocache.core.formatting import format_size

    resolved = _cache_dir_context(cache_dir)
    with ImageStore(resolved) as images:
        statistics = images.statistics()

    typer.echo(f"Cache directory: {resolved}")
    typer.echo(f"Cached images: {statistics.file_count}")
    typer.echo(f"Total size: {format_size(statistics.total_size)}")


def main() -> None:
    """Entry point for the CLI."""
    app()
