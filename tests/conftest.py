"""Pytest configuration and shared fixtures.

This module registers custom markers and provides shared fixtures:
image payloads built with Pillow and a recording mock transport that
stands in for the network.
"""

from __future__ import annotations

import asyncio
import io
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import httpx
import pytest
from PIL import Image

from photocache.adapters.cache import ImageStore
from photocache.adapters.codec import JpegCodec
from photocache.adapters.executor import SynchronousExecutor
from photocache.core.flickr import FlickrAPI
from photocache.core.models import Photo


LISTING_URL_PATH = "/services/rest"
IMAGE_HOST = "https://live.staticflickr.com"

SAMPLE_LISTING = {
    "photos": {
        "page": 1,
        "photo": [
            {
                "id": "1",
                "title": "A",
                "datetaken": "2023-01-01 00:00:00",
                "url_z": f"{IMAGE_HOST}/1.jpg",
            },
            {"id": "2", "title": "B", "datetaken": "2023-01-02 00:00:00"},
        ],
    },
    "stat": "ok",
}


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "core: Core models, codec and services")
    config.addinivalue_line("markers", "cache: Image cache adapter and eviction")
    config.addinivalue_line("markers", "codec: Image codecs")
    config.addinivalue_line("markers", "service: PhotoStore against a mock transport")
    config.addinivalue_line("markers", "progress: Rich progress integration")
    config.addinivalue_line("markers", "cli: CLI tests")
    config.addinivalue_line(
        "markers",
        "tier: Test tier for CI job separation (0=instant, 1=fast, 2=standard)",
    )


def make_image_bytes(
    fmt: str = "JPEG",
    size: tuple[int, int] = (16, 12),
    color: tuple[int, int, int] = (200, 30, 30),
) -> bytes:
    """Encode a solid-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def make_photo(
    photo_id: str = "1",
    remote_url: str | None = f"{IMAGE_HOST}/1.jpg",
    title: str = "A",
) -> Photo:
    return Photo(
        title=title,
        photo_id=photo_id,
        remote_url=remote_url,
        date_taken=datetime(2023, 1, 1, tzinfo=UTC),
    )


@dataclass
class RecordingTransport:
    """Routes requests by URL path and records every request it sees.

    Routes map a path to (status, body). Unknown paths answer 404.
    A positive delay makes each response wait, which lets concurrent
    callers overlap.
    """

    routes: dict[str, tuple[int, bytes]] = field(default_factory=dict)
    delay: float = 0.0
    requests: list[httpx.Request] = field(default_factory=list)
    error: Exception | None = None

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        status, body = self.routes.get(request.url.path, (404, b"not found"))
        return httpx.Response(status, content=body)

    @property
    def count(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small valid JPEG."""
    return make_image_bytes()


@pytest.fixture
def transport(jpeg_bytes: bytes) -> RecordingTransport:
    """Mock network serving the sample listing and image 1."""
    return RecordingTransport(
        routes={
            LISTING_URL_PATH: (200, json.dumps(SAMPLE_LISTING).encode()),
            "/1.jpg": (200, jpeg_bytes),
        }
    )


@pytest.fixture
def image_store(tmp_path: Path) -> ImageStore[Image.Image]:
    """JPEG image cache whose disk writes finish before put() returns."""
    return ImageStore(tmp_path / "images", codec=JpegCodec(), executor=SynchronousExecutor())


@pytest.fixture
def api() -> FlickrAPI:
    return FlickrAPI(api_key="test-key")


@pytest.fixture
def photo_factory() -> Callable[..., Photo]:
    """Build Photo instances; see make_photo()."""
    return make_photo


@pytest.fixture
def image_bytes_factory() -> Callable[..., bytes]:
    """Encode solid-color images; see make_image_bytes()."""
    return make_image_bytes


@pytest.fixture
def listing_body() -> bytes:
    """The two-record sample listing as served by the mock network."""
    return json.dumps(SAMPLE_LISTING).encode()


@pytest.fixture
def transport_factory() -> Callable[..., RecordingTransport]:
    """Build RecordingTransport instances with custom routes."""
    return RecordingTransport
