"""Flickr REST API request building and response decoding.

Everything here is pure: no network access and no file access.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import httpx

from photocache.core.exceptions import DecodeError
from photocache.core.models import Photo


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.flickr.com/services/rest"
INTERESTING_PHOTOS_METHOD = "flickr.interestingness.getList"

# Format of the "datetaken" field in listing records
DATE_TAKEN_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass(frozen=True, slots=True)
class FlickrAPI:
    """Knows the URLs Flickr expects and the JSON it answers with.

    Attributes:
        api_key: Flickr API key sent with every listing request.
        endpoint: REST endpoint URL.
        method: API method selecting the listing.
        extras: Extra fields requested per photo. Must include the image
            URL size ("url_z") and "date_taken".
        safe_search: Flickr safe search level (1 is safe).
        per_page: Optional page size; Flickr's default is used when None.

    Example:
        >>> api = FlickrAPI(api_key="abc")
        >>> str(api.build_listing_url()).startswith(DEFAULT_ENDPOINT)
        True
    """

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT
    method: str = INTERESTING_PHOTOS_METHOD
    extras: tuple[str, ...] = ("url_z", "date_taken")
    safe_search: int = 1
    per_page: int | None = None

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if not self.api_key:
            raise ValueError("API key cannot be empty")

    def build_listing_url(self) -> httpx.URL:
        """Build the URL of the listing request.

        Returns:
            URL with method, API key, JSON format and extras as query parameters.
        """
        params: dict[str, str] = {
            "method": self.method,
            "api_key": self.api_key,
            "format": "json",
            "nojsoncallback": "1",
            "extras": ",".join(self.extras),
            "safe_search": str(self.safe_search),
        }
        if self.per_page is not None:
            params["per_page"] = str(self.per_page)
        return httpx.URL(self.endpoint, params=params)

    def decode_listing(self, data: bytes) -> list[Photo]:
        """Decode a listing response body into photos.

        The envelope must be well-formed; individual records that cannot be
        turned into a Photo are skipped.

        Args:
            data: Raw response body.

        Returns:
            Photos in the order the service listed them.

        Raises:
            DecodeError: If the body is not JSON, is a Flickr error, or lacks
                the photos.photo array.
        """
        return decode_listing(data, source=self.endpoint)


def decode_listing(data: bytes, source: str = DEFAULT_ENDPOINT) -> list[Photo]:
    """Decode a listing envelope. See FlickrAPI.decode_listing()."""
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError("Listing response is not valid JSON", source=source, cause=e) from e

    if not isinstance(payload, dict):
        raise DecodeError("Listing response is not a JSON object", source=source)

    if payload.get("stat") == "fail":
        message = payload.get("message", "unknown error")
        raise DecodeError(
            f"Flickr returned an error: {message} (code {payload.get('code')})",
            source=source,
        )

    photos = payload.get("photos")
    if not isinstance(photos, dict):
        raise DecodeError("Listing response has no 'photos' object", source=source)

    records = photos.get("photo")
    if not isinstance(records, list):
        raise DecodeError("Listing response has no 'photos.photo' array", source=source)

    result: list[Photo] = []
    for index, record in enumerate(records):
        photo = _photo_from_record(record)
        if photo is None:
            logger.warning("Skipping malformed photo record at index %d", index)
            continue
        result.append(photo)
    return result


def _photo_from_record(record: Any) -> Photo | None:
    """Map one listing record onto a Photo, or None if it is malformed."""
    if not isinstance(record, dict):
        return None

    photo_id = record.get("id")
    title = record.get("title")
    date_taken = record.get("datetaken")
    if not isinstance(photo_id, str) or not photo_id:
        return None
    if not isinstance(title, str) or not isinstance(date_taken, str):
        return None

    try:
        taken = datetime.strptime(date_taken, DATE_TAKEN_FORMAT).replace(tzinfo=UTC)
    except ValueError:
        return None

    remote_url = record.get("url_z")
    if not isinstance(remote_url, str) or not remote_url:
        remote_url = None

    return Photo(title=title, photo_id=photo_id, remote_url=remote_url, date_taken=taken)
