"""Unit tests for Flickr listing URL building and response decoding."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from photocache.core.exceptions import DecodeError
from photocache.core.flickr import DEFAULT_ENDPOINT, FlickrAPI, decode_listing


def _listing(*records: object) -> bytes:
    return json.dumps({"photos": {"photo": list(records)}, "stat": "ok"}).encode()


@pytest.mark.core
@pytest.mark.tier(0)
class TestBuildListingURL:
    """Tests for build_listing_url()."""

    def test_url_targets_endpoint(self) -> None:
        url = FlickrAPI(api_key="k").build_listing_url()

        assert str(url).startswith(DEFAULT_ENDPOINT)

    def test_url_carries_required_parameters(self) -> None:
        """Method, key, JSON format, no JSONP callback and extras are all sent."""
        params = FlickrAPI(api_key="secret").build_listing_url().params

        assert params["method"] == "flickr.interestingness.getList"
        assert params["api_key"] == "secret"
        assert params["format"] == "json"
        assert params["nojsoncallback"] == "1"
        assert params["extras"] == "url_z,date_taken"
        assert params["safe_search"] == "1"
        assert "per_page" not in params

    def test_per_page_is_optional(self) -> None:
        params = FlickrAPI(api_key="k", per_page=25).build_listing_url().params

        assert params["per_page"] == "25"

    def test_url_is_deterministic(self) -> None:
        api = FlickrAPI(api_key="k")

        assert api.build_listing_url() == api.build_listing_url()

    def test_empty_api_key_raises(self) -> None:
        with pytest.raises(ValueError, match="API key"):
            FlickrAPI(api_key="")


@pytest.mark.core
@pytest.mark.tier(0)
class TestDecodeListing:
    """Tests for decode_listing()."""

    def test_decodes_two_record_envelope(self) -> None:
        """The second record has no url_z and therefore no remote URL."""
        body = (
            b'{"photos":{"photo":[{"id":"1","title":"A","datetaken":"2023-01-01 00:00:00",'
            b'"url_z":"http://x/1.jpg"},{"id":"2","title":"B","datetaken":"2023-01-02 00:00:00"}]}}'
        )

        photos = FlickrAPI(api_key="k").decode_listing(body)

        assert len(photos) == 2
        assert photos[0].photo_id == "1"
        assert photos[0].title == "A"
        assert photos[0].remote_url == "http://x/1.jpg"
        assert photos[0].date_taken == datetime(2023, 1, 1, tzinfo=UTC)
        assert photos[1].photo_id == "2"
        assert photos[1].remote_url is None

    def test_unexpected_envelope_is_rejected(self) -> None:
        """A top-level object without photos is an error, not an empty list."""
        with pytest.raises(DecodeError):
            decode_listing(b'{"unexpected":true}')

    @pytest.mark.parametrize(
        "body",
        [
            b"not json",
            b"[]",
            b'{"photos": []}',
            b'{"photos": {"photo": {}}}',
            b"\xff\xfe",
        ],
    )
    def test_malformed_envelopes_raise(self, body: bytes) -> None:
        with pytest.raises(DecodeError):
            decode_listing(body)

    def test_flickr_error_envelope_raises_with_message(self) -> None:
        body = b'{"stat": "fail", "code": 100, "message": "Invalid API Key"}'

        with pytest.raises(DecodeError, match="Invalid API Key"):
            decode_listing(body)

    def test_empty_photo_array_is_valid(self) -> None:
        assert decode_listing(_listing()) == []

    def test_malformed_records_are_skipped(self) -> None:
        """Bad records are dropped; the good ones survive in order."""
        body = _listing(
            {"id": "1", "title": "A", "datetaken": "2023-01-01 00:00:00"},
            "not an object",
            {"title": "no id", "datetaken": "2023-01-01 00:00:00"},
            {"id": "", "title": "empty id", "datetaken": "2023-01-01 00:00:00"},
            {"id": "4", "title": "bad date", "datetaken": "01/01/2023"},
            {"id": 5, "title": "numeric id", "datetaken": "2023-01-01 00:00:00"},
            {"id": "6", "title": "F", "datetaken": "2023-01-06 10:11:12"},
        )

        photos = decode_listing(body)

        assert [p.photo_id for p in photos] == ["1", "6"]
        assert photos[1].date_taken == datetime(2023, 1, 6, 10, 11, 12, tzinfo=UTC)

    def test_unknown_fields_are_ignored(self) -> None:
        body = _listing(
            {
                "id": "1",
                "title": "A",
                "datetaken": "2023-01-01 00:00:00",
                "owner": "someone",
                "datetakengranularity": 0,
            }
        )

        assert [p.photo_id for p in decode_listing(body)] == ["1"]

    def test_empty_url_means_no_url(self) -> None:
        body = _listing({"id": "1", "title": "A", "datetaken": "2023-01-01 00:00:00", "url_z": ""})

        assert decode_listing(body)[0].remote_url is None

    def test_decode_error_carries_source(self) -> None:
        api = FlickrAPI(api_key="k", endpoint="https://example.test/rest")

        with pytest.raises(DecodeError) as exc_info:
            api.decode_listing(b"{}")

        assert exc_info.value.source == "https://example.test/rest"
