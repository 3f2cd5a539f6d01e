"""Identity codec that keeps image bytes untouched."""

from __future__ import annotations

from photocache.core.exceptions import ResourceDecodeError


class RawBytesCodec:
    """Implements ImageCodec[bytes] without interpreting the payload.

    Useful when callers want the exact downloaded bytes, for example to
    hand them to a different image library. Only empty payloads are
    rejected.
    """

    def decode(self, data: bytes) -> bytes:
        """Return the bytes as they are.

        Raises:
            ResourceDecodeError: If the payload is empty.
        """
        if not data:
            raise ResourceDecodeError("Empty image payload", source="<bytes>")
        return bytes(data)

    def encode(self, image: bytes) -> bytes:
        return image
