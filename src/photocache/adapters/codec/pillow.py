"""Pillow-based image codec storing images as JPEG."""

from __future__ import annotations

import io

from PIL import Image

from photocache.core.exceptions import ResourceDecodeError


# Modes JPEG can store without conversion
_JPEG_MODES = frozenset({"RGB", "L", "CMYK"})


class JpegCodec:
    """Decodes any image Pillow understands and re-encodes it as JPEG.

    Implements ImageCodec[Image.Image]. Images are written at a fixed
    quality, so the file on disk is a re-encoding and not the downloaded
    bytes.

    Attributes:
        quality: JPEG quality used when encoding (1-95).
    """

    def __init__(self, quality: int = 50) -> None:
        if not 1 <= quality <= 95:
            raise ValueError(f"JPEG quality must be between 1 and 95, got {quality}")
        self.quality = quality

    def decode(self, data: bytes) -> Image.Image:
        """Decode image bytes fully into memory.

        Args:
            data: Raw bytes of a JPEG, PNG, GIF, WebP, ... image.

        Returns:
            The loaded image.

        Raises:
            ResourceDecodeError: If Pillow cannot identify or read the bytes.
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise ResourceDecodeError(
                f"Cannot decode image ({len(data)} bytes)", source="<bytes>", cause=e
            ) from e
        return image

    def encode(self, image: Image.Image) -> bytes:
        """Encode an image as JPEG at the configured quality."""
        if image.mode not in _JPEG_MODES:
            image = image.convert("RGB")
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=self.quality)
        return buffer.getvalue()
