"""Image codec adapters."""

from photocache.adapters.codec.pillow import JpegCodec
from photocache.adapters.codec.raw import RawBytesCodec


__all__ = ["JpegCodec", "RawBytesCodec"]
