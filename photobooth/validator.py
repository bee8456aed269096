"""Content validation for untrusted image payloads.

The validator is the only place that decides what a byte buffer *is*. It
looks at the magic signature of the stream and never at a caller-supplied
content type or file extension, then asks Pillow to open the container to
make sure the structure is sound and the dimensions can be resolved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image  # type: ignore[import]

from .errors import CorruptImageError, TooLargeError, UnsupportedFormatError
from .raster import PIL_DECODE_ERRORS, ImageFormat

logger = logging.getLogger(__name__)

_SIGNATURES = (
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"GIF87a", ImageFormat.GIF),
    (b"GIF89a", ImageFormat.GIF),
)


@dataclass(frozen=True)
class SourceDescriptor:
    """A payload that passed validation.

    Fields:
        data: The raw bytes, unchanged.
        format: Container format sniffed from the signature.
        size: Payload length in bytes.
        width: Width reported by the container header.
        height: Height reported by the container header.
    """

    data: bytes
    format: ImageFormat
    size: int
    width: int
    height: int


def sniff_format(data: bytes) -> Optional[ImageFormat]:
    """Return the format whose magic signature starts ``data``, if any."""
    for signature, fmt in _SIGNATURES:
        if data.startswith(signature):
            return fmt
    return None


def validate(data: bytes, size_limit: int, max_pixels: Optional[int] = None) -> SourceDescriptor:
    """Check that ``data`` is a supported, structurally valid image.

    Args:
        data: Raw, untrusted bytes.
        size_limit: Largest accepted payload in bytes.
        max_pixels: Largest accepted ``width * height``, if given.

    Returns:
        A :class:`SourceDescriptor` for the payload.

    Raises:
        TooLargeError: If the payload is empty, exceeds ``size_limit`` or
            trips Pillow's decompression-bomb guard, or if the declared
            dimensions exceed ``max_pixels``.
        UnsupportedFormatError: If the signature is not JPEG, PNG or GIF.
        CorruptImageError: If the signature matches but the container does
            not open or has no usable dimensions.
    """
    size = len(data)
    if size == 0:
        raise TooLargeError("empty payload")
    if size > size_limit:
        raise TooLargeError(f"payload of {size} bytes exceeds limit of {size_limit}")

    fmt = sniff_format(data)
    if fmt is None:
        raise UnsupportedFormatError("unrecognised signature")

    try:
        with Image.open(BytesIO(data), formats=[fmt.value]) as img:
            width, height = img.size
            img.verify()
    except Image.DecompressionBombError as exc:
        raise TooLargeError("pixel count exceeds decompression limit") from exc
    except PIL_DECODE_ERRORS as exc:
        raise CorruptImageError(f"{fmt.value} structure could not be read") from exc

    if width <= 0 or height <= 0:
        raise CorruptImageError(f"{fmt.value} reports empty dimensions")
    if max_pixels is not None and width * height > max_pixels:
        raise TooLargeError(f"{width}x{height} exceeds pixel limit of {max_pixels}")

    logger.debug("Validated %s payload: %d bytes, %dx%d", fmt.value, size, width, height)
    return SourceDescriptor(data=data, format=fmt, size=size, width=width, height=height)
