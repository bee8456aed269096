"""Serialise composites to JPEG and name them."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from io import BytesIO

from .config import JPEG_QUALITY
from .errors import EncodeFailedError
from .raster import RasterImage

logger = logging.getLogger(__name__)

OUTPUT_EXTENSION = ".jpg"


@dataclass(frozen=True)
class CompositeResult:
    """A finished composite, ready for the caller to persist.

    Fields:
        filename: Unique name to store ``data`` under.
        data: JPEG bytes.
        width: Width of the encoded image.
        height: Height of the encoded image.
    """

    filename: str
    data: bytes
    width: int
    height: int


def generate_filename(prefix: str = "img_") -> str:
    """Return ``prefix`` + a unique token + ``.jpg``.

    The token is the current time in nanoseconds as 16 hex digits followed
    by a random UUID4 (122 random bits), e.g.
    ``img_1869c3a0e2b1f4d07f6c1a0f4e9b4b2a8c3d5e6f7a8b9c0d.jpg``.
    """
    return f"{prefix}{time.time_ns():016x}{uuid.uuid4().hex}{OUTPUT_EXTENSION}"


def encode_jpeg(raster: RasterImage, quality: int = JPEG_QUALITY) -> bytes:
    """Encode ``raster`` as a baseline JPEG, dropping the alpha channel."""
    buffer = BytesIO()
    try:
        raster.to_pil().convert("RGB").save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as exc:
        logger.error("JPEG encoding of %dx%d raster failed: %s", raster.width, raster.height, exc)
        raise EncodeFailedError("JPEG encoder failed") from exc
    return buffer.getvalue()


def finalize(raster: RasterImage, prefix: str = "img_") -> CompositeResult:
    """Encode ``raster`` and attach a fresh unique filename."""
    data = encode_jpeg(raster)
    return CompositeResult(
        filename=generate_filename(prefix),
        data=data,
        width=raster.width,
        height=raster.height,
    )
