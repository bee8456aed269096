"""Decode validated payloads into RGBA rasters."""

from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image  # type: ignore[import]

from .errors import DecodeFailedError, TooLargeError
from .raster import PIL_DECODE_ERRORS, ImageFormat, RasterImage
from .validator import SourceDescriptor

logger = logging.getLogger(__name__)


def _load(img: Image.Image) -> Image.Image:
    img.load()
    return img


def _load_first_frame(img: Image.Image) -> Image.Image:
    # Animated GIFs open on frame 0; only that frame is used.
    img.seek(0)
    img.load()
    return img


_LOADERS = {
    ImageFormat.JPEG: _load,
    ImageFormat.PNG: _load,
    ImageFormat.GIF: _load_first_frame,
}


def decode(source: SourceDescriptor) -> RasterImage:
    """Decode ``source`` into a new :class:`RasterImage`.

    Pillow is restricted to the container named by the sniffed tag, so a
    payload can never be decoded as a different format than the one it was
    validated as.

    Raises:
        DecodeFailedError: If the stream is truncated or uses a variant the
            decoder cannot read.
    """
    loader = _LOADERS[source.format]
    try:
        with Image.open(BytesIO(source.data), formats=[source.format.value]) as img:
            raster = RasterImage.from_pil(loader(img))
    except Image.DecompressionBombError as exc:
        raise TooLargeError("pixel count exceeds decompression limit") from exc
    except PIL_DECODE_ERRORS as exc:
        logger.info("Decoding %s payload failed: %s", source.format.value, exc)
        raise DecodeFailedError(f"{source.format.value} stream could not be decoded") from exc

    logger.debug("Decoded %s into %dx%d raster", source.format.value, raster.width, raster.height)
    return raster
