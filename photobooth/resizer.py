"""Downscale rasters to fit a bounding box."""

from __future__ import annotations

import logging

from PIL import Image  # type: ignore[import]

from .raster import RasterImage

logger = logging.getLogger(__name__)


def fit_dimensions(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """Return the size ``(width, height)`` takes when scaled to fit the box.

    The scale factor is ``min(max_width / width, max_height / height)`` and
    each side is floored. Integer arithmetic keeps the result exact, so the
    same input always maps to the same size. Sizes already inside the box
    are returned unchanged.
    """
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"bounds must be positive, got {max_width}x{max_height}")
    if width <= max_width and height <= max_height:
        return width, height
    # Compare max_width/width with max_height/height without dividing.
    if max_width * height <= max_height * width:
        new_width, new_height = max_width, height * max_width // width
    else:
        new_width, new_height = width * max_height // height, max_height
    return max(1, new_width), max(1, new_height)


def fit(raster: RasterImage, max_width: int, max_height: int) -> RasterImage:
    """Shrink ``raster`` to fit within ``max_width`` x ``max_height``.

    Never upscales. When no scaling is needed the same object is returned.
    Otherwise a new raster is produced with Pillow's LANCZOS filter.
    """
    size = fit_dimensions(raster.width, raster.height, max_width, max_height)
    if size == raster.size:
        return raster
    resized = raster.to_pil().resize(size, Image.Resampling.LANCZOS)
    logger.debug("Resized %dx%d raster to %dx%d", raster.width, raster.height, *size)
    return RasterImage.from_pil(resized)
