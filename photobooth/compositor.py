"""Alpha-blend an overlay onto a base raster, centered."""

from __future__ import annotations

import logging

import numpy as np

from .overlays import Overlay
from .raster import RasterImage

logger = logging.getLogger(__name__)


def placement(base_size: tuple[int, int], overlay_size: tuple[int, int]) -> tuple[int, int]:
    """Top-left offset that centers ``overlay_size`` on ``base_size``.

    Offsets are negative when the overlay is larger than the base.
    """
    return (base_size[0] - overlay_size[0]) // 2, (base_size[1] - overlay_size[1]) // 2


def compose(base: RasterImage, overlay: Overlay) -> RasterImage:
    """Return a new, fully opaque raster with ``overlay`` blended over ``base``.

    Only the region where the centered overlay intersects the base is
    blended; overlay pixels falling outside the base are dropped. Each
    covered pixel gets ``overlay_rgb * a + base_rgb * (1 - a)`` where ``a``
    is the overlay alpha scaled to [0, 1]. Every output pixel has alpha 255.
    """
    x, y = placement(base.size, overlay.raster.size)

    out = base.to_array().copy()
    out[..., 3] = 255

    # Intersection in base coordinates, then the matching overlay window.
    left, top = max(x, 0), max(y, 0)
    right = min(x + overlay.width, base.width)
    bottom = min(y + overlay.height, base.height)
    if left < right and top < bottom:
        src = overlay.raster.to_array()[top - y:bottom - y, left - x:right - x]
        alpha = src[..., 3:4].astype(np.float32) / 255.0
        dst = out[top:bottom, left:right, :3].astype(np.float32)
        blended = src[..., :3].astype(np.float32) * alpha + dst * (1.0 - alpha)
        out[top:bottom, left:right, :3] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    else:
        logger.debug("Overlay %s does not intersect the base; nothing to blend", overlay.name)

    return RasterImage.from_array(out)
