"""In-memory image types shared by the pipeline stages."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum

import numpy as np
from PIL import Image  # type: ignore[import]


class ImageFormat(str, Enum):
    """Input containers accepted by the validator.

    The value is the format name Pillow uses for the container, so a tag can
    be handed straight to ``Image.open(..., formats=[tag.value])``.
    """

    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"


@dataclass(frozen=True)
class RasterImage:
    """An RGBA raster, 8 bits per channel, rows top to bottom.

    Fields:
        width: Width in pixels.
        height: Height in pixels.
        pixels: Contiguous RGBA buffer of ``width * height * 4`` bytes.
    """

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"raster dimensions must be positive, got {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.pixels) != expected:
            raise ValueError(f"pixel buffer holds {len(self.pixels)} bytes, expected {expected}")

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_pil(cls, img: Image.Image) -> "RasterImage":
        """Copy a Pillow image into a new raster, converting to RGBA."""
        if img.mode != "RGBA":
            img = img.convert("RGBA")
        width, height = img.size
        return cls(width=width, height=height, pixels=img.tobytes())

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "RasterImage":
        """Build a raster from a ``(height, width, 4)`` uint8 array."""
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"expected an array of shape (h, w, 4), got {arr.shape}")
        height, width = arr.shape[:2]
        return cls(width=width, height=height, pixels=np.ascontiguousarray(arr, dtype=np.uint8).tobytes())

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, self.pixels)

    def to_array(self) -> np.ndarray:
        """Read-only ``(height, width, 4)`` uint8 view of the pixel buffer."""
        return np.frombuffer(self.pixels, dtype=np.uint8).reshape(self.height, self.width, 4)


# Exceptions Pillow raises for malformed or truncated streams.
PIL_DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, IndexError, struct.error)
