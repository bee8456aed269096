"""Runtime configuration for the photo-booth service.

Values are read from the environment when :func:`load_settings` is called,
so tests can override them with ``monkeypatch.setenv`` before building an
app.

Environment variables:
    UPLOAD_MAX_SIZE: Largest accepted input in bytes (default 5 MiB).
    MAX_IMAGE_WIDTH: Width bound for the resizer (default 800).
    MAX_IMAGE_HEIGHT: Height bound for the resizer (default 600).
    MAX_INPUT_PIXELS: Largest accepted input width * height (default 40
        million).
    OVERLAYS_DIR: Directory scanned for ``*.png`` overlays at startup
        (default './overlays').
    IMAGE_LIBRARY_DIR: Root for stored composites and their metadata
        (default './image_library').
    FILENAME_PREFIX: Prefix for generated composite names (default 'img_').
    LOG_LEVEL: Log level for the service (default 'INFO').
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_MAX_INPUT_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_WIDTH = 800
DEFAULT_MAX_HEIGHT = 600
DEFAULT_MAX_PIXELS = 40_000_000
JPEG_QUALITY = 90
OVERLAY_EXTENSION = ".png"


@dataclass(frozen=True)
class Settings:
    max_input_size: int = DEFAULT_MAX_INPUT_SIZE
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT
    max_pixels: int = DEFAULT_MAX_PIXELS
    overlays_dir: str = "./overlays"
    image_library_dir: str = "./image_library"
    filename_prefix: str = "img_"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build :class:`Settings` from the current environment."""
    return Settings(
        max_input_size=int(os.getenv("UPLOAD_MAX_SIZE", str(DEFAULT_MAX_INPUT_SIZE))),
        max_width=int(os.getenv("MAX_IMAGE_WIDTH", str(DEFAULT_MAX_WIDTH))),
        max_height=int(os.getenv("MAX_IMAGE_HEIGHT", str(DEFAULT_MAX_HEIGHT))),
        max_pixels=int(os.getenv("MAX_INPUT_PIXELS", str(DEFAULT_MAX_PIXELS))),
        overlays_dir=os.getenv("OVERLAYS_DIR", "./overlays"),
        image_library_dir=os.getenv("IMAGE_LIBRARY_DIR", "./image_library"),
        filename_prefix=os.getenv("FILENAME_PREFIX", "img_"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
