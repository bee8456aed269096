"""Registry of decorative overlays.

Overlays are PNG files in a trusted directory. They are decoded once when
the registry is loaded and kept in memory; after that the registry is never
modified, so a single instance can be shared by every request.

Registry keys are the overlay file names (``"frame1.png"``). Once loaded
they are plain strings: :meth:`OverlayRegistry.get` never touches the file
system and refuses keys that look like paths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Iterator, KeysView

from PIL import Image  # type: ignore[import]

from .config import OVERLAY_EXTENSION
from .errors import OverlayNotFoundError
from .raster import PIL_DECODE_ERRORS, RasterImage

logger = logging.getLogger(__name__)

_FORBIDDEN_CHARS = ("/", "\\", "\x00")


@dataclass(frozen=True)
class Overlay:
    name: str
    raster: RasterImage

    @property
    def width(self) -> int:
        return self.raster.width

    @property
    def height(self) -> int:
        return self.raster.height


def is_valid_name(name: str) -> bool:
    """Whether ``name`` could be a registry key at all."""
    if not name or name in (".", ".."):
        return False
    return not any(ch in name for ch in _FORBIDDEN_CHARS)


class OverlayRegistry:
    """Read-only mapping of overlay name to :class:`Overlay`."""

    def __init__(self, overlays: Iterable[Overlay] = ()) -> None:
        entries: dict[str, Overlay] = {}
        for overlay in overlays:
            if not is_valid_name(overlay.name):
                raise ValueError(f"invalid overlay name {overlay.name!r}")
            if overlay.name in entries:
                raise ValueError(f"duplicate overlay name {overlay.name!r}")
            entries[overlay.name] = overlay
        self._overlays = MappingProxyType(entries)

    @classmethod
    def load(cls, directory: str | Path) -> "OverlayRegistry":
        """Decode every ``*.png`` directly inside ``directory``.

        Files are loaded in name order. Unreadable files are logged and
        skipped; a missing directory gives an empty registry.
        """
        root = Path(directory)
        if not root.is_dir():
            logger.warning("Overlay directory %s does not exist; no overlays loaded", root)
            return cls()

        overlays = []
        for path in sorted(root.iterdir(), key=lambda p: p.name):
            if not path.is_file() or path.suffix.lower() != OVERLAY_EXTENSION:
                continue
            try:
                with Image.open(path, formats=["PNG"]) as img:
                    raster = RasterImage.from_pil(img)
            except PIL_DECODE_ERRORS as exc:
                logger.warning("Skipping unreadable overlay %s: %s", path.name, exc)
                continue
            overlays.append(Overlay(name=path.name, raster=raster))

        logger.info("Loaded %d overlay(s) from %s", len(overlays), root)
        return cls(overlays)

    def get(self, name: str) -> Overlay:
        """Return the overlay registered under exactly ``name``.

        Raises:
            OverlayNotFoundError: If ``name`` is not a key, or contains path
                separators.
        """
        if not is_valid_name(name):
            raise OverlayNotFoundError("overlay name rejected")
        try:
            return self._overlays[name]
        except KeyError:
            raise OverlayNotFoundError("no overlay with that name") from None

    def names(self) -> KeysView[str]:
        """Overlay names in load order; iterating the view again restarts it."""
        return self._overlays.keys()

    def __contains__(self, name: object) -> bool:
        return name in self._overlays

    def __iter__(self) -> Iterator[str]:
        return iter(self._overlays)

    def __len__(self) -> int:
        return len(self._overlays)
