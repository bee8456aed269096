"""Shared fixtures: in-memory test images and a small overlay directory."""

import io

import numpy as np
import pytest
from PIL import Image  # type: ignore

from photobooth.overlays import OverlayRegistry


def image_bytes(fmt="JPEG", size=(64, 48), color=(200, 30, 30), mode="RGB", noise=False):
    """Encode a solid (or noisy) test image with Pillow."""
    if noise:
        rng = np.random.default_rng(1234)
        channels = len(mode)
        arr = rng.integers(0, 256, size=(size[1], size[0], channels), dtype=np.uint8)
        img = Image.fromarray(arr)
    else:
        img = Image.new(mode, size, color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def frame_overlay(size=(640, 480), border=20):
    """Opaque border around a fully transparent window."""
    img = Image.new("RGBA", size, (255, 255, 255, 255))
    img.paste((0, 0, 0, 0), (border, border, size[0] - border, size[1] - border))
    return img


@pytest.fixture
def make_image():
    return image_bytes


@pytest.fixture
def overlay_dir(tmp_path):
    """A directory holding two overlays: ``frame1.png`` and ``star.png``."""
    directory = tmp_path / "overlays"
    directory.mkdir()
    frame_overlay().save(directory / "frame1.png")
    Image.new("RGBA", (32, 32), (255, 215, 0, 128)).save(directory / "star.png")
    return directory


@pytest.fixture
def registry(overlay_dir):
    return OverlayRegistry.load(overlay_dir)
