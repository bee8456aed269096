"""Tests for the overlay registry."""

from collections.abc import KeysView

import pytest
from PIL import Image  # type: ignore

from photobooth.errors import ErrorKind, OverlayNotFoundError
from photobooth.overlays import Overlay, OverlayRegistry
from photobooth.raster import RasterImage


@pytest.fixture
def messy_dir(tmp_path):
    directory = tmp_path / "overlays"
    directory.mkdir()
    Image.new("RGBA", (4, 4), (1, 2, 3, 4)).save(directory / "a.png")
    Image.new("RGB", (4, 4), (9, 9, 9)).save(directory / "b.PNG")
    Image.new("RGB", (4, 4)).save(directory / "c.jpg", format="JPEG")
    (directory / "broken.png").write_bytes(b"\x89PNG\r\n\x1a\nnot really")
    (directory / "notes.txt").write_text("ignore me")
    (directory / "sub").mkdir()
    Image.new("RGBA", (4, 4)).save(directory / "sub" / "d.png")
    return directory


def test_load_scans_png_files_non_recursively(messy_dir):
    registry = OverlayRegistry.load(messy_dir)
    assert list(registry.names()) == ["a.png", "b.PNG"]
    assert len(registry) == 2


def test_loaded_overlays_carry_alpha(messy_dir):
    registry = OverlayRegistry.load(messy_dir)
    assert tuple(registry.get("a.png").raster.to_array()[0, 0]) == (1, 2, 3, 4)
    # RGB overlays become fully opaque RGBA.
    assert tuple(registry.get("b.PNG").raster.to_array()[0, 0]) == (9, 9, 9, 255)


def test_missing_directory_gives_empty_registry(tmp_path):
    registry = OverlayRegistry.load(tmp_path / "nope")
    assert list(registry.names()) == []


def test_names_view_is_restartable(registry):
    names = registry.names()
    assert isinstance(names, KeysView)
    assert list(names) == ["frame1.png", "star.png"]
    assert list(names) == ["frame1.png", "star.png"]


def test_get_is_exact_match(registry):
    assert registry.get("frame1.png").width == 640
    for name in ("FRAME1.png", "frame1", "frame1.png ", "missing.png"):
        with pytest.raises(OverlayNotFoundError) as info:
            registry.get(name)
        assert info.value.kind is ErrorKind.OVERLAY_NOT_FOUND


@pytest.mark.parametrize(
    "name",
    ["../frame1.png", "./frame1.png", "sub/d.png", "..\\frame1.png", "/etc/passwd", "", ".", "..", "frame1.png\x00"],
)
def test_path_like_names_are_rejected(registry, name):
    with pytest.raises(OverlayNotFoundError):
        registry.get(name)


def test_registry_can_be_built_in_memory():
    raster = RasterImage(width=1, height=1, pixels=b"\x00\x00\x00\x00")
    registry = OverlayRegistry([Overlay("x.png", raster)])
    assert "x.png" in registry
    assert registry.get("x.png").raster is raster


def test_registry_rejects_bad_or_duplicate_names():
    raster = RasterImage(width=1, height=1, pixels=b"\x00\x00\x00\x00")
    with pytest.raises(ValueError):
        OverlayRegistry([Overlay("a/b.png", raster)])
    with pytest.raises(ValueError):
        OverlayRegistry([Overlay("x.png", raster), Overlay("x.png", raster)])
