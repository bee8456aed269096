"""Tests for JPEG encoding and composite naming."""

import io
import re
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from PIL import Image  # type: ignore

from photobooth.encoder import encode_jpeg, finalize, generate_filename
from photobooth.errors import EncodeFailedError, ErrorKind
from photobooth.raster import RasterImage

FILENAME_RE = re.compile(r"^img_[0-9a-f]{16}[0-9a-f]{32}\.jpg$")


def test_finalize_encodes_jpeg_without_alpha():
    arr = np.zeros((30, 40, 4), dtype=np.uint8)
    arr[...] = (10, 200, 30, 255)
    result = finalize(RasterImage.from_array(arr))
    assert result.data.startswith(b"\xff\xd8\xff")
    assert (result.width, result.height) == (40, 30)
    with Image.open(io.BytesIO(result.data)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (40, 30)


def test_encoding_is_deterministic():
    raster = RasterImage.from_array(np.full((16, 16, 4), 99, dtype=np.uint8))
    assert finalize(raster).data == encode_jpeg(raster, 90)
    assert encode_jpeg(raster) == encode_jpeg(raster)


def test_filename_matches_token_pattern():
    name = generate_filename()
    assert FILENAME_RE.match(name), name
    assert generate_filename("booth_").startswith("booth_")


def test_filenames_are_unique_under_concurrency():
    with ThreadPoolExecutor(max_workers=32) as pool:
        names = list(pool.map(lambda _: generate_filename(), range(10_000)))
    assert len(set(names)) == 10_000


def test_encoder_failure_is_chained_and_logged(monkeypatch, caplog):
    def _broken(self, fp, format=None, **params):
        raise OSError("encoder error -2")

    monkeypatch.setattr(Image.Image, "save", _broken)
    raster = RasterImage.from_array(np.zeros((8, 8, 4), dtype=np.uint8))
    with caplog.at_level("ERROR", logger="photobooth.encoder"):
        with pytest.raises(EncodeFailedError) as info:
            finalize(raster)
    assert info.value.kind is ErrorKind.ENCODE_FAILED
    assert isinstance(info.value.__cause__, OSError)
    assert any("8x8" in r.getMessage() for r in caplog.records if r.levelname == "ERROR")
