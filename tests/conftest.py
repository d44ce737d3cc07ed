"""
Shared fixtures for image_term tests.
"""
import pytest
from PIL import Image

from image_term.raster import Raster
from image_term.rgb import RGB


@pytest.fixture
def write_png(tmp_path):
    """Write a Pillow image built from nested RGB rows and return its path."""
    def _write(rows, name="img.png"):
        height = len(rows)
        width = len(rows[0])
        img = Image.new("RGB", (width, height))
        img.putdata([p.as_tuple() for row in rows for p in row])
        path = tmp_path / name
        img.save(path)
        return path
    return _write


@pytest.fixture
def solid_raster():
    """Factory for a raster filled with one color."""
    def _make(width, height, color=RGB(10, 20, 30)):
        return Raster.from_pixels([[color] * width for _ in range(height)])
    return _make


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point the config lookup at a file under tmp_path."""
    path = tmp_path / "image_term.json"
    monkeypatch.setenv("IMAGE_TERM_CONFIG", str(path))
    return path
