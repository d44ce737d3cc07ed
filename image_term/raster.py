#!/usr/bin/env python3
# image_term/raster.py
"""
Raster source: decode an image file into an RGB sample grid.

Decoding is done by Pillow. Samples live in a (height, width, 3) uint8 numpy
array, row-major with the origin at the top-left.

A Raster is owned by whoever holds it. Building a PixelCache takes the samples
out of the raster (see Raster.take); afterwards the raster is empty and any
pixel access raises RasterConsumedError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from image_term.errors import ImageLoadError, RasterConsumedError
from image_term.rgb import RGB

__all__ = ["Raster", "decode"]

log = logging.getLogger(__name__)


class Raster:
    """Rectangular grid of RGB samples."""

    def __init__(self, pixels: np.ndarray):
        arr = np.asarray(pixels)
        if arr.ndim != 3 or arr.shape[2] < 3:
            raise ValueError(f"expected (H, W, 3) samples, got shape {arr.shape}")
        if arr.shape[0] < 1 or arr.shape[1] < 1:
            raise ValueError(f"raster must be at least 1x1, got shape {arr.shape}")
        # Copy so the raster owns its samples outright.
        self._pixels: Optional[np.ndarray] = np.array(arr[..., :3], dtype=np.uint8)
        self._width = int(arr.shape[1])
        self._height = int(arr.shape[0])

    # -------------
    # Constructors
    # -------------

    @classmethod
    def from_image(cls, img: Image.Image) -> "Raster":
        if img.mode != "RGB":
            img = img.convert("RGB")
        return cls(np.asarray(img, dtype=np.uint8))

    @classmethod
    def from_pixels(cls, rows: Sequence[Sequence[RGB]]) -> "Raster":
        """Build from nested rows of RGB values, rows top to bottom."""
        if not rows or not rows[0]:
            raise ValueError("raster must be at least 1x1")
        width = len(rows[0])
        for y, row in enumerate(rows):
            if len(row) != width:
                raise ValueError(f"row {y} has {len(row)} pixels, expected {width}")
        arr = np.array([[p.as_tuple() for p in row] for row in rows], dtype=np.uint8)
        return cls(arr)

    # -------------
    # Accessors
    # -------------

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    @property
    def consumed(self) -> bool:
        return self._pixels is None

    def _samples(self) -> np.ndarray:
        if self._pixels is None:
            raise RasterConsumedError("raster samples were moved into a pixel cache")
        return self._pixels

    def pixel_at(self, x: int, y: int) -> RGB:
        arr = self._samples()
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"pixel ({x}, {y}) outside {self._width}x{self._height} raster")
        r, g, b = arr[y, x].tolist()
        return RGB(r, g, b)

    def take(self) -> np.ndarray:
        """Move the samples out of this raster. The raster is empty afterwards."""
        arr = self._samples()
        self._pixels = None
        return arr

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "loaded"
        return f"Raster({self._width}x{self._height}, {state})"


def decode(path: Union[str, Path]) -> Raster:
    """
    Decode the image at path into a Raster.
    Raises ImageLoadError wrapping the Pillow or OS error.
    """
    p = Path(path)
    try:
        with Image.open(p) as img:
            img.load()
            raster = Raster.from_image(img)
    # Pillow plugins report some broken streams with SyntaxError.
    except (OSError, SyntaxError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as exc:
        raise ImageLoadError(p, exc) from exc
    log.debug("decoded %s: %dx%d", p, raster.width(), raster.height())
    return raster
