#!/usr/bin/env python3
# image_term/cache.py
"""
Scaled pixel cache.

Downsamples a raster into a smaller grid by averaging rectangular blocks of
pixels. The cache keeps only the averaged grid; the source raster is consumed
while building and no reference to it survives.

Features:
- floor(size * factor) blocks per axis, each axis derived from its own factor.
- 64-bit per-channel accumulation, truncating integer mean.
- The last block on each axis runs to the raster edge.
- Optional thread pool over block rows.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

import numpy as np

from image_term.errors import InvalidScale
from image_term.raster import Raster, decode
from image_term.rgb import RGB

__all__ = [
    "PixelCache",
    "Scale",
    "average_block",
    "block_layout",
    "block_steps",
    "scale_for_size",
]

log = logging.getLogger(__name__)

Scale = Tuple[float, float]

# Absorbs float error in size * factor, e.g. 100 * 0.29 == 28.999999999999996.
_EPS = 1e-9

# -------------------------
# Block steps
# -------------------------

def _block_count(size: int, factor: float, scale: Scale) -> int:
    """Number of blocks along one axis, floor(size * factor)."""
    if not math.isfinite(factor):
        raise InvalidScale(scale, f"factor {factor!r} is not finite")
    if factor <= 0:
        raise InvalidScale(scale, f"factor {factor!r} must be greater than zero")
    count = int(math.floor(size * factor + _EPS))
    if count == 0:
        raise InvalidScale(scale, f"factor {factor!r} leaves no blocks for size {size}")
    if count > size:
        raise InvalidScale(scale, f"factor {factor!r} would upscale size {size}")
    return count


def block_layout(width: int, height: int, scale: Scale) -> Tuple[int, int, int, int]:
    """
    Return (w_step, h_step, cols, rows).

    cols = floor(width * sx) and rows = floor(height * sy) blocks are laid out
    with w_step = width // cols and h_step = height // rows. Each axis is
    derived from its own dimension and factor.
    """
    if width < 1 or height < 1:
        raise ValueError(f"raster dimensions must be positive, got {width}x{height}")
    try:
        sx, sy = (float(v) for v in scale)
    except (TypeError, ValueError) as exc:
        raise InvalidScale(scale, "expected a pair of numbers") from exc
    cols = _block_count(width, sx, scale)
    rows = _block_count(height, sy, scale)
    return width // cols, height // rows, cols, rows


def block_steps(width: int, height: int, scale: Scale) -> Tuple[int, int]:
    """Return (w_step, h_step), the block size in source pixels."""
    w_step, h_step, _, _ = block_layout(width, height, scale)
    return w_step, h_step


def scale_for_size(width: int, height: int, cols: int, rows: Optional[int] = None) -> Scale:
    """
    Scale factors that fit a width x height image into cols x rows cells.
    rows=None keeps the aspect ratio but never drops below one row.
    Targets larger than the image cap at 1.0.
    """
    if cols < 1 or (rows is not None and rows < 1):
        raise InvalidScale((cols, rows), "target size must be at least 1 cell")
    sx = min(1.0, cols / width)
    if rows is None:
        sy = min(1.0, max(sx, 1 / height))
    else:
        sy = min(1.0, rows / height)
    return sx, sy

# -------------------------
# Averaging
# -------------------------

def average_block(pixels: np.ndarray, xs: range, ys: range) -> RGB:
    """
    Mean color of pixels[ys, xs], truncating per channel.
    Coordinates outside the raster are skipped.
    """
    h, w = pixels.shape[:2]
    x0, x1 = max(xs.start, 0), min(xs.stop, w)
    y0, y1 = max(ys.start, 0), min(ys.stop, h)
    count = max(0, x1 - x0) * max(0, y1 - y0)
    if count == 0:
        raise RuntimeError(f"empty block x={xs} y={ys} in {w}x{h} raster")
    block = pixels[y0:y1, x0:x1, :3]
    sums = block.reshape(-1, 3).sum(axis=0, dtype=np.uint64)
    r, g, b = (int(s) // count for s in sums.tolist())
    return RGB(r, g, b)


def _block_range(i: int, step: int, count: int, size: int) -> range:
    """Pixels covered by block i. The last block runs to the raster edge."""
    start = i * step
    stop = size if i == count - 1 else start + step
    return range(start, stop)


def _average_row(pixels: np.ndarray, w_step: int, cols: int, h_step: int, rows: int, j: int) -> Tuple[RGB, ...]:
    height, width = pixels.shape[:2]
    ys = _block_range(j, h_step, rows, height)
    row: List[RGB] = []
    for i in range(cols):
        row.append(average_block(pixels, _block_range(i, w_step, cols, width), ys))
    return tuple(row)

# -------------------------
# PixelCache
# -------------------------

class PixelCache:
    """
    Immutable grid of averaged colors.
    Does NOT store the original raster data.
    """

    __slots__ = ("_grid",)

    def __init__(self, grid: Sequence[Sequence[RGB]] = ()):
        rows = tuple(tuple(r) for r in grid)
        if rows:
            w = len(rows[0])
            for y, r in enumerate(rows):
                if len(r) != w:
                    raise ValueError(f"row {y} has {len(r)} cells, expected {w}")
        self._grid: Tuple[Tuple[RGB, ...], ...] = rows

    # ----------------------
    # Builders
    # ----------------------

    @classmethod
    def from_raster(cls, raster: Raster, scale: Scale, workers: int = 1) -> "PixelCache":
        """
        Average raster into blocks sized by scale. Consumes the raster.
        Raises InvalidScale before touching the samples if scale is unusable.
        """
        layout = block_layout(raster.width(), raster.height(), scale)
        pixels = raster.take()
        return cls._build(pixels, *layout, workers=workers)

    @classmethod
    def from_path(cls, path: Union[str, Path], scale: Scale, workers: int = 1) -> "PixelCache":
        """Decode path and build a scaled cache. Decode errors raise ImageLoadError."""
        return cls.from_raster(decode(path), scale, workers=workers)

    @classmethod
    def unscaled_from_path(cls, path: Union[str, Path]) -> "PixelCache":
        """One cell per source pixel."""
        pixels = decode(path).take()
        height, width = pixels.shape[:2]
        return cls._build(pixels, 1, 1, width, height, workers=1)

    @classmethod
    def _build(cls, pixels: np.ndarray, w_step: int, h_step: int, cols: int, rows: int,
               workers: int = 1) -> "PixelCache":
        height, width = pixels.shape[:2]
        if cols == width and rows == height:
            # No averaging needed; copy samples straight into cells.
            grid = [tuple(RGB(r, g, b) for r, g, b in row) for row in pixels[..., :3].tolist()]
        elif workers > 1 and rows > 1:
            work = partial(_average_row, pixels, w_step, cols, h_step, rows)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                grid = list(pool.map(work, range(rows)))
        else:
            grid = [_average_row(pixels, w_step, cols, h_step, rows, j) for j in range(rows)]
        cache = cls(grid)
        log.debug(
            "built %dx%d cache from %dx%d raster (block %dx%d, workers=%d)",
            cache.width(), cache.height(), width, height, w_step, h_step, workers,
        )
        return cache

    # ----------------------
    # Accessors
    # ----------------------

    def height(self) -> int:
        return len(self._grid)

    def width(self) -> int:
        return len(self._grid[0]) if self._grid else 0

    def pixel_at(self, x: int, y: int) -> RGB:
        if not (0 <= x < self.width() and 0 <= y < self.height()):
            raise IndexError(f"cell ({x}, {y}) outside {self.width()}x{self.height()} cache")
        return self._grid[y][x]

    def rows(self) -> Iterator[Tuple[RGB, ...]]:
        """Rows top to bottom, each left to right."""
        return iter(self._grid)

    def __iter__(self) -> Iterator[Tuple[RGB, ...]]:
        return self.rows()

    def __len__(self) -> int:
        return self.width() * self.height()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelCache):
            return NotImplemented
        return self._grid == other._grid

    def __hash__(self) -> int:
        return hash(self._grid)

    def __repr__(self) -> str:
        return f"PixelCache({self.width()}x{self.height()})"
