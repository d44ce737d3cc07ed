#!/usr/bin/env python3
# image_term/rgb.py
"""
RGB color value used by rasters, the pixel cache and the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

__all__ = ["RGB", "BLACK"]


@dataclass(frozen=True)
class RGB:
    """Immutable 8-bit color. Default is black."""
    r: int = 0
    g: int = 0
    b: int = 0

    def __post_init__(self):
        for name in ("r", "g", "b"):
            v = getattr(self, name)
            if not 0 <= v <= 255:
                raise ValueError(f"channel {name}={v} outside 0..255")

    @classmethod
    def new(cls, r: int, g: int, b: int) -> "RGB":
        return cls(int(r), int(g), int(b))

    @classmethod
    def splat(cls, val: int) -> "RGB":
        """Gray with all channels set to val."""
        return cls.new(val, val, val)

    @classmethod
    def from_iter(cls, values: Iterable[int]) -> "RGB":
        # Accepts RGBA too; alpha is dropped.
        r, g, b = list(values)[:3]
        return cls.new(r, g, b)

    def as_tuple(self) -> Tuple[int, int, int]:
        return self.r, self.g, self.b

    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


BLACK = RGB()
