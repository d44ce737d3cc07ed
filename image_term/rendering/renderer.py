#!/usr/bin/env python3
# image_term/rendering/renderer.py
"""
Rendering dispatcher and the two built-in pixel mappers.

- Common API: Renderer.render(cache, mode) -> FrameFrag
- Mappers may register via Renderer.register(mode, mapper)
- A mapper is any callable RGB -> (style, text). Style strings use the
  prompt_toolkit "fg:#RRGGBB" form; "" means unstyled.
- Frames are printed with prompt_toolkit in 24-bit color.
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.output import ColorDepth, Output

from image_term.cache import PixelCache
from image_term.rgb import RGB

StyleRun = Tuple[str, str]                # (style, text)
LineFrag = List[StyleRun]                 # one terminal row as runs
FrameFrag = List[LineFrag]                # full terminal frame as rows
PixelMapper = Callable[[RGB], StyleRun]

__all__ = [
    "Renderer",
    "PixelMapper",
    "default_mappers",
    "true_color_block",
    "ascii_luminance",
    "frame_text",
    "print_frame",
    "StyleRun",
    "LineFrag",
    "FrameFrag",
]

# -------------------------
# Mappers
# -------------------------

BLOCK_GLYPH = "██"

# Upper bound (inclusive) of each luminance bin, darkest to brightest.
_ASCII_BOUNDS = (85, 170, 255, 340, 425, 510, 595, 680, 765)
_ASCII_GLYPHS = (" ", ":", ";", "=", "*", "#", "@", "&", "%")


def true_color_block(pixel: RGB) -> StyleRun:
    """Two full blocks in the pixel's color; two columns keep cells square."""
    return f"fg:{pixel.hex()}", BLOCK_GLYPH


def ascii_luminance(pixel: RGB) -> StyleRun:
    """
    One character picked by r + g + g.
    Green is counted twice and blue ignored; existing output depends on it.
    """
    total = pixel.r + pixel.g + pixel.g
    return "", _ASCII_GLYPHS[bisect_left(_ASCII_BOUNDS, total)]


def default_mappers() -> Dict[str, PixelMapper]:
    return {
        "color": true_color_block,
        "ascii": ascii_luminance,
    }

# -------------------------
# Output helpers
# -------------------------

def frame_text(frame: FrameFrag) -> str:
    """Frame glyphs without styling, one line per row."""
    return "".join("".join(text for _, text in line) + "\n" for line in frame)


def print_frame(frame: FrameFrag, output: Optional[Output] = None, file=None) -> None:
    """Write frame to the terminal (or output/file) in true color."""
    for line in frame:
        print_formatted_text(
            FormattedText(line),
            output=output,
            file=file,
            color_depth=ColorDepth.TRUE_COLOR,
        )

# -------------------------
# Dispatcher
# -------------------------

@dataclass
class Renderer:
    """
    Pixel mapper holder.
    Use register() to add new modes next to 'color' and 'ascii'.
    """
    mappers: Dict[str, PixelMapper] = field(default_factory=default_mappers)
    default_mode: str = "color"

    def register(self, mode: str, mapper: PixelMapper) -> None:
        self.mappers[mode] = mapper

    def get_mapper(self, mode: Optional[str]) -> PixelMapper:
        if mode and mode in self.mappers:
            return self.mappers[mode]
        if self.default_mode in self.mappers:
            return self.mappers[self.default_mode]
        # Fallback
        return true_color_block

    def render(self, cache: PixelCache, mode: Optional[str] = None) -> FrameFrag:
        """
        Map every cell, rows top to bottom and columns left to right.
        Neighbouring cells with the same style are merged into one run.
        """
        mapper = self.get_mapper(mode)
        frame: FrameFrag = []
        for row in cache.rows():
            line: LineFrag = []
            run_style = None
            run_text: List[str] = []
            for pixel in row:
                style, text = mapper(pixel)
                if style != run_style and run_text:
                    line.append((run_style, "".join(run_text)))
                    run_text = []
                run_style = style
                run_text.append(text)
            if run_text:
                line.append((run_style, "".join(run_text)))
            frame.append(line if line else [("", "")])
        return frame
