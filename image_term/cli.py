#!/usr/bin/env python3
# image_term/cli.py
"""
Entry point for image-term.

    image-term PATH [SIZE]

SIZE is COLS or COLSxROWS in cells; a cell is one column in ascii mode and
two columns in color mode. Without SIZE the image is drawn one cell per
pixel, unless render.default_cols is set in the config.
"""

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

from image_term.cache import PixelCache, scale_for_size
from image_term.config import Config
from image_term.errors import ImageLoadError, InvalidScale
from image_term.logging_conf import setup_logging
from image_term.raster import decode
from image_term.rendering.renderer import Renderer, frame_text, print_frame
from image_term.version import version_info

log = logging.getLogger("image_term.cli")


def parse_size(text: str) -> Tuple[int, Optional[int]]:
    """Parse "80" or "80x40" into (cols, rows)."""
    cols_s, sep, rows_s = text.lower().partition("x")
    try:
        cols = int(cols_s)
        rows = int(rows_s) if sep else None
    except ValueError:
        raise argparse.ArgumentTypeError(f"size must be COLS or COLSxROWS, got {text!r}") from None
    if cols < 1 or (rows is not None and rows < 1):
        raise argparse.ArgumentTypeError(f"size must be positive, got {text!r}")
    return cols, rows


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="image-term", description=f"{version_info()}: print an image in the terminal.")
    p.add_argument("path", help="image file to render")
    p.add_argument("size", nargs="?", type=parse_size, help="target size in cells, COLS or COLSxROWS (two terminal columns per cell in color mode)")
    return p


def load_cache(path: str, size: Optional[Tuple[int, Optional[int]]], workers: int = 1) -> PixelCache:
    if size is None:
        return PixelCache.unscaled_from_path(path)
    raster = decode(path)
    scale = scale_for_size(raster.width(), raster.height(), *size)
    return PixelCache.from_raster(raster, scale, workers=workers)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = Config.load(create_if_missing=False)
    setup_logging(cfg)
    log.debug("%s, config %s", version_info(), cfg.path)

    size = args.size
    if size is None and cfg["render"]["default_cols"]:
        size = (cfg["render"]["default_cols"], None)

    try:
        cache = load_cache(args.path, size, workers=cfg.workers)
    except ImageLoadError as exc:
        log.error("%s", exc)
        return 1
    except InvalidScale as exc:
        log.error("%s", exc)
        return 2

    frame = Renderer().render(cache, cfg.render_mode)
    if sys.stdout.isatty():
        print_frame(frame)
    else:
        # Redirected output gets plain glyphs, no escape sequences.
        sys.stdout.write(frame_text(frame))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
