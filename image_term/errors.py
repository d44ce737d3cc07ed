#!/usr/bin/env python3
# image_term/errors.py
"""
Exception hierarchy for loading images and building pixel caches.

Everything raised by image_term derives from ImageCacheError so callers can
catch the whole family in one place.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "ImageCacheError",
    "InvalidScale",
    "ImageLoadError",
    "MismatchedSize",
    "RasterConsumedError",
]


class ImageCacheError(Exception):
    """Base class for image_term errors."""


class InvalidScale(ImageCacheError, ValueError):
    """Scale factor is not usable for the given image dimensions."""

    def __init__(self, scale, reason: str):
        self.scale = scale
        self.reason = reason
        super().__init__(f"invalid scale {scale!r}: {reason}")


class ImageLoadError(ImageCacheError):
    """Decoding an image failed. The underlying error is kept on .cause."""

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        msg = f"failed to load image {str(path)!r}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class MismatchedSize(ImageCacheError):
    """Two caches with different dimensions were compared."""

    def __init__(self, left, right):
        self.left = left
        self.right = right
        super().__init__(f"size mismatch: {left} vs {right}")


class RasterConsumedError(ImageCacheError):
    """The raster's samples were handed over to a pixel cache."""
