#!/usr/bin/env python3
# image_term/version.py
"""
Version and build metadata for image-term.
"""

__version__ = "0.3.0"
__build__ = "2026-10-16"
__license__ = "MIT"

def version_info() -> str:
    """Return human-readable version string."""
    return f"image-term v{__version__} (build {__build__})"
