#!/usr/bin/env python3
# image_term/logging_conf.py
"""
Central logging setup for image-term.
Supports console and optional rotating file logs.
"""

import logging
from logging.handlers import RotatingFileHandler

from image_term.config import Config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(cfg: Config) -> None:
    level_name = cfg["logging"].get("level", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    log_file = cfg["logging"].get("file")
    if log_file:
        handler = RotatingFileHandler(
            log_file,
            maxBytes=int(cfg["logging"].get("rotate_bytes", 5 * 1024 * 1024)),
            backupCount=int(cfg["logging"].get("rotate_keep", 3)),
            encoding="utf-8",
        )
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.setLevel(level)
        logging.getLogger().addHandler(handler)

    # Pillow's plugin loggers are chatty at DEBUG.
    pil_level = logging.DEBUG if cfg["logging"].get("pil_debug") else logging.WARNING
    logging.getLogger("PIL").setLevel(pil_level)
