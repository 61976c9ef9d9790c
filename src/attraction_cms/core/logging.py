"""Logging helpers for the CLI scripts."""
from __future__ import annotations

import logging
from pathlib import Path

from attraction_cms.config.settings import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(settings: Settings) -> Path:
    """Log to stderr and to ``settings.log_dir / settings.log_file``; returns the log path."""
    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_path = settings.log_dir / settings.log_file

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path, encoding="utf-8"),
        ],
        force=True,
    )
    # httpx logs every request at INFO; keep CLI output focused on lookups.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return log_path
