"""Logging setup helpers."""

from __future__ import annotations

import logging


_LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=numeric_level, format=_LOG_FORMAT, force=True)
