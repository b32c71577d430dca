"""
Logging for the storefront cart.

The root logger gets one stdout handler the first time this module is
imported. LOG_LEVEL picks the level; LOG_FORMAT=simple drops the timestamp
for collectors that add their own.

    from storefront.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Longest session/product id fragment written to a log line
MAX_ID_LENGTH = 8


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    simple = os.environ.get("LOG_FORMAT", "").lower() == "simple"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if simple else LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape(value: str) -> str:
    # Session ids and notes come from the shopper; keep them on one log line
    return (
        value.replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


def sanitize_id_for_logging(id_value) -> str:
    """Short, single-line form of a session or product id. 0 is a valid product id."""
    if id_value is None or id_value == "":
        return "N/A"
    return _escape(str(id_value))[:MAX_ID_LENGTH]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Single-line line-item notes, cut to max_length with a trailing ellipsis."""
    if not value:
        return "N/A"
    safe_value = _escape(str(value))
    if len(safe_value) <= max_length:
        return safe_value
    return safe_value[:max_length] + "..."


__all__ = [
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
