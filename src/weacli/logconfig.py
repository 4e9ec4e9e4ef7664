# logging setup for the cli: diagnostics go to stderr, the report owns stdout

from __future__ import annotations
import logging
import os
import sys
from typing import Optional
from .client import WeatherClientError

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str) -> int:
    # getLevelName maps a registered name to its number, anything else to "Level <name>"
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise WeatherClientError(f"WEACLI_LOG_LEVEL must be a logging level name (got {name!r})")
    return level


def setup_logging(level: Optional[str] = None) -> None:
    root = logging.getLogger()
    root.setLevel(resolve_level(level or os.getenv("WEACLI_LOG_LEVEL") or "WARNING"))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)

    # connection pool chatter is noise at debug level
    logging.getLogger("urllib3").setLevel(logging.WARNING)
