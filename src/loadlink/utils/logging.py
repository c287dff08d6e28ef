from __future__ import annotations

import logging
import os
from typing import Literal, cast, get_args

import coloredlogs  # type: ignore[import]

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

LOG_LEVEL_ENV_VAR = "LOGLEVEL"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# client and server libraries that log every request
HTTP_LOGGERS = ("httpx", "httpcore", "aiohttp.access")


def resolve_level(level: str | None = None) -> LogLevel:
    name = (level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    if name not in get_args(LogLevel):
        raise ValueError(f"Unknown log level: {name}")
    return cast(LogLevel, name)


def setup_logging(level: str | None = None) -> LogLevel:
    """Install colored console logging and return the level in effect.

    Per-request logs from the HTTP libraries are only shown at DEBUG.
    """
    resolved = resolve_level(level)
    coloredlogs.install(level=resolved, fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    http_level = logging.INFO if resolved == "DEBUG" else logging.WARNING
    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)
    return resolved
