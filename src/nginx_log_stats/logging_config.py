"""Logging setup shared by the CLI and the MCP server."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "NGINX_STATS_LOG_LEVEL"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def configure_logging(level_name: str | None = None) -> None:
    """Configure a reasonable default logging setup on stderr.

    ``level_name`` wins over ``NGINX_STATS_LOG_LEVEL``; unknown names fall
    back to INFO.
    """
    name = level_name or os.getenv(LOG_LEVEL_ENV, "INFO")
    level = _LEVELS.get(name.strip().lower(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
