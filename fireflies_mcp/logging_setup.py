"""Logging setup for the MCP server."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Configure the package logger with a single stdout handler.

    Safe to call more than once; the handler is only installed the first time.
    """
    logger = logging.getLogger("fireflies_mcp")
    logger.setLevel(level)

    if not any(getattr(h, "_fireflies_mcp", False) for h in logger.handlers):
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        console._fireflies_mcp = True  # type: ignore[attr-defined]
        logger.addHandler(console)

    return logger
