"""Logging configuration helpers for the soundtrack quiz."""

from __future__ import annotations

import logging
from logging import Logger


def configure_logging(level: int = logging.INFO) -> Logger:
    """Configure basic logging for the API process and return the package logger.

    ``--debug`` on the command line lowers the level to DEBUG. Uvicorn
    configures its own loggers when the server starts.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("soundtrack_quiz")
