"""
Logging setup for the CLI and embedding services.

The library itself only calls loguru's logger; nothing is configured on import.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

from loguru import logger

from jobmate.config import JOBMATE_LOG_JSON, JOBMATE_LOG_LEVEL

HUMAN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: Optional[str] = None, json: Optional[bool] = None) -> None:
    """
    Replace loguru's default sink with a stderr sink.

    stdout is left for command output. json=True switches to loguru's
    serialized records.
    """
    level = (level or JOBMATE_LOG_LEVEL).upper()
    serialize = JOBMATE_LOG_JSON if json is None else json

    logger.remove()
    if serialize:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=HUMAN_FORMAT, colorize=sys.stderr.isatty())

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug("Logging configured: level={}, json={}", level, serialize)
