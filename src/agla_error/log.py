from __future__ import annotations

import sys

from loguru import logger

from .config import Settings
from .errors import AglaError
from .severity import ErrorSeverity, is_valid_error_severity

DEFAULT_LEVEL = "ERROR"


def configure_logging(settings: Settings) -> int:
    """Route loguru output to stderr according to *settings*.

    Returns the id of the added sink.
    """
    logger.remove()
    return logger.add(sys.stderr, level=settings.log_level, serialize=settings.log_json)


def level_for(error: AglaError) -> str:
    if is_valid_error_severity(error.severity):
        return ErrorSeverity(error.severity).log_level()
    return DEFAULT_LEVEL


def log_error(error: AglaError, log=logger) -> None:  # loguru logger-like
    log.bind(agla_error=error.to_dict()).log(
        level_for(error), "{}: {}", error.error_type, error.message
    )
