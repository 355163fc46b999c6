"""Shared utility functions for the Personal Finance Tracker project."""

import logging
from datetime import UTC, datetime

import colorlog

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


ROOT_LOGGER_NAME = "finance-tracker"


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a project logger; records propagate to the colorized ``finance-tracker`` logger."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not logger.handlers:
        logger.setLevel(logging.INFO)
        handler = logging.StreamHandler()
        formatter = colorlog.ColoredFormatter(
            "%(log_color)s" + LOG_FORMAT,
            datefmt=LOG_DATEFMT,
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    return logging.getLogger(name)


def utcnow() -> datetime:
    """Get the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)
