# -*- coding: utf-8 -*-
"""The logger for visionlink."""
import logging

_DEFAULT_FORMAT = (
    "%(asctime)s | %(levelname)-7s | "
    "%(module)s:%(funcName)s:%(lineno)s - %(message)s"
)

_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger("visionlink")


def setup_logger(
    level: str = "INFO",
    filepath: str | None = None,
) -> None:
    """Set up the visionlink logger.

    Args:
        level (`str`, defaults to `"INFO"`):
            The logging level, one of "DEBUG", "INFO", "WARNING", "ERROR"
            and "CRITICAL".
        filepath (`str | None`, optional):
            The filepath to save the logs. If not provided, the logs are
            only printed to the console.
    """
    if level not in _LEVELS:
        raise ValueError(
            f"Invalid logging level: {level}. Must be one of {_LEVELS}.",
        )

    logger.handlers.clear()
    logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
    logger.addHandler(handler)

    if filepath:
        file_handler = logging.FileHandler(filepath, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        logger.addHandler(file_handler)

    logger.propagate = False


setup_logger("INFO")
