"""
Logging Configuration Module

Configures the ``ledgerview`` logger hierarchy once, at CLI startup.
Library modules only ever call ``logging.getLogger(__name__)``.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING", logger_name: str = "ledgerview") -> logging.Logger:
    """
    Setup console logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        logger_name: Name of the logger

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a known log level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # Logs go to stderr so command output stays clean
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False

    return logger
