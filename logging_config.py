"""
Logging setup for the 'prizepicker' logger namespace.
"""
import logging
import sys
from typing import IO, Optional

LOGGER_NAME = "prizepicker"


def setup_logging(
    level: int = logging.WARNING,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write the log to.
        stream: Console stream, stdout unless given.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # re-running setup must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
