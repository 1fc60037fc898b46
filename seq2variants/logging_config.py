"""
Logging configuration for conversion runs.

Provides:
- Console handler: warnings by default, INFO and up when verbose
- Optional file handler: captures all details for a run
"""

import logging
from pathlib import Path
from typing import Optional

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s - %(threadName)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[Path] = None,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """
    Initialize logging for the seq2variants package.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        verbose: Show INFO messages on the console (default: WARNING only).
        log_file: Optional file receiving all messages.
        file_level: Log level for the file handler.

    Returns:
        The package logger.
    """
    logger = logging.getLogger("seq2variants")
    logger.setLevel(logging.DEBUG)  # Handlers filter

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger
