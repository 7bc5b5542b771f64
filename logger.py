"""Logging for Spendwise.

CLI output is written through the same logger as diagnostics: the console
shows plain messages (warnings and errors keep their level), while a daily
file under the log directory keeps timestamps for every record.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "spendwise"


class _ConsoleFormatter(logging.Formatter):
    """Bare message for INFO and below, level-prefixed above it."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.levelno > logging.INFO:
            return f"{record.levelname} - {message}"
        return message


def setup_logging(config: Config) -> logging.Logger:
    """Attach file and console handlers to the application logger.

    Safe to call more than once; earlier handlers are replaced.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    logger.handlers.clear()

    file_handler = logging.FileHandler(
        config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log",
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_ConsoleFormatter())

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger."""
    return logging.getLogger(LOGGER_NAME)
