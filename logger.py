"""Logging configuration for Kassza.

CLI output goes through the same logger as diagnostics: the console shows
INFO messages bare and prefixes warnings and errors with their level, while
the dated log file keeps everything with timestamps.
"""

import logging
from datetime import date
from config import Config

LOGGER_NAME = "kassza"


class ConsoleFormatter(logging.Formatter):
    """Print INFO records as plain text, other levels as 'LEVEL: message'."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname}: {message}"


def setup_logging(config: Config) -> logging.Logger:
    """Attach a dated file handler and a console handler to the kassza logger.

    Args:
        config: Application configuration containing log settings.

    Returns:
        Configured logger instance.
    """
    config.log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.log_level)
    logger.propagate = False

    # Repeated calls replace the handlers instead of duplicating output
    logger.handlers.clear()

    log_file = config.log_dir / f"{LOGGER_NAME}-{date.today().isoformat()}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(config.log_level)
    console_handler.setFormatter(ConsoleFormatter("%(message)s"))

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def get_logger() -> logging.Logger:
    """Get the application logger."""
    return logging.getLogger(LOGGER_NAME)
