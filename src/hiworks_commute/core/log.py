"""Logging setup shared by the CLI entry points."""

import logging
from pathlib import Path
from typing import Optional

from hiworks_commute.worker.platform import get_log_file_path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[Path] = None, console: bool = True) -> None:
    """Configure the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_file: Log file path (default: platform log file)
        console: Also log to stderr
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT)

    package_logger = logging.getLogger("hiworks_commute")
    package_logger.setLevel(log_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file or get_log_file_path(), encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    package_logger.addHandler(file_handler)

    if console:
        # warnings only on stderr unless debugging, the CLI prints results itself
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level if log_level <= logging.DEBUG else logging.WARNING)
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)
