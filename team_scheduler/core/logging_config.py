import logging
import os
import sys
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
LIBRARY_LEVELS = {
    "uvicorn": logging.WARNING,
    "fastapi": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "gspread": logging.WARNING,
    "urllib3": logging.WARNING,
    "google.auth": logging.WARNING,
}


def _resolve_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for the API process.

    Replaces any handlers already installed, so calling it again (e.g. on
    uvicorn reload) does not duplicate output.

    Args:
        log_level: Level name ("DEBUG", "INFO", ...) or logging constant;
            unknown names fall back to INFO
        log_file: Optional file that receives the same records as stdout;
            defaults to the LOG_FILE environment variable
    """
    level = _resolve_level(log_level)
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(sys.stdout)]
    log_file = log_file or os.getenv("LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name, library_level in LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(max(level, library_level))

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module; pass __name__."""
    return logging.getLogger(name)
