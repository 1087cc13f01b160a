"""
Generational Housing Affordability - Logging Configuration
JSON log lines in production, readable text elsewhere

Each run writes to stdout and, when LOG_DIR is set, to one file per run
name per day (e.g. logs/pipeline_20240131.log).
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

from pythonjsonlogger import jsonlogger

from config.settings import get_settings

settings = get_settings()

JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _build_formatter() -> logging.Formatter:
    if settings.ENVIRONMENT == "production":
        return jsonlogger.JsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _resolve_level(level: Optional[str]) -> int:
    name = (level or settings.LOG_LEVEL).upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name}")
    return value


def log_file_path(name: str, log_dir: str, day: Optional[datetime] = None) -> str:
    """Daily log file for a run name."""
    day = day or datetime.now()
    return os.path.join(log_dir, f"{name}_{day:%Y%m%d}.log")


def setup_logging(name: str = "generational_housing", level: Optional[str] = None) -> logging.Logger:
    """
    Configure the run logger and route module loggers through the same handlers.

    The run logger does not propagate; module loggers from get_logger(__name__)
    reach the root logger, which gets the same handlers. Calling this again
    replaces the previous handlers and closes their log files.

    Args:
        name: Run logger name, also the log file prefix
        level: Level name overriding settings.LOG_LEVEL

    Returns:
        Configured logger instance

    Raises:
        ValueError: level is not a logging level name
    """
    numeric_level = _resolve_level(level)
    formatter = _build_formatter()

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_DIR:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(log_file_path(name, settings.LOG_DIR)))
    for handler in handlers:
        handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    root_logger = logging.getLogger()

    for old in set(logger.handlers + root_logger.handlers):
        if isinstance(old, logging.FileHandler):
            old.close()

    logger.setLevel(numeric_level)
    logger.propagate = False
    logger.handlers = list(handlers)

    root_logger.setLevel(numeric_level)
    root_logger.handlers = list(handlers)

    return logger


def get_logger(module_name: str) -> logging.Logger:
    return logging.getLogger(module_name)


def log_stage(logger: logging.Logger, title: str, width: int = 60) -> None:
    """Write a banner block marking the start of a pipeline stage."""
    logger.info("=" * width)
    logger.info(title)
    logger.info("=" * width)
