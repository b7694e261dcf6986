"""
Logging Configuration Module

Provides logging setup for the livability map engine.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from livability_map.utils.config_loader import as_bool

LOGGER_NAME = 'livability_map'


def setup_logging(
    log_file: Optional[Path] = None,
    log_level: str = "INFO",
    console: bool = True
) -> logging.Logger:
    """
    Set up logging configuration.

    Parameters
    ----------
    log_file : Path, optional
        Path to log file (default: None, no file logging)
    log_level : str, optional
        Logging level (default: "INFO")
    console : bool, optional
        Enable console logging (default: True)

    Returns
    -------
    logging.Logger
        Configured package logger
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Reconfiguring replaces handlers instead of stacking them
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def setup_logging_from_config(config: dict, project_root: Optional[Path] = None) -> logging.Logger:
    """
    Configure logging from the `logging` section of a loaded config.

    Relative log file paths are resolved against `project_root`.
    """
    log_config = config.get("logging", {})
    log_file = log_config.get("file")
    if log_file:
        log_file = Path(log_file)
        if project_root is not None and not log_file.is_absolute():
            log_file = project_root / log_file
    console = as_bool(log_config.get("console", True))
    return setup_logging(
        log_file=log_file,
        log_level=log_config.get("level", "INFO"),
        console=console
    )


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """
    Get a logger instance.

    Parameters
    ----------
    name : str, optional
        Logger name (default: 'livability_map'). Module loggers named with
        `__name__` inherit the package logger's handlers.

    Returns
    -------
    logging.Logger
        Logger instance
    """
    return logging.getLogger(name)
