"""Logging utilities for formula-deps."""

import logging
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import config


def setup_logger(
    name: str = "formula_deps",
    level: Optional[str] = None,
    log_file: Optional[Path] = None,
    rich_output: bool = True
) -> logging.Logger:
    """Set up and configure logger.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, WARNING, ERROR); defaults to logging.level
        log_file: File path for log output; defaults to logging.file
        rich_output: Use rich formatting for console output

    Returns:
        Configured logger instance
    """
    if level is None:
        level = config.log_level
    if log_file is None:
        log_file = config.log_file

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Clear existing handlers
    logger.handlers.clear()

    # Console handler with rich formatting
    if rich_output:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=True
        )
        console_handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )

    logger.addHandler(console_handler)

    # File handler if specified
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger of the package logger.

    Child loggers carry no handlers of their own and propagate to the
    package logger configured by setup_logger().
    """
    return logging.getLogger(f"formula_deps.{name}")


# Default logger instance
logger = setup_logger()
