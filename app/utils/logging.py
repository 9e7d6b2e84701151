"""
Logging utility module.

This module provides consistent logging configuration across the application,
including formatters, handlers, and convenience functions for logging.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Create logger
logger = logging.getLogger("app")

def configure_logging(level: str = "INFO", log_dir: Optional[str] = None):
    """
    Configure console logging, plus a dated log file when ``log_dir`` is set.

    Args:
        level: Root log level name
        log_dir: Directory to store log files
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    if log_dir:
        setup_file_logging(log_dir)

def setup_file_logging(log_dir: str = "logs"):
    """
    Set up file logging in addition to console logging.

    Args:
        log_dir: Directory to store log files
    """
    # Create log directory if it doesn't exist
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Create file handler
    timestamp = datetime.now().strftime("%Y%m%d")
    file_handler = logging.FileHandler(
        log_path / f"app_{timestamp}.log",
        encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    # Attach to the root logger so every module logger is captured
    logging.getLogger().addHandler(file_handler)

def log_error(error: Exception, context: Optional[str] = None):
    """
    Log an error with optional context, including the stack trace.

    Args:
        error: Exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error(f"{context}: {error!r}", exc_info=error)
    else:
        logger.error(repr(error), exc_info=error)
