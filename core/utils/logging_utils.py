"""
Logging setup shared by the API and command line entry points.
"""

import logging
import os
from logging import Handler
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional

from rich.logging import RichHandler

# Get logger for component store actions
component_logger = logging.getLogger("component_actions")


def log_component_action(action: str, success: bool = True, details: Optional[str] = None):
    """
    Log component store actions for monitoring and debugging

    Args:
        action: The action being performed
        success: Whether the action succeeded
        details: Additional details about the action
    """
    level = logging.INFO if success else logging.ERROR
    message = f"Action: {action}"

    if details:
        message += f" | Details: {details}"

    if not success:
        message += " | Status: FAILED"
    else:
        message += " | Status: SUCCESS"

    component_logger.log(level, message)


def setup_universal_logging(
    log_file: str = "logs/stagecraft.log",
    log_level: str = "INFO",
    rotation_type: str = "size",
    rotation_when: Optional[str] = None,
    rotation_interval: int = 1,
    max_bytes: int = 50 * 1024 * 1024,
    backup_count: int = 10,
    console_log_level: str = "WARNING",
) -> None:
    """
    Configure the root logger with a rotating file handler and a rich console.

    Args:
        log_file: Path to log file (creates directory if needed)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        rotation_type: "size" or "time"
        console_log_level: Logging level for console output
    """
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Remove all existing handlers to prevent duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    try:
        file_handler: Handler
        if rotation_type and rotation_type.lower() in ("time", "timed"):
            file_handler = TimedRotatingFileHandler(
                filename=log_file,
                when=rotation_when or "midnight",
                interval=rotation_interval,
                backupCount=backup_count,
                encoding="utf-8",
            )
        else:
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
        file_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)8s] %(name)s: %(message)s "
                "[%(filename)s:%(lineno)d in %(funcName)s()]"
            )
        )
        root_logger.addHandler(file_handler)
    except OSError as e:
        # Fallback if file logging fails
        print(f"Warning: Could not setup file logging to {log_file}: {e}")

    console_handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=True,
        show_path=False,
    )
    console_handler.setLevel(getattr(logging, console_log_level.upper(), logging.WARNING))
    root_logger.addHandler(console_handler)

    # === NOISE REDUCTION ===
    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "uvicorn.access", "watchfiles"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    root_logger.info("Logging initialized. Log file: %s, Level: %s", log_file, log_level)
