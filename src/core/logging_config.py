"""
Logging Configuration Module.

Centralized logging setup for the timeline tools: a rotating log file for
long-running processes (the web server) and plain console output for the
command-line tools.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

# Configuration
LOG_DIR = "logs"
LOG_FILENAME = "storyline_timeline.log"
MAX_BYTES = 5 * 1024 * 1024  # 5 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CLI_FORMAT = "%(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    A RotatingFileHandler that tolerates a locked log file on Windows.

    Rotation fails with PermissionError while another process holds the
    file open. On Windows the handler keeps writing to the current file and
    retries at the next rollover; elsewhere the error propagates.
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except PermissionError:
            if sys.platform != "win32":
                raise


def _reset_root(level: int) -> logging.Logger:
    root_logger = logging.getLogger()
    # Repeated setup calls must not stack handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)
    return root_logger


def _file_handler(log_dir: str, level: int) -> Optional[logging.Handler]:
    """
    Creates the rotating file handler.

    Falls back to the working directory when log_dir cannot be created and
    returns None when no file can be opened at all.
    """
    try:
        os.makedirs(log_dir, exist_ok=True)
        log_path = os.path.join(log_dir, LOG_FILENAME)
    except OSError as e:
        print(f"Failed to create log directory: {e}. Logging to current directory.")
        log_path = LOG_FILENAME

    try:
        handler = SafeRotatingFileHandler(
            log_path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"CRITICAL: Could not set up file logging: {e}")
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(
    debug_mode: bool = False,
    log_to_console: bool = True,
    log_dir: str = LOG_DIR,
) -> None:
    """
    Configures the root logger for a long-running process.

    Args:
        debug_mode (bool): If True, sets level to DEBUG. Defaults to False (INFO).
        log_to_console (bool): If True, also logs to stderr. Defaults to True.
        log_dir (str): Directory for the rotating log file.
    """
    level = logging.DEBUG if debug_mode else logging.INFO
    root_logger = _reset_root(level)

    file_handler = _file_handler(log_dir, level)
    if file_handler is not None:
        root_logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    logging.info(f"Storyline timeline session started at {datetime.now().isoformat()}")


def setup_cli_logging(verbose: bool = False) -> None:
    """
    Configures terse stderr logging for command-line tools.

    Args:
        verbose (bool): If True, sets level to DEBUG, else WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root_logger = _reset_root(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(CLI_FORMAT))
    root_logger.addHandler(handler)


def shutdown_logging() -> None:
    """
    Explicitly closes all logging handlers to release file locks.
    """
    logging.shutdown()
