"""
Centralized logging configuration for the print storefront.

Every log line carries the name of the thread that wrote it. Requests are
handled on Flask worker threads while delivery checks run on their own
short-lived threads, so the thread name is what ties a line to a check.

Features:
    - Thread name in every log message
    - Console output (always enabled)
    - Rotating file logs (optional, for production)
    - Separate error log for ERROR/CRITICAL messages
    - Logger factories with consistent naming

Log Format:
    2026-10-18 10:15:30 [INFO    ] [MainThread] print_storefront.app - Starting storefront
    2026-10-18 10:15:31 [INFO    ] [Delivery-7] print_storefront.delivery.7 - Estimate ready

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)

    # In a delivery check thread
    check_logger = get_check_logger(request_id)
"""

import logging
import sys
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


APP_LOGGER_NAME = "print_storefront"


# =============================================================================
# THREAD CONTEXT FILTER
# =============================================================================

class ThreadContextFilter(logging.Filter):
    """
    Logging filter that stamps records with the current thread.

    Adds ``thread_name`` and ``thread_id`` attributes used by the format
    string. Never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        current_thread = threading.current_thread()
        record.thread_name = current_thread.name
        record.thread_id = threading.get_ident()
        return True


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    app_name: str = APP_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging with thread context.

    This sets up:
    1. Console handler (always enabled)
    2. Rotating file handler (optional)
    3. Error file handler (optional) - ERROR/CRITICAL only
    4. Thread context filter on every handler

    Calling it again replaces the handlers, so tests and the app factory
    can reconfigure freely.

    Args:
        app_name: Name of the root application logger
        log_level: Minimum log level (default: INFO)
        log_dir: Directory for log files (default: ./logs next to this file)
        enable_file_logging: Whether to write to log files

    Returns:
        Configured application logger
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    thread_filter = ThreadContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(thread_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8"
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(thread_filter)
        logger.addHandler(file_handler)

        error_log_file = log_dir / f"{app_name}_error.log"
        error_handler = RotatingFileHandler(
            filename=error_log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8"
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(thread_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the application namespace.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger such as "print_storefront.services.product_loader"
    """
    if not name.startswith(APP_LOGGER_NAME):
        name = f"{APP_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_check_logger(request_id: int) -> logging.Logger:
    """
    Get a logger for one delivery check.

    Args:
        request_id: Sequence number of the check

    Returns:
        Logger named "print_storefront.delivery.<request_id>"
    """
    return logging.getLogger(f"{APP_LOGGER_NAME}.delivery.{request_id}")
