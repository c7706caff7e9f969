"""
Shared logging configuration for the optimizer entry points.

This module provides a consistent logging setup for the command line tool
and the viewer, with both file and console output. Library modules only
create module loggers; handlers are attached here.
"""

import logging
import os
from datetime import datetime

LOG_FILE_NAME = "optimizer.log"


def setup_logger(name, log_level=logging.INFO, log_dir=None):
    """
    Set up a logger with file and console handlers.

    Args:
        name: The name of the logger (typically the package name, so that
            every module logger propagates to it)
        log_level: The logging level of the console (default: logging.INFO)
        log_dir: Directory of the log file (default: ./logs)

    Returns:
        logging.Logger: Configured logger instance
    """
    # Create logger
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid adding handlers multiple times if logger already exists
    if logger.handlers:
        return logger

    # Create logs directory if it doesn't exist
    if log_dir is None:
        log_dir = os.path.join(os.getcwd(), "logs")
    os.makedirs(log_dir, exist_ok=True)

    # Create formatters
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(levelname)s - %(message)s'
    )

    # File handler - logs to logs/optimizer.log
    log_file = os.path.join(log_dir, LOG_FILE_NAME)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    # Console handler - logs to stderr
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(console_formatter)

    # Add handlers to logger
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


def log_script_start(logger, script_name):
    """
    Log the start of a script execution.

    Args:
        logger: Logger instance
        script_name: Name of the script being executed
    """
    logger.info("=" * 80)
    logger.info(f"Starting {script_name}")
    logger.info(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)


def log_script_end(logger, script_name, success=True):
    """
    Log the end of a script execution.

    Args:
        logger: Logger instance
        script_name: Name of the script being executed
        success: Whether the script completed successfully
    """
    status = "COMPLETED SUCCESSFULLY" if success else "FAILED"
    logger.info("=" * 80)
    logger.info(f"{script_name} {status}")
    logger.info(f"Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)
