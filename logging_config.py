"""
Logging Configuration

Centralized logging configuration for the pass tracker.
Library modules only create loggers; handlers are installed by the
command-line driver through configure_logging().

Usage:
    from logging_config import get_logger, configure_logging

    configure_logging(level=logging.DEBUG)
    logger = get_logger(__name__)
    logger.info("Predicted 5 passes for ISS (ZARYA)")
    logger.warning("TLE data is 42 days old")
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers of the tracker package; everything else stays at WARNING
PACKAGE_LOGGER = "tracking_service"


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the tracker.

    Parameters
    ----------
    level : int
        Logging level for the tracker package (e.g., logging.DEBUG)
    log_file : str, optional
        Path to log file. If None, logs only to console.
    """
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    logging.getLogger("__main__").setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Parameters
    ----------
    name : str
        Name of the logger (typically __name__)

    Returns
    -------
    logging.Logger
        Logger instance
    """
    return logging.getLogger(name)
