"""
Logger configuration.

Provides a configured root logger with ISO timestamps.

Dependencies: logging (stdlib), engine.configs
System role: Centralized logging configuration
"""

import logging
import sys

from engine.configs import get_settings


def configure_logging(level: str | int | None = None) -> None:
    """
    Configure Python logging with ISO timestamp and structured format.

    Args:
        level: Root log level name or number, defaults to settings.log_level
    """
    if level is None:
        level = get_settings().log_level

    # Remove any existing handlers to avoid duplicates
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    if isinstance(level, str):
        level = level.upper()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Reduce noise from verbose backend SDKs
    for noisy in ("urllib3", "httpx", "azure", "pinecone", "turbopuffer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get configured logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Configured logger instance
    """
    return logging.getLogger(name)
