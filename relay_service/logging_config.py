"""
logging_config.py — Centralized Logging Configuration for the Relay

Every module logs through the standard library logger hierarchy; this module
installs the shared format and handlers once at startup.

Features:
    • Console output (stdout, container friendly), optional log file
    • Process ID tagging for multi-worker visibility
    • Reduced verbosity for the HTTP client libraries (httpx, httpcore)
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(levelname)s - [PID:%(process)d] - %(message)s'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None):
    """
    Configures the global logging system for the application.

    Args:
        level (str): Root log level name, e.g. "INFO" or "DEBUG".
        log_file (str | None): When given, records are also appended to this file.
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )

    # httpx logs every request at INFO, which would duplicate our attempt logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name):
    """
    Returns a logger for a module or component name.

    Args:
        name (str): The logger name, typically the module's __name__.

    Returns:
        logging.Logger: Logger that follows the global format and handlers.
    """
    return logging.getLogger(name)
