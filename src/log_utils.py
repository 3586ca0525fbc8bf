"""
Logging utilities for the Forge Deployment Monitor.
"""

import logging
import sys
from typing import Optional


def setup_logging(
    verbose: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging configuration.

    Progress goes to stdout, warnings and errors go to stderr.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Optional path to a log file

    Returns:
        Logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)

    handlers = [stdout_handler, stderr_handler]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    return logging.getLogger(__name__)
