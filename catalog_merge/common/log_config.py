"""
Logging Configuration

Routes the catalog_merge logger hierarchy to stderr so stdout only carries
the preview and merge summaries. Merges run on worker threads, so verbose
output is tagged with the thread name.
"""

import logging
import sys

LOGGER_NAME = "catalog_merge"

DEFAULT_FORMAT = "%(levelname)-8s %(name)s: %(message)s"
VERBOSE_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """
    Attach a single stderr handler to the catalog_merge logger.

    Args:
        verbose: DEBUG level, timestamps and thread names, urllib3 connection logs
        quiet: WARNING level (ignored when verbose is set)

    Returns:
        The configured package logger
    """
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.DEBUG if verbose else logging.WARNING)
    return logger
