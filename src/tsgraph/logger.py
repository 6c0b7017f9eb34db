"""Logging configuration for tsgraph."""

import logging
import os
import sys

# Create logger for tsgraph
logger = logging.getLogger("tsgraph")


def setup_logger(level: int | None = None) -> None:
    """Setup the tsgraph logger with default configuration.

    Args:
        level: Logging level. Defaults to DEBUG when TSGRAPH_DEBUG=1, INFO otherwise.
    """
    if logger.handlers:
        # Already configured
        return

    if level is None:
        level = logging.DEBUG if os.environ.get("TSGRAPH_DEBUG") == "1" else logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = logging.Formatter("tsgraph: %(message)s")
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False


# Initialize logger on import
setup_logger()
