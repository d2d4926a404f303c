"""Logging setup for the tourney_bank package."""
import logging
import sys
from typing import Optional

from tourney_bank.config import config

PACKAGE_LOGGER = "tourney_bank"


def _configure_package_logger() -> logging.Logger:
    """Attach the stdout handler once, on the package logger only."""
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        root.addHandler(handler)
        root.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the package hierarchy.

    Module loggers carry no handlers of their own; records propagate to the
    package logger, so the level can be changed in one place.

    Args:
        name: Logger name, typically __name__ of the calling module.

    Returns:
        Logger instance.
    """
    _configure_package_logger()
    if not name or name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
        return logging.getLogger(name or PACKAGE_LOGGER)
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
