"""
Logging configuration

All service loggers hang off the ``catalog`` logger, which owns the single
stdout handler.
"""
import logging
import sys
from catalog.config import get_settings

ROOT_LOGGER_NAME = "catalog"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool | None = None) -> logging.Logger:
    """Attach the stdout handler to the package logger (idempotent)"""
    if debug is None:
        debug = get_settings().DEBUG

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.setLevel(logging.DEBUG if debug else logging.INFO)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package logger, configuring it on first use"""
    configure_logging()
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
