"""Logging setup.

The editor owns stdout and puts the terminal in raw mode, so log records
never go to the console: they go to a file when one is configured and are
dropped otherwise.
"""

from __future__ import annotations

import logging

from kilo.config import EditorConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: EditorConfig) -> logging.Logger:
    """Attach the handler for *config* to the ``kilo`` logger and return it."""
    logger = logging.getLogger("kilo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if config.log_file:
        handler: logging.Handler = logging.FileHandler(config.log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level.upper()))
    logger.propagate = False
    return logger
