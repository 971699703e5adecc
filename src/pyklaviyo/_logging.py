"""Debug log wiring for the ``pyklaviyo`` logger.

Modules log through ``logging.getLogger(__name__)`` as usual.  When the
client is created with ``debug=True`` this module attaches an append-only
file handler producing ``[timestamp] [LEVEL] message`` lines, plus a stdout
handler so ERROR lines also reach the caller's console.  Nothing is attached
when debug is off.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable

from pyklaviyo.config import KlaviyoConfig

LOGGER_NAME = "pyklaviyo"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(config: KlaviyoConfig) -> list[logging.Handler]:
    """Attach debug handlers to the package logger and return them."""
    if not config.debug:
        return []

    logger = logging.getLogger(LOGGER_NAME)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = logging.FileHandler(config.log_file, mode="a", encoding="utf-8", delay=True)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    echo_handler = logging.StreamHandler(sys.stdout)
    echo_handler.setLevel(logging.ERROR)
    echo_handler.setFormatter(formatter)

    logger.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)
    logger.addHandler(echo_handler)
    return [file_handler, echo_handler]


def remove_handlers(handlers: Iterable[logging.Handler]) -> None:
    """Detach and close handlers previously returned by :func:`configure_logging`."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in handlers:
        logger.removeHandler(handler)
        handler.close()
