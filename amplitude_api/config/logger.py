"""Library logging.

Everything logs under the ``amplitude_api`` logger. By default that logger
gets its own stdout handler at WARNING and does not propagate; with
``use_host_logger`` it hands records to whatever the host application set
up on the root logger instead.
"""

import logging
import sys

from amplitude_api.config.settings import AmplitudeConfig, get_config

ROOT_LOGGER_NAME = "amplitude_api"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _LibraryHandler(logging.StreamHandler):
    """Marker type so configure_logging only removes handlers it installed."""


def configure_logging(config: AmplitudeConfig | None = None) -> logging.Logger:
    """Install (or remove) the library's console handler. Idempotent."""
    config = config or get_config()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, _LibraryHandler):
            logger.removeHandler(handler)

    if config.use_host_logger:
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
        return logger

    handler = _LibraryHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the library namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
