"""Logging configuration helpers."""

import logging

_APP_LOGGER = "group_ordering"
# The Supabase client logs every PostgREST request through httpx at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the application logger.

    Safe to call more than once; later calls only adjust the level.
    """
    logger = logging.getLogger(_APP_LOGGER)
    logger.setLevel(level.upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
