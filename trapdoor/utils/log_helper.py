"""Logging helper module."""

import logging
import sys

from trapdoor.utils.settings import config as trapdoor_isc

_FORMAT_SIMPLE = "[%(asctime)s] :: %(levelname)s :: %(name)s :: %(message)s"
_FORMAT_VERBOSE = "[%(asctime)s] :: %(levelname)s :: %(name)s :: %(funcName)s:%(lineno)d :: %(message)s"

# Noisy third party loggers, only shown with high verbosity
_THIRD_PARTY_LOGGERS = ("aiohttp.access", "aiohttp.client", "aiohttp.internal", "asyncio")


class LogHelper:
    """Configure root and trapdoor loggers from settings."""

    def __init__(self) -> None:
        """Log helper init."""
        level = logging.getLevelName(trapdoor_isc.debug_level.upper())
        if not isinstance(level, int):
            level = logging.INFO

        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT_VERBOSE if trapdoor_isc.debug_verbose > 1 else _FORMAT_SIMPLE))

        root = logging.getLogger()
        for h in list(root.handlers):
            root.removeHandler(h)
        root.addHandler(handler)
        root.setLevel(level)

        logging.getLogger(trapdoor_isc.APP_NAME).setLevel(level)

        third_party_level = level if trapdoor_isc.debug_verbose > 2 else max(level, logging.WARNING)
        for name in _THIRD_PARTY_LOGGERS:
            logging.getLogger(name).setLevel(third_party_level)
