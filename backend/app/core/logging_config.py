# app/core/logging_config.py
"""
Root logger setup for the service.

Configured once at startup from settings.LOG_LEVEL; repeated calls only
adjust the level so that tests and reloads don't stack handlers.
"""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "multipart")

_configured = False


def setup_logging(level: str = "INFO") -> None:
    global _configured

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _configured = True
