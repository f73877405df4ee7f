"""
Logging setup for the API server and the terminal client.

Diagnostic output goes to stderr so the terminal client's transcript on
stdout stays clean.
"""

from __future__ import annotations

import logging
import os
import sys

_LOG_FORMAT = "%(asctime)s.%(msecs)03d " "[%(name)s] %(levelname)s " "%(message)s"
_LOG_DATE_FORMAT = "%H:%M:%S"
_HANDLER_NAME = "dirthalo-stderr"

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "uvicorn.access", "sqlalchemy.engine", "urllib3")


def configure_logging(level: int | str | None = None) -> None:
    """
    Install a stderr handler on the root logger.

    Safe to call more than once: the handler is only added the first time.

    Args:
        level: Logging level; defaults to ``LOG_LEVEL`` from the environment,
            else INFO.
    """
    resolved = level if level is not None else os.getenv("LOG_LEVEL", "INFO").upper()

    root = logging.getLogger()
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(resolved)

    # Silence noisy third-party loggers that write INFO spam
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
