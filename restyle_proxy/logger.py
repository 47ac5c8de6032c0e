# restyle_proxy/logger.py
"""Logging for restyle_proxy and the aiohttp loggers it runs under.

``from restyle_proxy.logger import logger`` gives the project logger. The CLI
calls :func:`init_logging` once its options are parsed; the same handlers are
attached to aiohttp's access/server/client loggers so ``serve`` writes one
stream (and one optional rotating file).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "RestyleProxy"

#: aiohttp access-log line: client, request line, status, size, duration
ACCESS_LOG_FORMAT: Final[str] = '%a "%r" %s %b %Tfs'
ACCESS_LOGGER_NAME: Final[str] = "aiohttp.access"
AIOHTTP_LOGGERS: Final[tuple] = (ACCESS_LOGGER_NAME, "aiohttp.server", "aiohttp.web", "aiohttp.client")

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]


def _build_handlers(log_file: Union[str, Path, None], fmt: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(fmt)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _attach(lg: logging.Logger, handlers: List[logging.Handler], level: _LevelT) -> None:
    for old in list(lg.handlers):
        lg.removeHandler(old)
        if old not in handlers:
            old.close()
    for handler in handlers:
        lg.addHandler(handler)
    lg.setLevel(level)
    lg.propagate = False


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Point the project logger and aiohttp's loggers at shared stdout/file handlers.

    Calling it again replaces (and closes) the handlers set by the previous call.
    """
    handlers = _build_handlers(log_file, log_format)
    for name in (LOGGER_NAME,) + AIOHTTP_LOGGERS:
        _attach(logging.getLogger(name), handlers, level)
    return logging.getLogger(LOGGER_NAME)


def init_logging(
    level: _LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    return configure(level=level, log_file=log_file, log_format=log_format)


def access_logger() -> logging.Logger:
    return logging.getLogger(ACCESS_LOGGER_NAME)


logger: logging.Logger = init_logging()

__all__ = [
    "logger",
    "configure",
    "init_logging",
    "access_logger",
    "ACCESS_LOG_FORMAT",
    "DEFAULT_FORMAT",
    "LOGGER_NAME",
]
