# === FILE: site_probe/logger.py ===
"""Логгер проекта **SiteProbe**.

Импортируемый экземпляр :data:`logger` пишет в stdout; CLI переинициализирует
его через :func:`init_logging` (уровень и необязательный файл с ротацией).
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteProbe"

_LevelT = Union[int, str]


def init_logging(level: _LevelT = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Replace the handlers of the ``SiteProbe`` logger and apply *level*.

    *log_file* adds a rotating file handler (5 MiB × 3) next to stdout.
    """
    formatter = logging.Formatter(DEFAULT_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    lg.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)
    lg.propagate = False
    return lg


logger: logging.Logger = init_logging()

__all__ = ["logger", "init_logging", "LOGGER_NAME"]
