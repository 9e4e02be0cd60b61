# === FILE: bank_scraper/logger.py ===
"""Logging setup for **BankScraper**.

All modules log through the single named logger::

    from bank_scraper.logger import logger
    logger.info("Processing: %s", url)

:func:`init_logging` (called by the CLI) rebinds its handlers: stdout always,
plus a rotating file when ``--log-file`` is given. pdfminer, which pdfplumber
drives, logs every malformed object it meets; those third-party loggers are
held at WARNING so a ``DEBUG`` run stays readable.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Iterable, Union

_DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "BankScraper"

# 5 MiB per file, three backups
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3

NOISY_LIBRARIES: Final[tuple[str, ...]] = ("pdfminer", "pdfplumber", "asyncio", "aiohttp.access")

_LevelT = Union[int, str]


def _formatter(fmt: str) -> logging.Formatter:
    return logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S")


def _build_handlers(log_file: str | Path | None, fmt: str) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(fmt))
    handlers: list[logging.Handler] = [console]

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            path, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
        )
        rotating.setFormatter(_formatter(fmt))
        handlers.append(rotating)
    return handlers


def quiet_libraries(names: Iterable[str] = NOISY_LIBRARIES, level: _LevelT = logging.WARNING) -> None:
    """Raise the threshold of chatty third-party loggers."""
    for name in names:
        logging.getLogger(name).setLevel(level)


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the ``BankScraper`` logger.

    Parameters
    ----------
    level
        Numeric or textual level, e.g. ``"DEBUG"``.
    log_file
        Optional path of a rotating log file; its directory is created.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        Close and drop existing handlers first (default), otherwise append.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level.upper() if isinstance(level, str) else level)

    if replace_handlers:
        for handler in list(lg.handlers):
            handler.close()
        lg.handlers.clear()

    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)

    lg.propagate = False
    quiet_libraries()
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers and return the logger; used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "quiet_libraries", "LOGGER_NAME"]
