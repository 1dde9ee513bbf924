# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Loguru setup with a per-request id carried in a ContextVar."""

from __future__ import annotations

import logging
import os
import sys
from contextvars import ContextVar
from pathlib import Path

from loguru import logger as _logger

from .sensitive_filter import sanitize_record

_FMT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<lvl>{level:<8}</lvl> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<lvl>{message}</lvl>"
)

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "sqlalchemy.engine")

_REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")

_logger.configure(extra={"request_id": "-"})


def _log_file() -> Path:
    configured = os.getenv("LOG_FILE")
    if configured:
        return Path(configured)
    return Path(__file__).resolve().parents[2] / "instance" / "realityshift.log"


class _StdlibBridge(logging.Handler):
    """Forwards records from stdlib loggers (werkzeug, sqlalchemy) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        _logger.opt(depth=6, exception=record.exc_info).bind(request_id=_REQUEST_ID.get()).log(
            level, record.getMessage()
        )


class ContextualLogger:
    """Loguru proxy that binds the current request id on every call."""

    def __getattr__(self, name):  # pragma: no cover
        return getattr(_logger.bind(request_id=_REQUEST_ID.get()), name)


def set_request_id(value: str | None) -> None:
    _REQUEST_ID.set(value or "-")


def clear_request_id() -> None:
    _REQUEST_ID.set("-")


def setup_logging(level: str | None = None, *, debug_mode: bool = False) -> None:
    level = (level or os.getenv("LOG_LEVEL") or ("DEBUG" if debug_mode else "INFO")).upper()
    log_file = _log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    common = {
        "level": level,
        "format": _FMT,
        "filter": sanitize_record,
        "backtrace": False,
        "diagnose": False,
    }
    _logger.remove()
    _logger.add(sys.stderr, colorize=True, **common)
    _logger.add(
        str(log_file),
        colorize=False,
        enqueue=True,
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
        **common,
    )

    logging.basicConfig(handlers=[_StdlibBridge()], level=0, force=True)
    logging.getLogger("werkzeug").setLevel(logging.INFO)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


logger = ContextualLogger()

__all__ = [
    "clear_request_id",
    "logger",
    "set_request_id",
    "setup_logging",
]
