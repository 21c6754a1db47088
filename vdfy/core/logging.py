from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

# Attributes every LogRecord carries; anything else on a record is request context.
_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
    | {"message", "asctime", "taskName", "level_color", "reset"}
)

_LOG_CONTEXT: ContextVar[dict[str, Any] | None] = ContextVar("vdfy_log_context", default=None)

APP_LOGGER_PREFIX = "vdfy"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
COLOR_FORMAT = (
    "%(level_color)s%(asctime)s | %(levelname)s%(reset)s | %(name)s | "
    "%(filename)s:%(lineno)d | %(level_color)s%(message)s%(reset)s"
)

# SDK loggers are chatty at INFO (every storage call, every HTTP request).
THIRD_PARTY_LEVELS: dict[str, int] = {
    "uvicorn": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "supabase": logging.WARNING,
    "postgrest": logging.WARNING,
    "storage3": logging.WARNING,
    "supabase_auth": logging.WARNING,
    "groq": logging.WARNING,
    "openai": logging.WARNING,
    "python_multipart": logging.WARNING,
}


class ContextInjectionFilter(logging.Filter):
    """Copies the active log_context() fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in (_LOG_CONTEXT.get() or {}).items():
            if key not in _RESERVED_RECORD_ATTRS:
                setattr(record, key, value)
        return True


class ContextFormatter(logging.Formatter):
    """Appends extra record fields as a trailing `[key=value ...]` block."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extras = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_ATTRS}
        if not extras:
            return message
        return f"{message} [{' '.join(f'{k}={v}' for k, v in extras.items())}]"


class ColorFormatter(ContextFormatter):
    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",
        "INFO": "\x1b[32m",
        "WARNING": "\x1b[33m",
        "ERROR": "\x1b[31m",
        "CRITICAL": "\x1b[1;31m",
    }

    def format(self, record: logging.LogRecord) -> str:
        record.level_color = self._LEVEL_COLORS.get(record.levelname, "")  # type: ignore[attr-defined]
        record.reset = self._RESET  # type: ignore[attr-defined]
        return super().format(record)


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Temporarily attach context fields to all log lines in this scope."""

    current = _LOG_CONTEXT.get() or {}
    token = _LOG_CONTEXT.set({**current, **kwargs})
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def get_log_context() -> Mapping[str, Any]:
    return _LOG_CONTEXT.get() or {}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(name: str | None) -> int:
    raw = (name or os.getenv("LOG_LEVEL", "INFO")).upper().strip()
    return getattr(logging, raw, logging.INFO)


def setup_logging(*, log_level: str | None = None) -> None:
    """
    Configure process-wide logging.

    Environment variables:
    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    - LOG_COLOR: enable ANSI colors (default: auto when TTY)
    """
    root_level = _resolve_level(log_level)
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    formatter: logging.Formatter
    if _env_flag("LOG_COLOR", sys.stdout.isatty()):
        formatter = ColorFormatter(COLOR_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    else:
        formatter = ContextFormatter(PLAIN_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
    handler.setFormatter(formatter)
    handler.addFilter(ContextInjectionFilter())
    root_logger.addHandler(handler)
    root_logger.setLevel(root_level)
    logging.captureWarnings(True)

    logging.getLogger(APP_LOGGER_PREFIX).setLevel(root_level)
    for name, level in THIRD_PARTY_LEVELS.items():
        # Never let DEBUG on the app turn third-party chatter back on.
        logging.getLogger(name).setLevel(max(level, root_level))

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"log_level": logging.getLevelName(root_level)},
    )
