"""Logging helpers for the BlazorPack codec and its developer tool."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from logging import Handler
from logging.config import dictConfig
from logging.handlers import SysLogHandler
from pathlib import Path
from typing import Any

import msgspec

from .model import CodecConfig

SYSLOG_SOCKETS = (Path("/dev/log"), Path("/var/run/log"))
SYSLOG_IDENT = "blazorpack "

_RESERVED_LOG_KEYS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _serialise_value(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        # Frame bytes are rendered as [DE AD BE EF], never decoded as text.
        return f"[{' '.join(f'{b:02X}' for b in bytes(value))}]"
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Emit one JSON object per log line, trimming the package prefix."""

    PREFIX = "blazorpack."

    def format(self, record: logging.LogRecord) -> str:
        logger_name = record.name
        if logger_name.startswith(self.PREFIX):
            logger_name = logger_name[len(self.PREFIX) :]

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": logger_name,
            "message": record.getMessage(),
        }

        extras = {
            key: _serialise_value(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_KEYS and not key.startswith("_")
        }
        if extras:
            payload["extra"] = extras

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return msgspec.json.encode(payload).decode("utf-8")


def _find_syslog_socket() -> Path | None:
    for candidate in SYSLOG_SOCKETS:
        if candidate.exists():
            return candidate
    return None


def build_handler(log_to_syslog: bool = False) -> Handler:
    """Return a syslog handler when requested and available, else stderr."""
    if log_to_syslog:
        socket_path = _find_syslog_socket()
        if socket_path is not None:
            syslog_handler = SysLogHandler(address=str(socket_path), facility=SysLogHandler.LOG_USER)
            syslog_handler.ident = SYSLOG_IDENT
            return syslog_handler
    return logging.StreamHandler()


def configure_logging(config: CodecConfig) -> None:
    """Configure the ``blazorpack`` logger hierarchy from codec settings."""

    level_name = "DEBUG" if config.debug_logging else "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": "blazorpack.config.logging.StructuredLogFormatter",
                }
            },
            "handlers": {
                "blazorpack": {
                    "()": build_handler,
                    "log_to_syslog": config.log_to_syslog,
                    "level": level_name,
                    "formatter": "structured",
                }
            },
            "loggers": {
                "blazorpack": {
                    "level": level_name,
                    "handlers": ["blazorpack"],
                    "propagate": False,
                }
            },
        }
    )

    logging.getLogger("blazorpack").debug("Logging configured at level %s", level_name)
