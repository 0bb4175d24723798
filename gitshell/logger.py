"""Logging setup for the shell and the SSH daemon.

Messages go to the logger named "gitshell"; structured fields are passed as
``extra={"fields": {...}}``.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

LOGGER_NAME = "gitshell"

_TRACE = 5
_LEVELS = {
    "trace": _TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "panic": logging.CRITICAL,
}
_LEVEL_NAMES = {
    _TRACE: "trace",
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "fatal",
}
_FORMATS = ("json", "text", "color")


class Closer(Protocol):
    def close(self) -> None: ...


@dataclass
class LogSettings:
    """Where, how and at what level to log."""

    log_file: str = ""
    log_format: str = ""
    log_level: str = ""


class _NullCloser:
    """Closer returned when no handler could be installed."""

    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


class _Formatter(logging.Formatter):
    def __init__(self, as_json: bool) -> None:
        super().__init__()
        self._as_json = as_json

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "time": timestamp.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            "msg": record.getMessage(),
        }
        fields = getattr(record, "fields", None) or {}
        if self._as_json:
            entry.update(fields)
            if record.exc_info:
                entry["error"] = self.formatException(record.exc_info)
            return json.dumps(entry, sort_keys=True, separators=(",", ":"), default=str)
        parts = [f"{key}={_quote(value)}" for key, value in entry.items()]
        parts.extend(f"{key}={_quote(fields[key])}" for key in sorted(fields))
        return " ".join(parts)


def _quote(value: Any) -> str:
    return json.dumps(value, default=str) if isinstance(value, str) else str(value)


def _log_format(value: str) -> str:
    # "combined" makes no sense here; JSON is the default.
    return "json" if value in ("", "combined") else value


def _log_level(value: str) -> str:
    return value or "info"


def _log_file(value: str) -> str:
    return value or "stderr"


def _initialize(settings: LogSettings) -> logging.Handler:
    fmt = _log_format(settings.log_format)
    if fmt not in _FORMATS:
        raise ValueError(f"unknown log format: {fmt}")
    level_name = _log_level(settings.log_level).lower()
    level = _LEVELS.get(level_name)

    output = _log_file(settings.log_file)
    handler: logging.Handler
    if output == "stderr":
        handler = logging.StreamHandler(sys.stderr)
    elif output == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.FileHandler(output, mode="a", encoding="utf-8")
    handler.setFormatter(_Formatter(as_json=fmt == "json"))

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level if level is not None else logging.INFO)
    logger.propagate = False

    if level is None:
        logger.warning(
            "unknown log level, ignoring option", extra={"fields": {"level": level_name}}
        )
    return handler


def _program_name() -> str:
    return os.path.abspath(sys.argv[0]) if sys.argv and sys.argv[0] else ""


def _report_to_syslog(error: Exception) -> None:
    prog = _program_name()
    try:
        handler = logging.handlers.SysLogHandler(
            address="/dev/log", facility=logging.handlers.SysLogHandler.LOG_USER
        )
    except (OSError, AttributeError) as syslog_error:
        print(f"{prog}: Unable to configure logging: {error}, {syslog_error}\n", file=sys.stderr)
        return
    record = logging.makeLogRecord(
        {
            "msg": f"{prog}: Unable to configure logging: {error}\n",
            "levelno": logging.ERROR,
            "levelname": "ERROR",
        }
    )
    try:
        handler.emit(record)
    finally:
        handler.close()


def configure(settings: LogSettings) -> Closer:
    """Configure logging for use behind a remote session such as SSH.

    An empty log file is not accepted; on failure the problem is reported to
    syslog and logging goes to the null device.
    """
    error: Exception = ValueError("no logfile specified")
    if settings.log_file:
        try:
            return _initialize(settings)
        except (OSError, ValueError) as exc:
            error = exc

    _report_to_syslog(error)

    settings.log_file = os.devnull
    try:
        return _initialize(settings)
    except (OSError, ValueError) as exc:
        logging.getLogger(LOGGER_NAME).warning(
            "Unable to configure logging to /dev/null, leaving unconfigured",
            extra={"fields": {"error": str(exc)}},
        )
        return _NullCloser()


def configure_standalone(settings: LogSettings) -> Closer:
    """Configure logging for standalone use.

    An empty log file means stderr; if the file cannot be opened, logging
    falls back to stdout.
    """
    try:
        return _initialize(settings)
    except (OSError, ValueError) as first_error:
        settings.log_file = "stdout"
        closer: Closer = _NullCloser()
        second_error: Exception | None = None
        try:
            closer = _initialize(settings)
        except (OSError, ValueError) as exc:
            second_error = exc

        logger = logging.getLogger(LOGGER_NAME)
        logger.warning(
            "Unable to configure logging, falling back to STDOUT",
            extra={"fields": {"error": str(first_error), "log_file": settings.log_file}},
        )
        if second_error is not None:
            logger.warning(
                "Unable to configure logging to STDOUT, leaving unconfigured",
                extra={"fields": {"error": str(second_error)}},
            )
        return closer