"""
Centralized logging configuration with structured JSON output.

Every module logs through get_logger(__name__) and attaches context with
`extra={...}` (or log_with_context). Both formatters render that context:
JSONFormatter merges it into the JSON object, ContextFormatter appends it
as key=value pairs after the message.

Usage:
    from timetracking.core.logging_config import get_logger

    logger = get_logger(__name__)
    logger.warning("7pace request timed out", extra={"url": url})
"""

import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """
    Collect the context fields attached to a log record.

    Fields passed via `extra=` become record attributes; fields passed via
    log_with_context arrive nested under `extra_fields` and are flattened.

    Example:
        >>> logger.warning("Request failed", extra={"url": url, "status": 500})
        # record_context(record) == {"url": url, "status": 500}
    """
    context = {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRIBUTES and key != "extra_fields" and not key.startswith("_")
    }
    extra_fields = getattr(record, "extra_fields", None)
    if isinstance(extra_fields, dict):
        context.update(extra_fields)
    return context


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with context fields at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        for key, value in record_context(record).items():
            log_data.setdefault(key, value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ContextFormatter(logging.Formatter):
    """
    Human-readable console formatter.

    Colors the level name on a terminal and appends context as key=value.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if sys.stderr.isatty():
            record.levelname = f"{self.COLORS.get(levelname, '')}{levelname}{self.RESET}"

        try:
            line = super().format(record)
        finally:
            record.levelname = levelname

        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        # Keep the traceback (if any) after the context
        first, sep, rest = line.partition("\n")
        return f"{first} | {pairs}{sep}{rest}"


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    json_output: bool = False,
) -> None:
    """
    Configure the root logger for a collection run.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Optional JSON log file (parent directories are created)
        json_output: Use JSONFormatter on the console too

    Example:
        # Scheduled run
        setup_logging(level="INFO", log_file=Path(".tmp/logs/time_tracking.log"), json_output=True)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    if json_output:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            ContextFormatter(fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
        )
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: str, message: str, **context: Any) -> None:
    """
    Log a message with context fields.

    Fields are nested under `extra_fields` so names that clash with
    LogRecord attributes do not raise; record_context flattens them.

    Example:
        log_with_context(logger, "info", "Report built", team="Platform", total_hours=312.5)
    """
    getattr(logger, level.lower())(message, extra={"extra_fields": context})
