#!/usr/bin/env python3
"""
Error Handling Utility Module

Provides the upstream error type shared by the Azure DevOps and 7pace clients,
plus reusable logging patterns for failures.

This module provides:
1. UpstreamAPIError - base class for failures of an external API
2. log_and_continue() - Log error and continue execution (for expected failures)
3. log_and_return_default() - Log error and return a default value
4. log_and_raise() - Log error with context and re-raise (for terminal errors)

All functions use structured logging with contextual information to aid debugging.
"""

import logging
from typing import Any, NoReturn

AUTH_ERROR = "AUTH_ERROR"
API_ERROR = "API_ERROR"
TIMEOUT = "TIMEOUT"
UNAVAILABLE = "UNAVAILABLE"
MALFORMED_RESPONSE = "MALFORMED_RESPONSE"


class UpstreamAPIError(Exception):
    """
    Raised when an external API (Azure DevOps, 7pace) fails.

    Attributes:
        status: HTTP status (504 for timeouts, 503 when unreachable)
        code: Failure kind (AUTH_ERROR, API_ERROR, TIMEOUT, UNAVAILABLE, MALFORMED_RESPONSE)
        url: Request URL without credentials, when known
    """

    def __init__(self, message: str, status: int, code: str = API_ERROR, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.code = code
        self.url = url

    @property
    def is_authorization_error(self) -> bool:
        """True when credentials were rejected or lack a required scope."""
        return self.code == AUTH_ERROR or self.status in (401, 403)

    def __str__(self) -> str:
        return f"{self.args[0]} (status={self.status}, code={self.code})"


def log_and_continue(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> None:
    """
    Log an error with structured context and continue execution gracefully.

    Use this when encountering expected errors that should not halt execution
    (e.g., an unparseable timestamp on a single worklog).

    Args:
        logger: Logger instance from get_logger(__name__)
        error: The caught exception
        context: Structured data about what failed (worklog_id, timestamp, etc.)
        error_type: Human-readable description of the operation

    Example:
        try:
            logged_at = parse_ado_timestamp(raw["Timestamp"])
        except ValueError as e:
            log_and_continue(
                logger, e,
                context={"worklog_id": raw.get("Id"), "timestamp": raw.get("Timestamp")},
                error_type="Worklog timestamp parsing"
            )
    """
    logger.warning(
        f"{error_type} failed: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )


def log_and_return_default(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    default_value: Any = None,
    error_type: str = "Operation",
) -> Any:
    """
    Log an error and return a default value (for functions that need to return something).

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        default_value: Value to return on error (None, [], {}, etc.)
        error_type: Human-readable description

    Returns:
        default_value

    Example:
        try:
            return json.loads(path.read_text())
        except json.JSONDecodeError as e:
            return log_and_return_default(
                logger, e,
                context={"file_path": str(path)},
                default_value={},
                error_type="Settings loading"
            )
    """
    logger.warning(
        f"{error_type} failed, returning default value: {error}",
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
            "default_value": str(default_value),
        },
    )
    return default_value


def log_and_raise(
    logger: logging.Logger,
    error: Exception,
    context: dict[str, Any],
    error_type: str = "Operation",
) -> NoReturn:
    """
    Log an error with context and re-raise it (for terminal errors).

    Args:
        logger: Logger instance
        error: The caught exception
        context: Structured data about what failed
        error_type: Human-readable description

    Raises:
        The original exception after logging

    Example:
        try:
            report = await collector.collect(team_name)
        except UpstreamAPIError as e:
            log_and_raise(logger, e, {"team": team_name}, "Time tracking collection")
    """
    logger.error(
        f"{error_type} failed critically: {error}",
        exc_info=True,
        extra={
            "error_type": error_type,
            "exception_class": error.__class__.__name__,
            "context": context,
        },
    )
    raise error
