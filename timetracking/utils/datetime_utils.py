#!/usr/bin/env python3
"""
Datetime Utility Functions

Centralized datetime parsing and reporting-period helpers.

Handles:
- Azure DevOps / 7pace ISO timestamps with 'Z' suffix
- OData filter timestamps
- Reporting periods ("7", "14", "mtd")
- Business day counting for expected-hours calculations
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

SUPPORTED_RANGES = ("7", "14", "mtd")
DEFAULT_RANGE = "14"


@dataclass(frozen=True)
class ResolvedRange:
    """
    A concrete reporting window.

    Attributes:
        start: Inclusive window start
        end: Exclusive window end
        label: Human readable description ("last 14 days", "month to date")
        days: Calendar days covered by the window
    """

    start: datetime
    end: datetime
    label: str
    days: int


def parse_ado_timestamp(timestamp_str: str | None) -> datetime | None:
    """
    Parse an ISO timestamp with 'Z' suffix to a datetime object.

    Example: "2026-02-10T10:00:00Z" or "2026-02-10T10:00:00.123456Z"

    Args:
        timestamp_str: ISO timestamp string, or None

    Returns:
        datetime object, or None if input is empty

    Raises:
        ValueError: If timestamp format is invalid or cannot be parsed

    Examples:
        >>> parse_ado_timestamp("2026-02-10T10:00:00Z")
        datetime.datetime(2026, 2, 10, 10, 0, tzinfo=datetime.timezone.utc)

        >>> parse_ado_timestamp(None)
        None
    """
    if not timestamp_str:
        return None

    if not isinstance(timestamp_str, str):
        raise ValueError(f"Timestamp must be a string, got {type(timestamp_str)}")

    try:
        normalized = timestamp_str.replace("Z", "+00:00")
        return datetime.fromisoformat(normalized)
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid timestamp format: {timestamp_str}") from e


def to_odata_timestamp(value: datetime) -> str:
    """
    Format a datetime for an OData filter expression (UTC, millisecond precision).

    Naive datetimes are treated as UTC.

    Examples:
        >>> to_odata_timestamp(datetime(2026, 2, 1, tzinfo=UTC))
        '2026-02-01T00:00:00.000Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def parse_range(value: str | None) -> str:
    """Return value if it is a supported range, otherwise the 14-day default."""
    if value in SUPPORTED_RANGES:
        return value  # type: ignore[return-value]
    return DEFAULT_RANGE


def resolve_range(range_key: str, now: datetime | None = None) -> ResolvedRange:
    """
    Turn a range key into a concrete window ending at `now`.

    Args:
        range_key: "7", "14" or "mtd" (anything else falls back to "14")
        now: Reference time (default: current UTC time)

    Returns:
        ResolvedRange for the window

    Examples:
        >>> resolve_range("7", now=datetime(2026, 2, 10, tzinfo=UTC)).start
        datetime.datetime(2026, 2, 3, 0, 0, tzinfo=datetime.timezone.utc)
    """
    end = now or datetime.now(UTC)
    range_key = parse_range(range_key)

    if range_key == "mtd":
        start = end.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        days = math.ceil((end - start).total_seconds() / 86400)
        return ResolvedRange(start=start, end=end, label="month to date", days=max(days, 1))

    num_days = int(range_key)
    return ResolvedRange(start=end - timedelta(days=num_days), end=end, label=f"last {num_days} days", days=num_days)


def count_business_days(start: datetime, end: datetime) -> int:
    """
    Count Monday-Friday days stepping one day at a time from start while before end.

    Args:
        start: Window start
        end: Window end (exclusive)

    Returns:
        Number of business days, 0 when end <= start

    Examples:
        >>> count_business_days(datetime(2026, 2, 2), datetime(2026, 2, 16))  # Mon -> Mon, two weeks
        10
    """
    count = 0
    cursor = start
    while cursor < end:
        if cursor.weekday() < 5:
            count += 1
        cursor += timedelta(days=1)
    return count
