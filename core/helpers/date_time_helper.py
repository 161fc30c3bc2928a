"""
date_time_helper.py

Helpers for converting and formatting date and time values.

UTC ISO-8601 strings are used for storage (audit ledger, event log); local
strings are only produced for display and for the date stamp drawn onto PDFs.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Returns the current UTC time as an ISO8601 string with microseconds.
    Used for logging and DB storage; sorts lexicographically.
    """
    return utc_now().isoformat(timespec="microseconds")


def to_utc_iso(value: datetime) -> str:
    """Normalises a datetime to a UTC ISO string (naive values count as UTC)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def parse_utc_iso(value: str) -> datetime:
    """Inverse of :func:`to_utc_iso`; always returns an aware datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_to_local_str(utc_iso: str) -> str:
    """
    Formats a UTC ISO8601 timestamp in the host's local timezone.

    :param utc_iso: UTC time as ISO string (from DB/logs)
    :return: String in format "DD.MM.YYYY HH:mm:ss" (local time)
    """
    return parse_utc_iso(utc_iso).astimezone().strftime("%d.%m.%Y %H:%M:%S")


def unix_millis(value: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch for *value* (default: now)."""
    value = value or utc_now()
    return int(value.timestamp() * 1000)


def locale_date_str(day: Optional[date] = None) -> str:
    """Date formatted per the host locale (``%x``), e.g. for date fields."""
    return (day or date.today()).strftime("%x")
