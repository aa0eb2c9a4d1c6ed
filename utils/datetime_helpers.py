"""
Timezone-aware date/time helpers for the catering application.

``normalize_date`` is the single entry point for reservation date fields:
whatever shape a stored or imported record carries (native date, ISO string,
epoch milliseconds, timestamp wrapper), the rest of the code only sees
``datetime.date``.
"""

import calendar
from collections.abc import Mapping
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TIMEZONE = 'Asia/Manila'
DATE_KEY_FORMAT = '%Y-%m-%d'


def get_timezone() -> ZoneInfo:
    """Get the configured timezone."""
    if has_app_context():
        return ZoneInfo(current_app.config.get('TIMEZONE', DEFAULT_TIMEZONE))
    return ZoneInfo(DEFAULT_TIMEZONE)


def get_today() -> date:
    """Get today's date in the configured timezone."""
    return datetime.now(get_timezone()).date()


def server_timestamp() -> str:
    """Current UTC time as stored in timestamp columns."""
    return datetime.now(timezone.utc).isoformat()


def format_date_key(value: date) -> str:
    """Format a date as its calendar key (YYYY-MM-DD)."""
    return value.strftime(DATE_KEY_FORMAT)


def add_months(value: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``value``'s month."""
    index = value.year * 12 + (value.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def normalize_date(value, tz: ZoneInfo = None) -> date | None:
    """
    Convert any supported date representation to a calendar date.

    Supported inputs:
        - datetime / date objects (aware datetimes are shifted to ``tz``)
        - ISO strings: 'YYYY-MM-DD' or full ISO datetimes (a 'Z' suffix is accepted)
        - numbers: epoch milliseconds
        - timestamp wrappers: objects with ``to_datetime()`` / ``toDate()``,
          or mappings carrying ``seconds`` / ``_seconds`` (+ optional nanoseconds)

    Args:
        value: Raw date field
        tz: Timezone used for aware values (default: configured timezone)

    Returns:
        date, or None when the value cannot be interpreted
    """
    if value is None or isinstance(value, bool):
        return None

    tz = tz or get_timezone()

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        return _from_epoch_seconds(value / 1000, tz)

    if isinstance(value, str):
        return _from_iso_string(value, tz)

    if isinstance(value, Mapping):
        seconds = value.get('seconds', value.get('_seconds'))
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            nanos = value.get('nanoseconds', value.get('_nanoseconds')) or 0
            return _from_epoch_seconds(seconds + nanos / 1e9, tz)
        return None

    for attr in ('to_datetime', 'toDate'):
        convert = getattr(value, attr, None)
        if callable(convert):
            try:
                converted = convert()
            except (TypeError, ValueError, AttributeError):
                return None
            if converted is value:
                return None
            return normalize_date(converted, tz)

    return None


def _from_epoch_seconds(seconds: float, tz: ZoneInfo) -> date | None:
    try:
        return datetime.fromtimestamp(seconds, timezone.utc).astimezone(tz).date()
    except (OverflowError, OSError, ValueError):
        return None


def _from_iso_string(text: str, tz: ZoneInfo) -> date | None:
    text = text.strip()
    if not text:
        return None

    if len(text) == 10:
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None

    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return normalize_date(parsed, tz)
