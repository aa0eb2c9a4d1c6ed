"""
Calendar availability.
Derives booked dates from the reservation collection and builds month views.
"""

import logging
from dataclasses import dataclass
from datetime import date

from utils.datetime_helpers import (
    add_months,
    days_in_month,
    format_date_key,
    get_today,
    normalize_date,
)
from .reservation_state import is_cancelled

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthDay:
    date: date
    date_string: str
    disabled: bool

    def to_dict(self) -> dict:
        return {
            'date': self.date_string,
            'weekday': self.date.strftime('%a'),
            'day': self.date.day,
            'disabled': self.disabled,
        }


def build_booked_set(records) -> set:
    """
    Collect the date keys held by active reservations.

    Records without a status count as pending. Records whose date field
    cannot be interpreted are skipped.

    Args:
        records: Iterable of reservation dicts (uses 'status' and 'date')

    Returns:
        set of 'YYYY-MM-DD' keys
    """
    booked = set()
    for record in records:
        if is_cancelled(record.get('status')):
            continue
        day = normalize_date(record.get('date'))
        if day is None:
            logger.debug(f"[Availability] Skipping reservation {record.get('id')} with unparseable date")
            continue
        booked.add(format_date_key(day))
    return booked


def get_month_dates(month_offset: int, booked=(), today: date = None) -> list:
    """
    Build the day list for the month ``month_offset`` months from today's month.

    A day is disabled when it is booked or strictly before today.

    Args:
        month_offset: 0 for the current month, 1 for next, -1 for previous...
        booked: Collection of booked date keys
        today: Reference date (default: today in the configured timezone)

    Returns:
        list of MonthDay ordered by date
    """
    today = today or get_today()
    first = add_months(today, month_offset)
    booked = set(booked)

    days = []
    for day_number in range(1, days_in_month(first.year, first.month) + 1):
        day = first.replace(day=day_number)
        key = format_date_key(day)
        days.append(MonthDay(date=day, date_string=key, disabled=key in booked or day < today))
    return days


def first_enabled_day(days) -> MonthDay | None:
    for day in days:
        if not day.disabled:
            return day
    return None


def clamp_month_offset(offset: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, offset))


class AvailabilityIndex:
    """
    Booked-date index kept current from a reservation feed.

    Every feed notification triggers a full rebuild; listeners registered with
    ``add_listener`` receive the new booked set after each rebuild.
    """

    def __init__(self):
        self.booked = set()
        self.primed = False
        self._listeners = []
        self._unsubscribe = None

    def attach(self, feed) -> None:
        """Subscribe to a ReservationFeed (replacing any previous subscription)."""
        self.detach()
        self._unsubscribe = feed.subscribe(self.rebuild)

    def detach(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def add_listener(self, listener) -> None:
        self._listeners.append(listener)

    def rebuild(self, records) -> set:
        self.booked = build_booked_set(records)
        self.primed = True
        for listener in list(self._listeners):
            listener(set(self.booked))
        return self.booked

    def month_dates(self, month_offset: int, today: date = None) -> list:
        return get_month_dates(month_offset, self.booked, today)

    def is_available(self, day: date, today: date = None) -> bool:
        today = today or get_today()
        return day >= today and format_date_key(day) not in self.booked
