"""
Reservation read views.
Schedule markers, per-day filtering, details/receipt views and calendar export.
"""

import re
from datetime import date, datetime, time, timedelta

from utils.datetime_helpers import add_months, days_in_month, format_date_key, get_today, normalize_date
from utils.helpers import format_long_date, format_peso
from .reservation_state import classify_status, is_cancelled, status_color, status_label

DEFAULT_EVENT_TIME = (9, 0)
EVENT_DURATION = timedelta(hours=2)
DEFAULT_PAYMENT_METHOD = 'GCash'
MISSING = '–'

_TIME_LABEL_RE = re.compile(r'^(\d{1,2}):(\d{2})\s*(AM|PM)$', re.IGNORECASE)


# =============================================================================
# SCHEDULE
# =============================================================================

def reservation_date(record: dict) -> date | None:
    return normalize_date(record.get('date'))


def get_reservation_dates(records) -> set:
    """Date keys that carry at least one of the given reservations (any status)."""
    keys = set()
    for record in records:
        day = reservation_date(record)
        if day:
            keys.add(format_date_key(day))
    return keys


def get_reservations_on(records, date_key: str) -> list:
    """Filter reservations falling on a date key."""
    matches = []
    for record in records:
        day = reservation_date(record)
        if day and format_date_key(day) == date_key:
            matches.append(record)
    return matches


def get_schedule_month(records, month_offset: int, today: date = None) -> dict:
    """
    Build the schedule calendar for a month, marking days with reservations.

    Args:
        records: The user's reservations
        month_offset: Months from today's month (may be negative)
        today: Reference date (default: today in the configured timezone)

    Returns:
        dict with 'label', 'month_offset' and 'days'
    """
    today = today or get_today()
    first = add_months(today, month_offset)
    marked = get_reservation_dates(records)

    days = []
    for day_number in range(1, days_in_month(first.year, first.month) + 1):
        day = first.replace(day=day_number)
        key = format_date_key(day)
        days.append({
            'date': key,
            'day': day_number,
            'weekday': day.strftime('%a'),
            'is_today': day == today,
            'has_reservation': key in marked,
        })

    return {'label': first.strftime('%B %Y'), 'month_offset': month_offset, 'days': days}


# =============================================================================
# DISPLAY VIEWS
# =============================================================================

def reservation_card(record: dict) -> dict:
    """Compact list item for a reservation."""
    day = reservation_date(record)
    status = record.get('status')
    cancelled = is_cancelled(status)
    return {
        'id': record.get('id'),
        'pack_name': record.get('pack_name') or 'Package',
        'date': format_date_key(day) if day else None,
        'date_text': day.strftime('%b %d, %Y') if day else MISSING,
        'time_label': record.get('time_label'),
        'occasions': record.get('occasions') or [],
        'address': (record.get('venue') or {}).get('address'),
        'status': status_label(status),
        'status_kind': classify_status(status),
        'status_color': status_color(status),
        'can_cancel': not cancelled,
        'can_delete': cancelled,
    }


def reservation_details(record: dict) -> dict:
    """Human-readable details of a reservation."""
    occasions = record.get('occasions') or []
    foods = record.get('foods') or []
    return {
        'title': f"{record.get('pack_name') or 'Package'} Details",
        'date': format_long_date(reservation_date(record)),
        'time': record.get('time_label') or MISSING,
        'occasions': ', '.join(occasions) if occasions else 'None',
        'foods': ', '.join(foods) if foods else 'None',
        'venue': (record.get('venue') or {}).get('address') or 'Not specified',
        'status': record.get('status') or 'Pending',
    }


def receipt_view(record: dict) -> dict:
    """Receipt of a persisted reservation."""
    venue = record.get('venue') or {}
    occasions = record.get('occasions') or []
    day = reservation_date(record)
    return {
        'id': record.get('id'),
        'date': day.isoformat() if day else MISSING,
        'time': _time_text(record),
        'event_type': ', '.join(occasions) if occasions else MISSING,
        'venue_address': venue.get('address') or MISSING,
        'venue_mobile': venue.get('mobile') or MISSING,
        'foods': list(record.get('foods') or []),
        'pack_name': record.get('pack_name') or MISSING,
        'pack_price': record.get('pack_price') or MISSING,
        'addons': list(record.get('addons') or []),
        'package_price': record.get('package_price_num') or 0,
        'addons_total': record.get('addons_total') or 0,
        'downpayment': record.get('downpayment') or 0,
        'remaining_balance': record.get('remaining_balance') or 0,
        'total_amount': record.get('total_amount') or 0,
        'total_display': format_peso(record.get('total_amount') or 0),
        'payment_method': str(record.get('payment_method') or DEFAULT_PAYMENT_METHOD),
        'status': status_label(record.get('status')),
    }


def _time_text(record: dict) -> str:
    label = record.get('time_label')
    if isinstance(label, str) and label:
        return label
    raw = record.get('date')
    if isinstance(raw, str) and 'T' in raw:
        try:
            return datetime.fromisoformat(raw).strftime('%I:%M %p')
        except ValueError:
            return MISSING
    return MISSING


# =============================================================================
# CALENDAR EXPORT
# =============================================================================

def parse_time_label(label) -> tuple:
    """
    Parse a slot label like '4:00 PM' into (hour, minute).

    Falls back to 9:00 when missing or malformed.
    """
    if not isinstance(label, str):
        return DEFAULT_EVENT_TIME
    match = _TIME_LABEL_RE.match(label.strip())
    if not match:
        return DEFAULT_EVENT_TIME

    hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if hour > 12 or minute > 59:
        return DEFAULT_EVENT_TIME
    if meridiem == 'PM' and hour < 12:
        hour += 12
    if meridiem == 'AM' and hour == 12:
        hour = 0
    return hour, minute


def build_calendar_event(record: dict) -> dict | None:
    """
    Build a device calendar event for a reservation.

    Returns:
        dict with title, start, end, location, notes; None without a usable date
    """
    day = reservation_date(record)
    if day is None:
        return None

    hour, minute = parse_time_label(record.get('time_label'))
    start = datetime.combine(day, time(hour, minute))
    pack_name = record.get('pack_name')

    notes = []
    if record.get('occasions'):
        notes.append(f"Occasions: {', '.join(record['occasions'])}")
    if record.get('foods'):
        notes.append(f"Foods: {', '.join(record['foods'])}")

    return {
        'title': f'Catering Reservation - {pack_name}' if pack_name else 'Catering Reservation',
        'start': start.isoformat(),
        'end': (start + EVENT_DURATION).isoformat(),
        'location': (record.get('venue') or {}).get('address') or None,
        'notes': '\n'.join(notes) or None,
    }
