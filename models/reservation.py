"""
Reservation data access functions.
Handles reservation create, read, update and delete against SQLite.

Every committed write publishes the full collection on the app's
reservation feed, which keeps the availability index current.
"""

from datetime import date, datetime
from uuid import uuid4

from flask import current_app

from database import get_db
from utils.datetime_helpers import format_date_key, normalize_date, server_timestamp
from utils.helpers import from_json, to_json

JSON_FIELDS = {
    'occasions': [],
    'foods': [],
    'venue': {},
    'addons': [],
}

WRITABLE_FIELDS = (
    'user_id', 'user_email', 'date', 'time_label', 'occasions', 'foods',
    'pack_name', 'pack_price', 'venue', 'addons', 'package_price_num',
    'addons_total', 'downpayment', 'remaining_balance', 'total_amount',
    'payment_method', 'status', 'created_at', 'cancelled_at',
)


# =============================================================================
# CREATE
# =============================================================================

def add_reservation(record: dict) -> str:
    """
    Persist a new reservation record.

    Args:
        record: Reservation fields (see WRITABLE_FIELDS). 'created_at'
            defaults to the server timestamp, 'status' to 'pending'.

    Returns:
        str: Generated reservation ID
    """
    if not record.get('user_id'):
        raise ValueError('Reservation requires a user_id')

    reservation_id = uuid4().hex
    values = _prepare_values(record)
    values.setdefault('status', 'pending')
    values.setdefault('created_at', server_timestamp())
    values['id'] = reservation_id

    columns = ', '.join(values)
    placeholders = ', '.join('?' * len(values))

    db = get_db()
    try:
        db.execute(f'INSERT INTO reservations ({columns}) VALUES ({placeholders})',
                   list(values.values()))
        db.commit()
    except Exception:
        db.rollback()
        raise

    _publish_snapshot()
    return reservation_id


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: str) -> dict | None:
    """
    Get reservation by ID.

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM reservations WHERE id = ?', (reservation_id,))
    row = cursor.fetchone()
    return _row_to_dict(row) if row else None


def get_all_reservations() -> list:
    """Get the full reservation collection, oldest first."""
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM reservations ORDER BY created_at')
    return [_row_to_dict(row) for row in cursor.fetchall()]


def get_user_reservations(user_id: str, limit: int = 40) -> list:
    """
    Get a user's reservations, newest first.

    Args:
        user_id: Owner uid
        limit: Maximum number of records

    Returns:
        List of reservation dicts
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT * FROM reservations
        WHERE user_id = ?
        ORDER BY created_at DESC
        LIMIT ?
    ''', (user_id, limit))
    return [_row_to_dict(row) for row in cursor.fetchall()]


# =============================================================================
# UPDATE / DELETE
# =============================================================================

def update_reservation(reservation_id: str, **fields) -> bool:
    """
    Update reservation fields by ID.

    Returns:
        bool: True if a record was updated
    """
    values = _prepare_values(fields)
    if not values:
        return False
    values['updated_at'] = server_timestamp()

    assignments = ', '.join(f'{column} = ?' for column in values)
    db = get_db()
    try:
        cursor = db.execute(f'UPDATE reservations SET {assignments} WHERE id = ?',
                            list(values.values()) + [reservation_id])
        db.commit()
    except Exception:
        db.rollback()
        raise

    if cursor.rowcount:
        _publish_snapshot()
    return cursor.rowcount > 0


def delete_reservation_record(reservation_id: str) -> bool:
    """
    Remove a reservation record by ID.

    Returns:
        bool: True if a record was deleted
    """
    db = get_db()
    try:
        cursor = db.execute('DELETE FROM reservations WHERE id = ?', (reservation_id,))
        db.commit()
    except Exception:
        db.rollback()
        raise

    if cursor.rowcount:
        _publish_snapshot()
    return cursor.rowcount > 0


# =============================================================================
# HELPERS
# =============================================================================

def _prepare_values(record: dict) -> dict:
    values = {}
    for key in WRITABLE_FIELDS:
        if key not in record:
            continue
        value = record[key]
        if key in JSON_FIELDS:
            value = to_json(value if value is not None else JSON_FIELDS[key])
        elif key == 'date':
            values['date_key'] = _date_key(value)
            value = _date_text(value)
        values[key] = value
    return values


def _date_text(value) -> str | None:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    day = normalize_date(value)
    if day is None:
        return None
    # ISO strings keep their time of day
    if isinstance(value, str) and 'T' in value:
        return value
    return day.isoformat()


def _date_key(value) -> str | None:
    day = normalize_date(value)
    return format_date_key(day) if day else None


def _row_to_dict(row) -> dict:
    record = dict(row)
    for key, default in JSON_FIELDS.items():
        record[key] = from_json(record.get(key), default)
    return record


def _publish_snapshot() -> None:
    """Publish the committed collection; read and publish happen under one lock."""
    runtime = current_app.extensions.get('booking_runtime')
    if runtime is not None:
        with runtime.lock:
            runtime.feed.publish(get_all_reservations())
