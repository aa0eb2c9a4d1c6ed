"""
Reservation state management functions.
Handles status transitions (cancel, payment, delete) and status display.
"""

import logging

from utils.datetime_helpers import server_timestamp
from .reservation import delete_reservation_record, get_reservation_by_id, update_reservation

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

STATUS_PENDING = 'pending'
STATUS_CONFIRMED = 'confirmed'
STATUS_CANCELLED = 'cancelled'
STATUS_UNKNOWN = 'unknown'

STATUS_COLORS = {
    STATUS_CANCELLED: '#DC2626',
    STATUS_CONFIRMED: '#059669',
    STATUS_PENDING: '#F59E0B',
    STATUS_UNKNOWN: '#6B7280',
}


# =============================================================================
# ERRORS
# =============================================================================

class ReservationError(Exception):
    """Base class for reservation lifecycle errors."""


class ReservationNotFoundError(ReservationError):
    pass


class ReservationAccessError(ReservationError):
    """Raised when a user acts on a reservation they do not own."""


class InvalidStateTransitionError(ReservationError):
    pass


# =============================================================================
# STATUS DISPLAY
# =============================================================================

def classify_status(status) -> str:
    """
    Classify free-text status.

    Checks, in order: 'cancel' -> cancelled, 'confirm' -> confirmed,
    'pending' -> pending, anything else -> unknown.
    """
    text = str(status or '').lower()
    if 'cancel' in text:
        return STATUS_CANCELLED
    if 'confirm' in text:
        return STATUS_CONFIRMED
    if 'pending' in text:
        return STATUS_PENDING
    return STATUS_UNKNOWN


def is_cancelled(status) -> bool:
    return classify_status(status) == STATUS_CANCELLED


def status_color(status) -> str:
    """Get the display color for a status."""
    return STATUS_COLORS[classify_status(status)]


def status_label(status) -> str:
    """Get the display label for a status ('Pending' when empty)."""
    text = str(status or '').strip()
    return text[:1].upper() + text[1:] if text else 'Pending'


# =============================================================================
# STATE TRANSITIONS
# =============================================================================

def cancel_reservation(reservation_id: str, user_id: str) -> dict:
    """
    Cancel a reservation.

    The record is kept with status 'cancelled' and a cancellation timestamp.

    Args:
        reservation_id: Reservation ID
        user_id: uid of the acting user (must own the reservation)

    Returns:
        dict: Updated reservation

    Raises:
        ReservationNotFoundError, ReservationAccessError,
        InvalidStateTransitionError if already cancelled
    """
    reservation = _get_owned_reservation(reservation_id, user_id)

    if is_cancelled(reservation.get('status')):
        raise InvalidStateTransitionError('Reservation is already cancelled')

    update_reservation(reservation_id, status=STATUS_CANCELLED, cancelled_at=server_timestamp())
    logger.info(f"[Reservation] {reservation_id} cancelled by {user_id}")
    return get_reservation_by_id(reservation_id)


def delete_reservation(reservation_id: str, user_id: str) -> bool:
    """
    Permanently delete a cancelled reservation.

    Raises:
        ReservationNotFoundError, ReservationAccessError,
        InvalidStateTransitionError if the reservation is not cancelled
    """
    reservation = _get_owned_reservation(reservation_id, user_id)

    if not is_cancelled(reservation.get('status')):
        raise InvalidStateTransitionError('Only cancelled reservations can be deleted')

    deleted = delete_reservation_record(reservation_id)
    logger.info(f"[Reservation] {reservation_id} deleted by {user_id}")
    return deleted


def mark_reservation_payment(reservation_id: str, paid: bool) -> dict:
    """
    Record the outcome of the external payment flow.

    Args:
        reservation_id: Reservation ID
        paid: True marks it confirmed, False puts it back to pending

    Returns:
        dict: Updated reservation

    Raises:
        ReservationNotFoundError, InvalidStateTransitionError on cancelled records
    """
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise ReservationNotFoundError(f'Reservation {reservation_id} not found')

    if is_cancelled(reservation.get('status')):
        raise InvalidStateTransitionError('Cannot record payment on a cancelled reservation')

    update_reservation(reservation_id, status=STATUS_CONFIRMED if paid else STATUS_PENDING)
    return get_reservation_by_id(reservation_id)


def _get_owned_reservation(reservation_id: str, user_id: str) -> dict:
    reservation = get_reservation_by_id(reservation_id)
    if not reservation:
        raise ReservationNotFoundError(f'Reservation {reservation_id} not found')
    if reservation.get('user_id') != user_id:
        raise ReservationAccessError('Reservation belongs to another user')
    return reservation
