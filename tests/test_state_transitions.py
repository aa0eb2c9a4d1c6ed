"""
Tests for the post-booking lifecycle: cancel, delete, payment and status display.
"""

import pytest

from models.reservation_state import (
    InvalidStateTransitionError,
    ReservationAccessError,
    ReservationNotFoundError,
    cancel_reservation,
    classify_status,
    delete_reservation,
    mark_reservation_payment,
    status_color,
    status_label,
)


class TestStatusDisplay:
    """Tests for status classification and display."""

    @pytest.mark.parametrize('status,expected', [
        ('cancelled', 'cancelled'),
        ('Cancelled by customer', 'cancelled'),
        ('confirmed', 'confirmed'),
        ('Payment Confirmed', 'confirmed'),
        ('pending', 'pending'),
        ('PENDING', 'pending'),
        ('completed', 'unknown'),
        ('', 'unknown'),
        (None, 'unknown'),
    ])
    def test_classify_status(self, status, expected):
        assert classify_status(status) == expected

    def test_cancel_takes_precedence(self):
        assert classify_status('confirmed then cancelled') == 'cancelled'

    def test_colors(self):
        assert status_color('cancelled') == '#DC2626'
        assert status_color('confirmed') == '#059669'
        assert status_color('pending') == '#F59E0B'
        assert status_color('done') == '#6B7280'

    def test_labels(self):
        assert status_label('pending') == 'Pending'
        assert status_label(None) == 'Pending'
        assert status_label('confirmed') == 'Confirmed'


class TestCancel:
    """Tests for cancel_reservation."""

    def test_cancel_keeps_record(self, app, make_reservation):
        from models.reservation import get_reservation_by_id

        reservation_id = make_reservation()
        updated = cancel_reservation(reservation_id, 'demo-user')

        assert updated['status'] == 'cancelled'
        assert updated['cancelled_at']
        assert get_reservation_by_id(reservation_id) is not None

    def test_cancel_twice_is_refused(self, app, make_reservation):
        reservation_id = make_reservation(status='Cancelled')
        with pytest.raises(InvalidStateTransitionError):
            cancel_reservation(reservation_id, 'demo-user')

    def test_cancel_other_users_reservation(self, app, make_reservation):
        reservation_id = make_reservation(user_id='someone-else')
        with pytest.raises(ReservationAccessError):
            cancel_reservation(reservation_id, 'demo-user')

    def test_cancel_missing(self, app):
        with pytest.raises(ReservationNotFoundError):
            cancel_reservation('missing', 'demo-user')


class TestDelete:
    """Tests for delete_reservation."""

    def test_delete_requires_cancellation(self, app, make_reservation):
        reservation_id = make_reservation()
        with pytest.raises(InvalidStateTransitionError):
            delete_reservation(reservation_id, 'demo-user')

    def test_delete_after_cancel(self, app, make_reservation):
        from models.reservation import get_reservation_by_id

        reservation_id = make_reservation()
        cancel_reservation(reservation_id, 'demo-user')

        assert delete_reservation(reservation_id, 'demo-user') is True
        assert get_reservation_by_id(reservation_id) is None


class TestPayment:
    """Tests for mark_reservation_payment."""

    def test_paid_confirms(self, app, make_reservation):
        reservation_id = make_reservation()
        assert mark_reservation_payment(reservation_id, True)['status'] == 'confirmed'
        assert mark_reservation_payment(reservation_id, False)['status'] == 'pending'

    def test_cancelled_is_refused(self, app, make_reservation):
        reservation_id = make_reservation(status='cancelled')
        with pytest.raises(InvalidStateTransitionError):
            mark_reservation_payment(reservation_id, True)
