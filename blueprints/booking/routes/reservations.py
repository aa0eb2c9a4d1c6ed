"""
Reservation API routes: the signed-in user's list, schedule calendar,
details, receipt, calendar export and lifecycle actions.
"""

from flask import current_app, request
from flask_login import login_required, current_user

from models.availability import clamp_month_offset
from models.reservation import get_reservation_by_id, get_user_reservations
from models.reservation_queries import (
    build_calendar_event,
    get_reservation_dates,
    get_reservations_on,
    get_schedule_month,
    receipt_view,
    reservation_card,
    reservation_details,
)
from models.reservation_state import (
    ReservationAccessError,
    ReservationError,
    ReservationNotFoundError,
    cancel_reservation,
    delete_reservation,
    mark_reservation_payment,
)
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES
from utils.validators import parse_date_param, parse_int_param


def register_routes(bp):
    """Register reservation API routes on the blueprint."""

    # ============================================================================
    # LIST + SCHEDULE
    # ============================================================================

    @bp.route('/reservations')
    @login_required
    def reservation_list():
        """
        The user's reservations, newest first.

        Query params:
            date: Optional YYYY-MM-DD filter
        """
        records = get_user_reservations(current_user.uid, current_app.config['USER_RESERVATION_LIMIT'])

        date_param = request.args.get('date')
        if date_param:
            day = parse_date_param(date_param)
            if day is None:
                return api_error(MESSAGES['invalid_date'], status=400)
            records = get_reservations_on(records, day.isoformat())

        return api_success(data={
            'reservations': [reservation_card(r) for r in records],
            'marked_dates': sorted(get_reservation_dates(records)),
        })

    @bp.route('/reservations/schedule')
    @login_required
    def reservation_schedule():
        """
        Schedule calendar with reservation markers.

        Query params:
            month_offset: Months from the current month (+/- SCHEDULE_MONTH_RANGE)
            date: Optional selected YYYY-MM-DD; its reservations are included
        """
        offset = parse_int_param(request.args.get('month_offset'))
        if offset is None:
            return api_error(MESSAGES['invalid_request'], status=400)

        month_range = current_app.config['SCHEDULE_MONTH_RANGE']
        offset = clamp_month_offset(offset, -month_range, month_range)
        records = get_user_reservations(current_user.uid, current_app.config['USER_RESERVATION_LIMIT'])
        schedule = get_schedule_month(records, offset)

        date_param = request.args.get('date')
        if date_param:
            day = parse_date_param(date_param)
            if day is None:
                return api_error(MESSAGES['invalid_date'], status=400)
            schedule['selected_date'] = day.isoformat()
            schedule['reservations'] = [
                reservation_card(r) for r in get_reservations_on(records, day.isoformat())
            ]

        return api_success(data=schedule)

    # ============================================================================
    # VIEWS
    # ============================================================================

    @bp.route('/reservations/<reservation_id>')
    @login_required
    def reservation_detail(reservation_id):
        """Human-readable details of one reservation."""
        record, error = _get_owned(reservation_id)
        if error:
            return error
        return api_success(data={**reservation_card(record), 'details': reservation_details(record)})

    @bp.route('/reservations/<reservation_id>/receipt')
    @login_required
    def reservation_receipt(reservation_id):
        """Receipt of a submitted reservation (read from the store by id)."""
        record, error = _get_owned(reservation_id)
        if error:
            return error
        return api_success(data=receipt_view(record))

    @bp.route('/reservations/<reservation_id>/calendar-event')
    @login_required
    def reservation_calendar_event(reservation_id):
        """Device calendar event for a reservation."""
        record, error = _get_owned(reservation_id)
        if error:
            return error

        event = build_calendar_event(record)
        if event is None:
            return api_error(MESSAGES['invalid_date'], status=422)
        return api_success(data=event)

    # ============================================================================
    # LIFECYCLE
    # ============================================================================

    @bp.route('/reservations/<reservation_id>/cancel', methods=['POST'])
    @login_required
    def reservation_cancel(reservation_id):
        """Cancel a reservation (the record is kept)."""
        try:
            record = cancel_reservation(reservation_id, current_user.uid)
        except ReservationError as e:
            return _lifecycle_error(e)
        return api_success(data=reservation_card(record), message=MESSAGES['reservation_cancelled'])

    @bp.route('/reservations/<reservation_id>', methods=['DELETE'])
    @login_required
    def reservation_delete(reservation_id):
        """Permanently delete a cancelled reservation."""
        try:
            delete_reservation(reservation_id, current_user.uid)
        except ReservationError as e:
            return _lifecycle_error(e)
        return api_success(message=MESSAGES['reservation_deleted'])

    @bp.route('/reservations/<reservation_id>/payment', methods=['POST'])
    @login_required
    def reservation_payment(reservation_id):
        """
        Record the outcome of the payment flow.

        Body: {paid: bool}
        """
        data = request.get_json(silent=True) or {}
        if not isinstance(data.get('paid'), bool):
            return api_error(MESSAGES['invalid_request'], status=400)

        record, error = _get_owned(reservation_id)
        if error:
            return error

        try:
            record = mark_reservation_payment(record['id'], data['paid'])
        except ReservationError as e:
            return _lifecycle_error(e)
        return api_success(data=reservation_card(record), message=MESSAGES['payment_recorded'])


def _get_owned(reservation_id):
    """Fetch a reservation of the current user: (record, None) or (None, error response)."""
    record = get_reservation_by_id(reservation_id)
    if not record:
        return None, api_error(MESSAGES['reservation_not_found'], status=404)
    if record.get('user_id') != current_user.uid:
        return None, api_error(MESSAGES['reservation_forbidden'], status=403)
    return record, None


def _lifecycle_error(error):
    """Translate a lifecycle exception into an API error."""
    if isinstance(error, ReservationNotFoundError):
        return api_error(MESSAGES['reservation_not_found'], status=404)
    if isinstance(error, ReservationAccessError):
        return api_error(MESSAGES['reservation_forbidden'], status=403)
    return api_error(str(error), status=409)
