"""
Booking session API routes.

Every route acts on the caller's booking session and answers with the full
session state plus the navigation the client should perform.
"""

import logging

from flask import request
from flask_login import current_user

from extensions import booking_runtime
from models.booking import (
    PAYMENT_METHODS,
    RESULT_FAILED,
    RESULT_IN_FLIGHT,
    RESULT_SIGN_IN_REQUIRED,
    RESULT_SUBMITTED,
)
from models.booking_session import DateUnavailableError
from models.exit_guard import DOUBLE_BACK_TOAST, MODAL_SUMMARY, OUTCOME_TOAST
from models.navigation import SIGN_IN
from utils.api_response import api_session
from utils.decorators import booking_session_required
from utils.messages import MESSAGES
from utils.validators import parse_date_param, parse_int_param, sanitize_input

logger = logging.getLogger(__name__)

VENUE_MAX_LENGTH = 200


def register_routes(bp):
    """Register booking session API routes on the blueprint."""

    # ============================================================================
    # STATE
    # ============================================================================

    @bp.route('/booking')
    @booking_session_required
    def booking_state(session):
        """Current draft, pricing, calendar and workflow state."""
        return api_session(session)

    @bp.route('/booking/refresh', methods=['POST'])
    @booking_session_required
    def booking_refresh(session):
        """Reset the booking screen to its defaults."""
        session.refresh()
        return api_session(session)

    # ============================================================================
    # SELECTIONS
    # ============================================================================

    @bp.route('/booking/date', methods=['POST'])
    @booking_session_required
    def booking_date(session):
        """Select the event date. Body: {date: 'YYYY-MM-DD'}"""
        data = request.get_json(silent=True) or {}
        if not data.get('date'):
            return api_session(session, error=MESSAGES['date_required'])

        day = parse_date_param(data.get('date'))
        if day is None:
            return api_session(session, error=MESSAGES['invalid_date'])

        try:
            session.select_date(day)
        except DateUnavailableError:
            return api_session(session, error=MESSAGES['date_unavailable'], status=409)
        return api_session(session)

    @bp.route('/booking/month', methods=['POST'])
    @booking_session_required
    def booking_month(session):
        """Show another calendar month. Body: {month_offset: int}"""
        data = request.get_json(silent=True) or {}
        offset = parse_int_param(data.get('month_offset'))
        if offset is None:
            return api_session(session, error=MESSAGES['invalid_request'])

        session.change_month(offset)
        return api_session(session)

    @bp.route('/booking/time', methods=['POST'])
    @booking_session_required
    def booking_time(session):
        """Select a time slot. Body: {time_label: '4:00 PM' | null}"""
        data = request.get_json(silent=True) or {}
        return _apply(session, session.store.set_time, data.get('time_label'))

    @bp.route('/booking/occasion', methods=['POST'])
    @booking_session_required
    def booking_occasion(session):
        """Select or deselect an occasion. Body: {occasion: str}"""
        data = request.get_json(silent=True) or {}
        return _apply(session, session.store.select_occasion, data.get('occasion'))

    @bp.route('/booking/food', methods=['POST'])
    @booking_session_required
    def booking_food(session):
        """Toggle a menu item. Body: {category_id: int, name: str}"""
        data = request.get_json(silent=True) or {}
        category_id = parse_int_param(data.get('category_id'), default=None)
        if category_id is None:
            return api_session(session, error=MESSAGES['invalid_request'])
        return _apply(session, session.store.select_food, category_id, data.get('name'))

    @bp.route('/booking/package', methods=['POST'])
    @booking_session_required
    def booking_package(session):
        """Select a package tier. Body: {name: str | null}"""
        data = request.get_json(silent=True) or {}
        return _apply(session, session.store.select_package, data.get('name'))

    @bp.route('/booking/add-on', methods=['POST'])
    @booking_session_required
    def booking_add_on(session):
        """Toggle an add-on. Body: {name: str}"""
        data = request.get_json(silent=True) or {}
        return _apply(session, session.store.toggle_add_on, data.get('name'))

    @bp.route('/booking/venue', methods=['POST'])
    @booking_session_required
    def booking_venue(session):
        """Update venue contact info. Body: {mobile?: str, address?: str}"""
        data = request.get_json(silent=True) or {}
        mobile = data.get('mobile')
        address = data.get('address')
        session.store.set_venue(
            mobile=sanitize_input(mobile, VENUE_MAX_LENGTH) if mobile is not None else None,
            address=sanitize_input(address, VENUE_MAX_LENGTH) if address is not None else None,
        )
        return api_session(session)

    # ============================================================================
    # REVIEW + SUBMIT
    # ============================================================================

    @bp.route('/booking/review', methods=['POST'])
    @booking_session_required
    def booking_review(session):
        """Open the summary. Refused until the draft is complete."""
        if not session.workflow.open_review():
            return api_session(session, error=MESSAGES['review_refused'], status=409)
        return api_session(session)

    @bp.route('/booking/review/close', methods=['POST'])
    @booking_session_required
    def booking_review_close(session):
        session.workflow.close_review()
        return api_session(session)

    @bp.route('/booking/confirm', methods=['POST'])
    @booking_session_required
    def booking_confirm(session):
        """
        Submit the reviewed draft.

        Body: {payment_method: 'advance' | 'counter'}
        """
        data = request.get_json(silent=True) or {}
        payment_method = data.get('payment_method')
        if payment_method not in PAYMENT_METHODS:
            return api_session(session, error=MESSAGES['invalid_payment_method'])

        result = session.workflow.submit(payment_method, current_user)

        if result.status == RESULT_SUBMITTED:
            response = api_session(
                session,
                message=MESSAGES['reservation_submitted'],
                status=201,
                reservation_id=result.reservation_id,
                destination=result.destination,
            )
            booking_runtime.state.sessions.evict(session.user_id)
            return response

        if result.status == RESULT_SIGN_IN_REQUIRED:
            return api_session(session, error=MESSAGES['sign_in_required'], status=401,
                               redirect=SIGN_IN)

        if result.status == RESULT_IN_FLIGHT:
            return api_session(session, error=MESSAGES['submit_in_flight'], status=409)

        if result.status == RESULT_FAILED:
            return api_session(session, error=result.error, status=500)

        return api_session(session, error=MESSAGES['submit_refused'], status=409)

    # ============================================================================
    # MODALS + GUARDED EXIT
    # ============================================================================

    @bp.route('/booking/modal', methods=['POST'])
    @booking_session_required
    def booking_modal(session):
        """
        Open or close a modal.

        Body: {name: 'cancel_confirmation' | 'package_inclusions' | 'summary', open: bool}
        """
        data = request.get_json(silent=True) or {}
        name = data.get('name')
        if data.get('open', True):
            if name == MODAL_SUMMARY:
                if not session.workflow.open_review():
                    return api_session(session, error=MESSAGES['review_refused'], status=409)
                return api_session(session)
            return _apply(session, session.exit_guard.open_modal, name)
        session.exit_guard.close_modal(name)
        return api_session(session)

    @bp.route('/booking/back', methods=['POST'])
    @booking_session_required
    def booking_back(session):
        """
        Handle a back action.

        Body: {source: 'hardware' | 'gesture' | 'programmatic'}
        """
        data = request.get_json(silent=True) or {}
        try:
            outcome = session.exit_guard.handle_back(data.get('source', 'gesture'))
        except ValueError as e:
            return api_session(session, error=str(e))

        toast = DOUBLE_BACK_TOAST if outcome == OUTCOME_TOAST else None
        return api_session(session, outcome=outcome, toast=toast)

    @bp.route('/booking/exit', methods=['POST'])
    @booking_session_required
    def booking_exit(session):
        """Ask to leave the booking flow (opens the confirmation prompt)."""
        session.exit_guard.request_exit()
        return api_session(session)

    @bp.route('/booking/exit/confirm', methods=['POST'])
    @booking_session_required
    def booking_exit_confirm(session):
        """Discard the draft and go home."""
        if not session.exit_guard.confirm_exit():
            return api_session(session)
        response = api_session(session)
        booking_runtime.state.sessions.evict(session.user_id)
        return response

    @bp.route('/booking/exit/dismiss', methods=['POST'])
    @booking_session_required
    def booking_exit_dismiss(session):
        session.exit_guard.dismiss_prompt()
        return api_session(session)


def _apply(session, setter, *args):
    """Run a store setter, answering 400 on invalid input."""
    try:
        setter(*args)
    except (ValueError, TypeError) as e:
        return api_session(session, error=str(e))
    return api_session(session)
