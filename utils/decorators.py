"""
Route decorators for the booking API.
"""

from functools import wraps
from uuid import uuid4

from flask import session as http_session
from flask_login import login_required, current_user

ANONYMOUS_KEY = 'booking_key'


def get_booking_key() -> str:
    """
    Key of the caller's booking session.

    Signed-in users are keyed by uid; anonymous visitors by a random key kept
    in their Flask session, so they can draft before signing in.
    """
    if current_user.is_authenticated:
        return current_user.uid
    if ANONYMOUS_KEY not in http_session:
        http_session[ANONYMOUS_KEY] = f'anon:{uuid4().hex}'
    return http_session[ANONYMOUS_KEY]


def booking_session_required(func):
    """
    Decorator that passes the caller's booking session to the view.

    Usage:
        @bp.route('/booking/draft')
        @booking_session_required
        def get_draft(session):
            ...
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        from extensions import booking_runtime

        state = booking_runtime.state
        # Feed notifications also mutate sessions, so views run under the runtime lock
        with state.lock:
            session = state.sessions.get_or_create(get_booking_key())
            return func(session, *args, **kwargs)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'booking_session_required', 'get_booking_key']
