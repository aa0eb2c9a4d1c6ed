"""
Flask extensions initialization.
Extensions are initialized here and then initialized with the app in app.py.
"""

import threading

from flask import current_app, jsonify
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

# Initialize Flask-Login
login_manager = LoginManager()

# Initialize CSRF Protection
csrf = CSRFProtect()

# Configure Login Manager
login_manager.login_view = 'auth.login'
login_manager.login_message = 'Please sign in to continue'
login_manager.login_message_category = 'warning'


@login_manager.user_loader
def load_user(user_id):
    """
    Load user by uid for Flask-Login.

    Args:
        user_id: The user's uid

    Returns:
        User object or None if not found
    """
    from models.user import get_user_by_uid, User

    user_dict = get_user_by_uid(user_id)
    if user_dict and user_dict.get('active', 1):
        return User(user_dict)
    return None


@login_manager.unauthorized_handler
def unauthorized():
    """Anonymous API calls get a JSON 401 pointing at the sign-in screen."""
    from models.navigation import SIGN_IN

    return jsonify({
        'success': False,
        'error': login_manager.login_message,
        'redirect': SIGN_IN,
    }), 401


class BookingRuntimeState:
    """
    Process-local booking state of one app.

    Holds the reservation feed, the availability index subscribed to it and
    the per-user booking sessions, which follow the index.
    """

    def __init__(self, app):
        from models.availability import AvailabilityIndex
        from models.booking_session import BookingSession, BookingSessionStore
        from models.reservation_feed import ReservationFeed

        settings = app.config
        # Guards feed publication and every session mutation across request threads
        self.lock = threading.RLock()
        self.feed = ReservationFeed()
        self.availability = AvailabilityIndex()
        self.availability.attach(self.feed)

        def create_session(user_id):
            return BookingSession(
                user_id,
                self.availability,
                occasion_mode=settings['OCCASION_SELECTION_MODE'],
                downpayment_ratio=settings['DOWNPAYMENT_RATIO'],
                max_month_offset=settings['BOOKING_MAX_MONTH_OFFSET'],
                double_press_window=settings['DOUBLE_BACK_WINDOW_SECONDS'],
                mobile_min_length=settings['VENUE_MOBILE_MIN_LENGTH'],
                address_min_length=settings['VENUE_ADDRESS_MIN_LENGTH'],
            )

        self.sessions = BookingSessionStore(
            create_session,
            maxsize=settings['DRAFT_SESSION_MAX'],
            ttl=settings['DRAFT_SESSION_TTL'],
        )
        self.availability.add_listener(self.sessions.notify_booked)

    def ensure_primed(self) -> None:
        """Load the collection into the feed once, before the first write."""
        with self.lock:
            if self.feed.snapshot is None:
                from models.reservation import get_all_reservations
                self.feed.publish(get_all_reservations())


class BookingRuntime:
    """Flask extension owning the booking runtime state."""

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        app.extensions['booking_runtime'] = BookingRuntimeState(app)

    @property
    def state(self) -> BookingRuntimeState:
        state = current_app.extensions['booking_runtime']
        state.ensure_primed()
        return state


# Initialize booking runtime
booking_runtime = BookingRuntime()
