"""
Booking sessions.

A BookingSession bundles everything one user's booking screen holds: the
selection store, the submission workflow with its exit guard, and the month
shown by the calendar. Sessions live in a BookingSessionStore keyed by user,
with TTL expiry and LRU eviction.
"""

import logging
import threading
import time
from collections import OrderedDict
from datetime import date

from utils.datetime_helpers import add_months, format_date_key, get_today
from .availability import clamp_month_offset, first_enabled_day
from .booking import DEFAULT_HOOKS, BookingWorkflow
from .catalog import get_inclusions
from .navigation import ResponseNavigator
from .pricing import DEFAULT_DOWNPAYMENT_RATIO
from .reservation import add_reservation
from .selection import SelectionStore

logger = logging.getLogger(__name__)


class DateUnavailableError(ValueError):
    """Raised when selecting a booked, past or out-of-range date."""


class BookingSession:
    """
    One user's in-progress booking.

    Args:
        user_id: Session key (uid of the signed-in user)
        availability: Shared AvailabilityIndex
        occasion_mode: Occasion selection mode for the store
        downpayment_ratio: Down payment ratio used in pricing
        max_month_offset: Furthest month the calendar can show
        double_press_window: Double back-press window in seconds
        mobile_min_length / address_min_length: Venue validity thresholds
        price_table: Optional price table override
        persist: Reservation persistence callable
        hooks: Post-commit hooks
        clock: Monotonic clock for the exit guard
    """

    def __init__(self, user_id: str, availability, occasion_mode: str = 'single',
                 downpayment_ratio: float = DEFAULT_DOWNPAYMENT_RATIO,
                 max_month_offset: int = 12, double_press_window: float = 1.5,
                 mobile_min_length: int = 8, address_min_length: int = 5,
                 price_table: list = None, persist=add_reservation,
                 hooks=DEFAULT_HOOKS, clock=time.monotonic):
        self.user_id = user_id
        self.availability = availability
        self.max_month_offset = max_month_offset
        self.month_offset = 0

        self.store = SelectionStore(
            occasion_mode=occasion_mode,
            mobile_min_length=mobile_min_length,
            address_min_length=address_min_length,
            price_table=price_table,
        )
        self.navigator = ResponseNavigator()
        self.workflow = BookingWorkflow(
            self.store, self.navigator,
            persist=persist,
            hooks=hooks,
            downpayment_ratio=downpayment_ratio,
            clock=clock,
            double_press_window=double_press_window,
        )

    @property
    def exit_guard(self):
        return self.workflow.exit_guard

    # -------------------------------------------------------------------------
    # Calendar
    # -------------------------------------------------------------------------

    def month_dates(self, today: date = None) -> list:
        return self.availability.month_dates(self.month_offset, today)

    def select_date(self, day: date, today: date = None) -> None:
        """
        Select an event date, showing its month.

        Raises:
            DateUnavailableError: Date is booked, in the past or beyond the
                furthest bookable month
        """
        today = today or get_today()
        offset = (day.year - today.year) * 12 + (day.month - today.month)
        if offset < 0 or offset > self.max_month_offset:
            raise DateUnavailableError(f'{format_date_key(day)} is outside the booking window')
        if not self.availability.is_available(day, today):
            raise DateUnavailableError(f'{format_date_key(day)} is not available')

        self.month_offset = offset
        self.store.set_date(day)

    def change_month(self, offset: int, today: date = None) -> int:
        """
        Show another month.

        When the selected date is not in the shown month, the selection moves
        to its first enabled day (or its first day when every day is disabled).

        Returns:
            The clamped month offset
        """
        self.month_offset = clamp_month_offset(offset, 0, self.max_month_offset)
        days = self.month_dates(today)

        selected = self.store.draft.date
        in_month = selected is not None and (selected.year, selected.month) == (
            days[0].date.year, days[0].date.month)
        if not in_month:
            target = first_enabled_day(days) or days[0]
            self.store.set_date(target.date)
        return self.month_offset

    def on_booked_changed(self, booked, today: date = None) -> None:
        """Move the selection off a date that just became unavailable."""
        selected = self.store.draft.date
        if selected is None:
            return

        today = today or get_today()
        if format_date_key(selected) not in booked and selected >= today:
            return

        target = first_enabled_day(self.month_dates(today))
        if target is not None:
            logger.debug(f"[Booking] {self.user_id}: {format_date_key(selected)} became "
                         f"unavailable, moved to {target.date_string}")
            self.store.set_date(target.date)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def refresh(self) -> None:
        """Reset the booking screen to its defaults."""
        self.month_offset = 0
        self.store.reset()
        self.workflow.restart()
        self.navigator.drain()

    def to_dict(self, today: date = None) -> dict:
        today = today or get_today()
        options = self.store.package_options
        shown = add_months(today, self.month_offset)
        return {
            'draft': self.store.draft.to_dict(),
            'pricing': self.workflow.pricing.to_dict(),
            'package_options': [{'name': o.name, 'price': o.price, 'amount': o.amount}
                                for o in options],
            'packages_empty': bool(self.store.draft.occasions) and not options,
            'inclusions': get_inclusions(self.store.price_table),
            'is_submittable': self.store.is_submittable,
            'workflow': self.workflow.to_dict(),
            'exit_guard': self.exit_guard.to_dict(),
            'calendar': {
                'month_offset': self.month_offset,
                'max_month_offset': self.max_month_offset,
                'month_label': shown.strftime('%B %Y'),
                'days': [day.to_dict() for day in self.month_dates(today)],
            },
        }


class BookingSessionStore:
    """
    In-memory booking sessions with TTL and LRU eviction.

    Args:
        factory: Callable(user_id) -> BookingSession
        maxsize: Maximum number of live sessions
        ttl: Seconds of inactivity before a session expires
        clock: Clock used for expiry
    """

    def __init__(self, factory, maxsize: int = 256, ttl: int = 60 * 60, clock=time.monotonic):
        self.factory = factory
        self.maxsize = maxsize
        self.ttl = ttl
        self.clock = clock
        self._data = OrderedDict()
        self._lock = threading.RLock()

    def _evict_expired(self) -> None:
        now = self.clock()
        expired = [uid for uid, (_, ts) in self._data.items() if now - ts > self.ttl]
        for uid in expired:
            self._data.pop(uid, None)

    def get(self, user_id: str) -> BookingSession | None:
        """Return the session for ``user_id`` if it exists and is fresh."""
        with self._lock:
            self._evict_expired()
            item = self._data.get(user_id)
            if not item:
                return None
            session, _ = item
            self._data.move_to_end(user_id)
            self._data[user_id] = (session, self.clock())
            return session

    def get_or_create(self, user_id: str) -> BookingSession:
        with self._lock:
            session = self.get(user_id)
            if session is None:
                session = self.factory(user_id)
                self._data[user_id] = (session, self.clock())
                if len(self._data) > self.maxsize:
                    self._data.popitem(last=False)
            return session

    def evict(self, user_id: str) -> None:
        with self._lock:
            self._data.pop(user_id, None)

    def rekey(self, old_id: str, new_id: str) -> BookingSession | None:
        """Hand an anonymous draft over to the user who just signed in."""
        with self._lock:
            item = self._data.pop(old_id, None)
            if item is None:
                return None
            session, _ = item
            session.user_id = new_id
            self._data[new_id] = (session, self.clock())
            return session

    def sessions(self) -> list:
        with self._lock:
            return [session for session, _ in self._data.values()]

    def notify_booked(self, booked) -> None:
        """Availability listener: let every open session react to the new booked set."""
        for session in self.sessions():
            session.on_booked_changed(booked)

    def __len__(self):
        return len(self._data)
