"""
Tests for booking sessions: calendar selection, auto-advance and the session store.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from models.availability import AvailabilityIndex
from models.booking_session import BookingSession, BookingSessionStore, DateUnavailableError
from models.catalog import DEFAULT_PRICE_TABLE
from models.reservation_feed import ReservationFeed

TODAY = date(2025, 11, 20)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def feed():
    return ReservationFeed()


@pytest.fixture
def availability(feed):
    index = AvailabilityIndex()
    index.attach(feed)
    return index


@pytest.fixture
def session(availability):
    return BookingSession('demo-user', availability, price_table=DEFAULT_PRICE_TABLE, hooks=())


class TestDateSelection:
    """Tests for selecting dates."""

    def test_select_available_date(self, session):
        session.select_date(date(2025, 12, 2), TODAY)
        assert session.store.draft.date == date(2025, 12, 2)
        assert session.month_offset == 1

    def test_booked_date_is_refused(self, session, feed):
        feed.publish([{'id': 'a', 'date': '2025-12-01', 'status': 'pending'}])
        with pytest.raises(DateUnavailableError):
            session.select_date(date(2025, 12, 1), TODAY)

    def test_past_date_is_refused(self, session):
        with pytest.raises(DateUnavailableError):
            session.select_date(date(2025, 11, 19), TODAY)

    def test_date_beyond_window_is_refused(self, session):
        with pytest.raises(DateUnavailableError):
            session.select_date(date(2026, 12, 1), TODAY)


class TestMonthNavigation:
    """Tests for change_month."""

    def test_moves_selection_into_shown_month(self, session, feed):
        feed.publish([{'id': 'a', 'date': '2025-12-01'}])
        session.change_month(1, TODAY)

        assert session.month_offset == 1
        assert session.store.draft.date == date(2025, 12, 2)

    def test_keeps_selection_inside_shown_month(self, session):
        session.select_date(date(2025, 12, 20), TODAY)
        session.change_month(1, TODAY)
        assert session.store.draft.date == date(2025, 12, 20)

    def test_offset_is_clamped(self, session):
        assert session.change_month(-3, TODAY) == 0
        assert session.change_month(40, TODAY) == 12


class TestAutoAdvance:
    """Tests for moving off a date that becomes booked."""

    def test_selected_date_gets_booked(self, session, feed, availability):
        session.select_date(date(2025, 12, 1), TODAY)
        availability.add_listener(lambda booked: session.on_booked_changed(booked, TODAY))

        feed.publish([{'id': 'a', 'date': '2025-12-01', 'status': 'pending'}])
        assert session.store.draft.date == date(2025, 12, 2)

    def test_unrelated_booking_keeps_selection(self, session, feed, availability):
        session.select_date(date(2025, 12, 10), TODAY)
        availability.add_listener(lambda booked: session.on_booked_changed(booked, TODAY))

        feed.publish([{'id': 'a', 'date': '2025-12-01'}])
        assert session.store.draft.date == date(2025, 12, 10)

    def test_no_enabled_day_leaves_selection(self, session, availability):
        session.select_date(date(2025, 11, 29), TODAY)
        booked = {f'2025-11-{day}' for day in range(20, 31)}
        availability.rebuild([{'id': key, 'date': key} for key in booked])

        session.on_booked_changed(booked, TODAY)
        assert session.store.draft.date == date(2025, 11, 29)


class TestRefresh:
    def test_refresh_resets_everything(self, session):
        session.select_date(date(2025, 12, 2), TODAY)
        session.store.select_occasion('Wedding')
        session.exit_guard.request_exit()

        session.refresh()

        assert session.month_offset == 0
        assert session.store.draft.date is None
        assert session.store.draft.occasions == []
        assert not session.exit_guard.prompt_open


class TestSessionStore:
    """Tests for TTL and LRU eviction."""

    def make_store(self, clock, maxsize=2, ttl=60):
        return BookingSessionStore(lambda uid: object(), maxsize=maxsize, ttl=ttl, clock=clock)

    def test_get_or_create_reuses(self):
        store = self.make_store(FakeClock())
        assert store.get_or_create('a') is store.get_or_create('a')

    def test_ttl_expiry(self):
        clock = FakeClock()
        store = self.make_store(clock)
        first = store.get_or_create('a')

        clock.now = 61
        assert store.get('a') is None
        assert store.get_or_create('a') is not first

    def test_lru_eviction(self):
        store = self.make_store(FakeClock())
        store.get_or_create('a')
        store.get_or_create('b')
        store.get('a')
        store.get_or_create('c')

        assert store.get('b') is None
        assert store.get('a') is not None
        assert len(store) == 2

    def test_rekey(self):
        """An anonymous draft follows the user who signs in."""
        store = BookingSessionStore(lambda uid: SimpleNamespace(user_id=uid), clock=FakeClock())
        anonymous = store.get_or_create('anon:1')

        moved = store.rekey('anon:1', 'demo-user')
        assert moved is anonymous
        assert moved.user_id == 'demo-user'
        assert store.get('anon:1') is None
        assert store.get('demo-user') is anonymous

    def test_rekey_missing(self):
        store = self.make_store(FakeClock())
        assert store.rekey('anon:2', 'demo-user') is None
