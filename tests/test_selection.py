"""
Tests for the selection store: exclusivity groups, occasions, packages,
add-ons, venue and the submittable predicate.
"""

from datetime import date, datetime
from typing import get_type_hints

import pytest

from models.catalog import DEFAULT_PRICE_TABLE
from models.selection import ReservationDraft, SelectionStore


@pytest.fixture
def store():
    return SelectionStore(price_table=DEFAULT_PRICE_TABLE)


def complete(store):
    """Fill in everything a submittable draft needs."""
    store.set_date(date(2025, 12, 1))
    store.select_occasion('Wedding')
    store.select_package('100 Pax')
    store.set_venue(mobile='09171234567', address='12 Mabini St')
    return store


class TestFoodSelection:
    """Tests for exclusivity-group menu selection."""

    def test_same_group_replaces(self, store):
        """Beef Steak then Pork Adobo leaves only Pork Adobo in the meat group."""
        store.select_food(1, 'Beef Steak')
        store.select_food(2, 'Pork Adobo')

        assert store.draft.foods == ['Pork Adobo']
        assert store.is_food_selected(2, 'Pork Adobo')
        assert not store.is_food_selected(1, 'Beef Steak')

    def test_reselecting_deselects(self, store):
        store.select_food(1, 'Beef Steak')
        store.select_food(1, 'Beef Steak')
        assert store.draft.foods == []

    def test_same_category_replaces(self, store):
        store.select_food(5, 'Spaghetti')
        store.select_food(7, 'Java Rice')
        store.select_food(5, 'Carbonara')
        assert store.draft.foods == ['Carbonara']

    def test_standalone_groups_coexist(self, store):
        store.select_food(1, 'Beef Steak')
        store.select_food(3, 'Buttered Chicken')
        store.select_food(9, 'Leche Flan')
        assert sorted(store.draft.foods) == ['Beef Steak', 'Buttered Chicken', 'Leche Flan']

    def test_at_most_one_per_group(self, store):
        for category_id, name in [(1, 'Beef Steak'), (2, 'Lechon Kawali'), (1, 'Beef Caldereta'),
                                  (2, 'Pork Menudo'), (5, 'Spaghetti'), (7, 'Steamed Rice')]:
            store.select_food(category_id, name)
        groups = list(store.draft.food_choices)
        assert len(groups) == len(set(groups))
        assert len(store.draft.foods) == 2

    def test_unknown_item(self, store):
        with pytest.raises(ValueError):
            store.select_food(1, 'Tofu')


class TestOccasionSelection:
    """Tests for occasion selection modes."""

    def test_single_mode_replaces_and_toggles(self, store):
        store.select_occasion('Wedding')
        store.select_occasion('Debut')
        assert store.draft.occasions == ['Debut']

        store.select_occasion('Debut')
        assert store.draft.occasions == []

    def test_multi_mode_toggles_membership(self):
        store = SelectionStore(occasion_mode='multi', price_table=DEFAULT_PRICE_TABLE)
        store.select_occasion('Wedding')
        store.select_occasion('Debut')
        assert store.draft.occasions == ['Wedding', 'Debut']

        store.select_occasion('Wedding')
        assert store.draft.occasions == ['Debut']

    def test_occasion_change_clears_package(self, store):
        store.select_occasion('Wedding')
        store.select_package('100 Pax')
        store.select_occasion('Debut')
        assert store.draft.pack is None

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            SelectionStore(occasion_mode='several')


class TestPackageSelection:
    """Tests for package selection."""

    def test_options_follow_first_occasion(self, store):
        assert store.package_options == []
        store.select_occasion('Wedding')
        assert '100 Pax' in [o.name for o in store.package_options]

    def test_select_and_toggle(self, store):
        store.select_occasion('Wedding')
        store.select_package('100 Pax')
        assert store.draft.pack.price == '₱35,000'

        store.select_package('100 Pax')
        assert store.draft.pack is None

    def test_package_must_be_offered(self, store):
        store.select_occasion('House Blessing')
        assert store.package_options == []
        with pytest.raises(ValueError):
            store.select_package('100 Pax')


class TestEmptyDraft:
    def test_field_types_resolve(self):
        """The draft's date field keeps its date type next to a None default."""
        hints = get_type_hints(ReservationDraft)
        assert hints['date'] == (date | None)
        assert ReservationDraft().date is None


class TestOtherSetters:
    """Tests for time, add-ons, venue and reset."""

    def test_time_merges_into_event_datetime(self, store):
        store.set_date(date(2025, 12, 1))
        store.set_time('4:00 PM')
        assert store.draft.event_datetime == datetime(2025, 12, 1, 16, 0)

    def test_unknown_time(self, store):
        with pytest.raises(ValueError):
            store.set_time('25:00 PM')

    def test_toggle_add_on(self, store):
        store.toggle_add_on('Smoke Machine')
        store.toggle_add_on('Personalized Cake')
        store.toggle_add_on('Smoke Machine')
        assert list(store.draft.add_ons) == ['Personalized Cake']

    def test_venue_partial_update(self, store):
        store.set_venue(mobile='0917')
        store.set_venue(address='Cebu City')
        assert (store.draft.venue.mobile, store.draft.venue.address) == ('0917', 'Cebu City')

    def test_reset_is_idempotent(self, store):
        complete(store)
        store.toggle_add_on('Smoke Machine')
        store.reset()
        once = store.draft.to_dict()
        store.reset()
        assert store.draft.to_dict() == once == ReservationDraft().to_dict()


class TestSubmittable:
    """Tests for the submittable predicate."""

    def test_complete_draft(self, store):
        assert complete(store).is_submittable

    @pytest.mark.parametrize('breaker', [
        lambda s: s.set_date(None),
        lambda s: s.select_occasion('Wedding'),  # deselects it
        lambda s: s.select_package(None),
        lambda s: s.set_venue(mobile='   0917   '),
        lambda s: s.set_venue(address='Cebu'),
        lambda s: s.set_venue(address='  abc     '),
    ])
    def test_incomplete_draft(self, store, breaker):
        complete(store)
        breaker(store)
        assert not store.is_submittable

    def test_length_boundaries(self, store):
        """Mobile needs 8 and address 5 characters after trimming."""
        complete(store)
        store.set_venue(mobile=' 12345678 ', address=' Cebu1 ')
        assert store.is_submittable
