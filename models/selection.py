"""
Booking draft and its selection store.

The store owns exactly one ``ReservationDraft`` and exposes one setter per
field. Menu selections are kept per exclusivity group, so a group can never
hold more than one item.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time

from .catalog import (
    AddOn,
    PackageOption,
    get_add_on,
    get_exclusivity_group,
    get_food_item,
    get_package_options,
    get_time_slot,
    validate_occasion,
)
from utils.datetime_helpers import format_date_key

SELECTION_MODES = ('single', 'multi')


@dataclass(frozen=True)
class FoodChoice:
    category_id: int
    name: str


@dataclass
class Venue:
    mobile: str = ''
    address: str = ''


@dataclass
class ReservationDraft:
    """In-progress booking selection."""

    date: date | None = None
    time_label: str | None = None
    occasions: list = field(default_factory=list)
    food_choices: dict = field(default_factory=dict)  # group -> FoodChoice
    pack: PackageOption | None = None
    add_ons: dict = field(default_factory=dict)  # name -> AddOn
    venue: Venue = field(default_factory=Venue)

    @property
    def foods(self) -> list:
        return [choice.name for choice in self.food_choices.values()]

    @property
    def event_datetime(self) -> datetime | None:
        """Selected date with the selected slot's time merged in."""
        if self.date is None:
            return None
        if self.time_label is None:
            return datetime.combine(self.date, time())
        slot = get_time_slot(self.time_label)
        return datetime.combine(self.date, time(slot.hour, slot.minute))

    def to_dict(self) -> dict:
        return {
            'date': format_date_key(self.date) if self.date else None,
            'time_label': self.time_label,
            'occasions': list(self.occasions),
            'foods': self.foods,
            'food_choices': [
                {'group': group, 'category_id': c.category_id, 'name': c.name}
                for group, c in self.food_choices.items()
            ],
            'pack': {'name': self.pack.name, 'price': self.pack.price} if self.pack else None,
            'add_ons': [{'name': a.name, 'price': a.price} for a in self.add_ons.values()],
            'venue': {'mobile': self.venue.mobile, 'address': self.venue.address},
        }


class SelectionStore:
    """
    Single owner of a booking draft.

    Args:
        occasion_mode: 'single' (default) or 'multi' occasion selection
        mobile_min_length: Minimum venue mobile length for a submittable draft
        address_min_length: Minimum venue address length for a submittable draft
        price_table: Optional price table override (defaults to the catalog's)
    """

    def __init__(self, occasion_mode: str = 'single', mobile_min_length: int = 8,
                 address_min_length: int = 5, price_table: list = None):
        if occasion_mode not in SELECTION_MODES:
            raise ValueError(f'Unknown occasion selection mode: {occasion_mode}')
        self.occasion_mode = occasion_mode
        self.mobile_min_length = mobile_min_length
        self.address_min_length = address_min_length
        self.price_table = price_table
        self.draft = ReservationDraft()

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_date(self, value: date | None) -> None:
        if isinstance(value, datetime):
            value = value.date()
        self.draft.date = value

    def set_time(self, label: str | None) -> None:
        if label is not None:
            get_time_slot(label)
        self.draft.time_label = label

    def select_occasion(self, occasion: str) -> None:
        """
        Select or deselect an occasion.

        Package prices are occasion-indexed, so any change clears the package.
        """
        validate_occasion(occasion)
        current = self.draft.occasions

        if self.occasion_mode == 'single':
            self.draft.occasions = [] if current == [occasion] else [occasion]
        elif occasion in current:
            self.draft.occasions = [o for o in current if o != occasion]
        else:
            self.draft.occasions = current + [occasion]

        self.draft.pack = None

    def select_food(self, category_id: int, name: str) -> None:
        """
        Toggle a menu item, evicting any other selection in its exclusivity group.
        """
        item = get_food_item(category_id, name)
        group = get_exclusivity_group(item.category_id)
        candidate = FoodChoice(item.category_id, item.name)

        previous = self.draft.food_choices.pop(group, None)
        if previous != candidate:
            self.draft.food_choices[group] = candidate

    def select_package(self, name: str | None) -> None:
        """
        Select a package tier offered for the current occasion.

        Selecting the already selected tier (or None) clears the selection.
        """
        if name is None or (self.draft.pack and self.draft.pack.name == name):
            self.draft.pack = None
            return

        for option in self.package_options:
            if option.name == name:
                self.draft.pack = option
                return
        raise ValueError(f'Package {name!r} is not offered for the selected occasion')

    def toggle_add_on(self, name: str) -> None:
        add_on = get_add_on(name)
        if add_on.name in self.draft.add_ons:
            del self.draft.add_ons[add_on.name]
        else:
            self.draft.add_ons[add_on.name] = AddOn(add_on.name, add_on.price)

    def set_venue(self, mobile: str = None, address: str = None) -> None:
        if mobile is not None:
            self.draft.venue.mobile = mobile
        if address is not None:
            self.draft.venue.address = address

    def reset(self) -> None:
        """Return the draft to its empty initial value."""
        self.draft = ReservationDraft()

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    @property
    def package_options(self) -> list:
        """Package tiers for the first selected occasion (empty when none match)."""
        if not self.draft.occasions:
            return []
        return get_package_options(self.draft.occasions[0], self.price_table)

    @property
    def is_submittable(self) -> bool:
        draft = self.draft
        return (
            draft.date is not None
            and len(draft.occasions) > 0
            and draft.pack is not None
            and len(draft.venue.mobile.strip()) >= self.mobile_min_length
            and len(draft.venue.address.strip()) >= self.address_min_length
        )

    def is_food_selected(self, category_id: int, name: str) -> bool:
        group = get_exclusivity_group(category_id)
        return self.draft.food_choices.get(group) == FoodChoice(int(category_id), name)
