"""
Static catering reference data.

Occasions, time slots, menu categories and items, add-ons and the
occasion-keyed package price table. The price table can be replaced with a
JSON file (``PRICE_TABLE_PATH``) using the same shape:
``[{"name": "Wedding", "prices": ["100 Pax = ₱35,000", ...]}, ...]``.
"""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache

from flask import current_app, has_app_context

from utils.helpers import parse_price

logger = logging.getLogger(__name__)


# =============================================================================
# TYPES
# =============================================================================

@dataclass(frozen=True)
class TimeSlot:
    label: str
    hour: int
    minute: int


@dataclass(frozen=True)
class FoodCategory:
    id: int
    name: str
    group: str


@dataclass(frozen=True)
class FoodItem:
    category_id: int
    name: str
    subtitle: str = ''


@dataclass(frozen=True)
class AddOn:
    name: str
    price: int


@dataclass(frozen=True)
class PackageOption:
    """A package tier parsed from a 'label = price' entry."""

    name: str
    price: str

    @property
    def amount(self) -> int:
        return parse_price(self.price)


# =============================================================================
# REFERENCE DATA
# =============================================================================

OCCASIONS = [
    'Kiddie Party',
    'Christening',
    'Adult Birthday',
    'Debut',
    'Wedding',
    'Corporate Gathering',
    'House Blessing',
]

TIME_SLOTS = [
    TimeSlot('10:00 AM', 10, 0),
    TimeSlot('11:00 AM', 11, 0),
    TimeSlot('1:00 PM', 13, 0),
    TimeSlot('4:00 PM', 16, 0),
    TimeSlot('6:00 PM', 18, 0),
    TimeSlot('7:00 PM', 19, 0),
]

# Categories sharing a group are mutually exclusive on the menu
FOOD_CATEGORIES = [
    FoodCategory(1, 'Beef', 'meat'),
    FoodCategory(2, 'Pork', 'meat'),
    FoodCategory(3, 'Chicken', 'chicken'),
    FoodCategory(4, 'Fish', 'fish'),
    FoodCategory(5, 'Pasta', 'starch'),
    FoodCategory(6, 'Veggies', 'veggies'),
    FoodCategory(7, 'Plain Rice', 'starch'),
    FoodCategory(8, 'Drinks', 'drinks'),
    FoodCategory(9, 'Dessert', 'dessert'),
]

FOOD_ITEMS = [
    FoodItem(1, 'Beef Steak', 'Tender beef in soy-calamansi sauce'),
    FoodItem(1, 'Beef Caldereta', 'Tomato-based stew with liver spread'),
    FoodItem(1, 'Beef with Broccoli'),
    FoodItem(2, 'Pork Adobo', 'Braised in vinegar, soy and garlic'),
    FoodItem(2, 'Lechon Kawali'),
    FoodItem(2, 'Pork Menudo'),
    FoodItem(3, 'Chicken Cordon Bleu'),
    FoodItem(3, 'Buttered Chicken'),
    FoodItem(3, 'Chicken Pastel'),
    FoodItem(4, 'Fish Fillet with Tartar Sauce'),
    FoodItem(4, 'Sweet and Sour Fish'),
    FoodItem(5, 'Spaghetti'),
    FoodItem(5, 'Carbonara'),
    FoodItem(5, 'Pancit Canton'),
    FoodItem(6, 'Chopsuey'),
    FoodItem(6, 'Buttered Mixed Vegetables'),
    FoodItem(7, 'Steamed Rice'),
    FoodItem(7, 'Java Rice'),
    FoodItem(8, 'Iced Tea'),
    FoodItem(8, 'Four Seasons Juice'),
    FoodItem(9, 'Buko Pandan'),
    FoodItem(9, 'Leche Flan'),
    FoodItem(9, 'Fruit Salad'),
]

ADD_ONS = [
    AddOn('Personalized Cake', 500),
    AddOn('Event Coordinator', 1000),
    AddOn('Projector with slideshow', 800),
    AddOn('Smoke Machine', 350),
    AddOn('Chocolate Fountain', 1500),
]

INCLUSIONS_ENTRY = 'Freebies'

DEFAULT_PRICE_TABLE = [
    {'name': 'Kiddie Party', 'prices': [
        '50 Pax = ₱18,000', '70 Pax = ₱23,000', '100 Pax = ₱28,000',
    ]},
    {'name': 'Christening', 'prices': [
        '30 Pax = ₱15,000', '50 Pax = ₱19,000', '70 Pax = ₱24,000', '100 Pax = ₱29,000',
    ]},
    {'name': 'Birthday', 'prices': [
        '30 Pax = ₱16,000', '50 Pax = ₱20,000', '70 Pax = ₱25,000', '100 Pax = ₱30,000',
    ]},
    {'name': 'Debut', 'prices': [
        '50 Pax = ₱24,000', '100 Pax = ₱33,000', '150 Pax = ₱45,000',
    ]},
    {'name': 'Wedding', 'prices': [
        '100 Pax = ₱35,000', '70 Pax = ₱30,000', '50 Pax = ₱25,000', '30 Pax = ₱20,000',
    ]},
    {'name': 'Corporate', 'prices': [
        '50 Pax = ₱22,000', '100 Pax = ₱38,000',
    ]},
    {'name': INCLUSIONS_ENTRY, 'prices': [
        'Tables and chairs with covers',
        'Buffet setup with skirting',
        'Uniformed waiters',
        'Backdrop and stage decoration',
        'Purified drinking water',
    ]},
]


# =============================================================================
# LOOKUPS
# =============================================================================

_CATEGORIES_BY_ID = {c.id: c for c in FOOD_CATEGORIES}
_TIME_SLOTS_BY_LABEL = {t.label: t for t in TIME_SLOTS}
_ADD_ONS_BY_NAME = {a.name: a for a in ADD_ONS}


def get_category(category_id: int) -> FoodCategory:
    """Return the category, raising ValueError when unknown."""
    try:
        return _CATEGORIES_BY_ID[int(category_id)]
    except (KeyError, TypeError, ValueError):
        raise ValueError(f'Unknown food category: {category_id}') from None


def get_food_item(category_id: int, name: str) -> FoodItem:
    """Return the menu item for (category, name), raising ValueError when unknown."""
    category = get_category(category_id)
    for item in FOOD_ITEMS:
        if item.category_id == category.id and item.name == name:
            return item
    raise ValueError(f'Unknown menu item {name!r} in category {category.name}')


def get_exclusivity_group(category_id: int) -> str:
    """Return the exclusivity group a category belongs to."""
    return get_category(category_id).group


def get_time_slot(label: str) -> TimeSlot:
    try:
        return _TIME_SLOTS_BY_LABEL[label]
    except KeyError:
        raise ValueError(f'Unknown time slot: {label}') from None


def get_add_on(name: str) -> AddOn:
    try:
        return _ADD_ONS_BY_NAME[name]
    except KeyError:
        raise ValueError(f'Unknown add-on: {name}') from None


def validate_occasion(name: str) -> str:
    if name not in OCCASIONS:
        raise ValueError(f'Unknown occasion: {name}')
    return name


# =============================================================================
# PRICE TABLE
# =============================================================================

def load_price_table(path: str) -> list:
    """Load a price table from a JSON file."""
    with open(path, encoding='utf-8') as handle:
        table = json.load(handle)
    if not isinstance(table, list):
        raise ValueError(f'Price table in {path} must be a list of entries')
    return table


@lru_cache(maxsize=None)
def _configured_price_table(path: str) -> list:
    table = load_price_table(path)
    logger.info(f"[Catalog] Loaded {len(table)} price table entries from {path}")
    return table


def get_price_table() -> list:
    """
    Get the active price table.

    Uses PRICE_TABLE_PATH when configured, otherwise the built-in table.
    A configured file is read once per path.
    """
    if has_app_context():
        path = current_app.config.get('PRICE_TABLE_PATH')
        if path:
            return _configured_price_table(path)
    return DEFAULT_PRICE_TABLE


def parse_package_entry(entry: str) -> PackageOption | None:
    """
    Parse a 'label = price' entry.

    Returns:
        PackageOption, or None when the entry has no '=' separator
    """
    if not isinstance(entry, str) or '=' not in entry:
        return None
    label, price = entry.split('=', 1)
    label, price = label.strip(), price.strip()
    if not label:
        return None
    return PackageOption(name=label, price=price)


def find_price_entry(occasion: str, table: list = None) -> dict | None:
    """
    Find the price table entry for an occasion.

    Matching is case-insensitive substring in either direction
    ('Adult Birthday' matches 'Birthday'). The inclusions entry never matches.
    """
    if not occasion:
        return None
    table = get_price_table() if table is None else table
    needle = occasion.strip().lower()
    for entry in table:
        name = str(entry.get('name', '')).strip().lower()
        if not name or name == INCLUSIONS_ENTRY.lower():
            continue
        if needle in name or name in needle:
            return entry
    return None


def get_package_options(occasion: str, table: list = None) -> list:
    """
    Get the package tiers offered for an occasion.

    Returns:
        List of PackageOption, empty when the occasion has no price entry
    """
    entry = find_price_entry(occasion, table)
    if not entry:
        return []
    options = []
    for raw in entry.get('prices') or []:
        option = parse_package_entry(raw)
        if option is None:
            logger.debug(f"[Catalog] Skipping malformed package entry {raw!r}")
            continue
        options.append(option)
    return options


def get_inclusions(table: list = None) -> list:
    """Get the inclusions (freebies) that come with every package."""
    table = get_price_table() if table is None else table
    for entry in table:
        if str(entry.get('name', '')).strip().lower() == INCLUSIONS_ENTRY.lower():
            prices = entry.get('prices')
            return list(prices) if isinstance(prices, list) else []
    return []


def catalog_as_dict() -> dict:
    """Serialize the browseable catalog for the API."""
    return {
        'occasions': list(OCCASIONS),
        'time_slots': [t.label for t in TIME_SLOTS],
        'categories': [{'id': c.id, 'name': c.name, 'group': c.group} for c in FOOD_CATEGORIES],
        'foods': [
            {'category_id': f.category_id, 'name': f.name, 'subtitle': f.subtitle}
            for f in FOOD_ITEMS
        ],
        'add_ons': [{'name': a.name, 'price': a.price} for a in ADD_ONS],
        'inclusions': get_inclusions(),
    }
