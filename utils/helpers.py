"""
Miscellaneous utility helper functions.
Provides common functionality used across the application.
"""

import json
import math
import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOL = '₱'


def parse_price(text) -> int:
    """
    Extract the integer amount from a formatted price.

    Every non-digit character is dropped, so '₱35,000' -> 35000.

    Args:
        text: Price string, int (returned as-is) or float (rounded half-up)

    Returns:
        Integer amount, 0 if no digits are present
    """
    if isinstance(text, bool) or text is None:
        return 0
    if isinstance(text, int):
        return text
    if isinstance(text, float):
        if not math.isfinite(text):
            return 0
        return int(Decimal(str(text)).to_integral_value(rounding=ROUND_HALF_UP))
    digits = re.sub(r'\D', '', str(text))
    return int(digits) if digits else 0


def format_peso(amount: int) -> str:
    """Format an integer amount for display (35000 -> '₱35,000')."""
    return f'{CURRENCY_SYMBOL}{amount:,}'


def format_long_date(value: date | None) -> str:
    """Format a date for summaries (December 1, 2025), '–' when missing."""
    if not value:
        return '–'
    return f'{value.strftime("%B")} {value.day}, {value.year}'


def to_json(value) -> str:
    """Serialize a value for a JSON text column."""
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def from_json(text, default=None):
    """Parse a JSON text column, returning ``default`` when empty or invalid."""
    if not text:
        return default
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return default


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f'Object of type {type(value).__name__} is not JSON serializable')
