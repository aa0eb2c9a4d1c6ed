"""
Reservation pricing.
Derives the financial summary of a booking draft.
"""

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal

from utils.helpers import format_peso, parse_price

DEFAULT_DOWNPAYMENT_RATIO = 0.5


@dataclass(frozen=True)
class PricingSummary:
    package_price: int
    add_ons_total: int
    downpayment: int
    remaining_balance: int
    total_amount: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data['display'] = {key: format_peso(value) for key, value in asdict(self).items()}
        return data


def calculate_downpayment(package_price: int, ratio: float = DEFAULT_DOWNPAYMENT_RATIO) -> int:
    """
    Calculate the down payment for a package price.

    Rounds half-up to a whole amount.

    Args:
        package_price: Package price in whole pesos
        ratio: Fraction of the package price due up front (0..1)

    Returns:
        Down payment amount
    """
    if not 0 <= ratio <= 1:
        raise ValueError(f'Down payment ratio must be between 0 and 1, got {ratio}')
    amount = Decimal(package_price) * Decimal(str(ratio))
    return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_pricing(draft, ratio: float = DEFAULT_DOWNPAYMENT_RATIO) -> PricingSummary:
    """
    Calculate the pricing summary for a draft.

    Args:
        draft: ReservationDraft (reads ``pack`` and ``add_ons``)
        ratio: Down payment ratio

    Returns:
        PricingSummary where downpayment + remaining_balance == package_price
        and total_amount == package_price + add_ons_total
    """
    package_price = parse_price(draft.pack.price) if draft.pack else 0
    add_ons_total = sum(add_on.price for add_on in draft.add_ons.values())
    downpayment = calculate_downpayment(package_price, ratio)

    return PricingSummary(
        package_price=package_price,
        add_ons_total=add_ons_total,
        downpayment=downpayment,
        remaining_balance=package_price - downpayment,
        total_amount=package_price + add_ons_total,
    )
