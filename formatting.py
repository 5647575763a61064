# formatting.py
from decimal import ROUND_HALF_UP, Decimal

from pricing_config import CURRENCY


def round_half_up(x: float) -> int:
    """Whole AED, halves rounded up (2000.5 -> 2001), unlike built-in round()."""
    return int(Decimal(str(x)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_price(price: float, currency: str = CURRENCY) -> str:
    """Whole number with thousands grouped: `AED 2,500`."""
    return f"{currency} {round_half_up(price):,}"


def format_price_range(low: float, high: float, currency: str = CURRENCY) -> str:
    return f"{format_price(low, currency)} - {format_price(high, currency)}"
