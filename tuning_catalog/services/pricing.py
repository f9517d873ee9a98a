"""Currency conversion against the static SEK-based exchange table."""

from typing import Any

from ..core.enums import EXCHANGE_RATES
from ..utils.converters import parse_price


def rate_for(currency: str | None, rates: dict[str, float] | None = None) -> float:
    """Exchange rate for ``currency``; unknown currencies fall back to 1.0."""
    rates = rates or EXCHANGE_RATES
    if not currency:
        return 1.0
    return rates.get(currency.upper()) or 1.0


def convert_price(
    amount: float | None,
    currency: str | None,
    rates: dict[str, float] | None = None,
) -> float | None:
    """Convert a base-currency (SEK) price to ``currency`` for display."""
    if amount is None:
        return None
    return round(amount * rate_for(currency, rates), 2)


def to_base_currency(
    value: Any,
    currency: str | None,
    rates: dict[str, float] | None = None,
) -> int | None:
    """Parse a price entered in ``currency`` and convert it to whole SEK.

    Examples:
        >>> to_base_currency("450", "EUR")
        4500
        >>> to_base_currency("", "EUR") is None
        True
    """
    amount = parse_price(value)
    if amount is None:
        return None
    rate = rate_for(currency, rates)
    return round(amount / rate)

