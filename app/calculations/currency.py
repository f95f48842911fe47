"""
Currency Conversion

Converts amounts between currencies using a static table of exchange rates
quoted against a common base currency.
"""

import math
from types import MappingProxyType
from typing import Mapping

# Units of each currency per 1 USD. Demo values, not live market rates.
DEFAULT_CURRENCY_RATES: Mapping[str, float] = MappingProxyType(
    {
        "USD": 1.0,
        "EUR": 0.92,
        "GBP": 0.79,
        "JPY": 156.5,
        "CAD": 1.36,
    }
)


def normalize_rates(rates: Mapping[str, float]) -> Mapping[str, float]:
    """
    Return a read-only copy of a rate table with upper-cased currency codes.

    Raises:
        ValueError: If a rate is zero, negative or not finite
    """
    table = {}
    for code, rate in rates.items():
        rate = float(rate)
        if not math.isfinite(rate) or rate <= 0:
            raise ValueError(f"Exchange rate for {code} must be positive: {rate}")
        table[code.upper()] = rate
    return MappingProxyType(table)


def get_rate(code: str, rates: Mapping[str, float]) -> float:
    """Rate for a currency code; unknown codes are treated as the base currency."""
    return rates.get(code.upper(), 1.0)


def convert_currency(
    amount: float,
    from_code: str,
    to_code: str,
    rates: Mapping[str, float] = DEFAULT_CURRENCY_RATES,
) -> float:
    """
    Convert amount from one currency to another via the base currency.

    Args:
        amount: Amount in the source currency
        from_code: Source currency code (e.g., "USD")
        to_code: Target currency code (e.g., "EUR")
        rates: Units of each currency per unit of the base currency

    Returns:
        Amount in the target currency
    """
    return amount / get_rate(from_code, rates) * get_rate(to_code, rates)
