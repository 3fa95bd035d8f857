"""
Static Exchange Rates

Rates are expressed as PLN per one unit of the foreign currency.
PLN itself is the base and never appears in the table.

DESIGN DECISION: Unknown currency codes are tolerated, not rejected.
A code missing from the table counts as 1.0, so converting to or from
it behaves like converting to or from PLN.
"""

from types import MappingProxyType

BASE_CURRENCY = "PLN"

EXCHANGE_RATES = MappingProxyType({
    "USD": 4.0,
    "EUR": 4.35,
    "GBP": 5.05,
    "CHF": 4.45,
})

# Order offered in the currency pickers
SUPPORTED_CURRENCIES = ("PLN", "EUR", "USD", "GBP", "CHF")


def exchange_rate(from_currency: str, to_currency: str) -> float:
    """
    Rate that converts one unit of from_currency into to_currency.

    >>> exchange_rate("PLN", "EUR")
    4.35
    >>> exchange_rate("USD", "GBP")
    1.2625
    """
    if from_currency == BASE_CURRENCY:
        return EXCHANGE_RATES.get(to_currency, 1.0)
    if to_currency == BASE_CURRENCY:
        return 1.0 / EXCHANGE_RATES.get(from_currency, 1.0)
    return EXCHANGE_RATES.get(to_currency, 1.0) / EXCHANGE_RATES.get(from_currency, 1.0)


def convert(amount: float, from_currency: str, to_currency: str) -> tuple[float, float]:
    """
    Convert an amount between two currencies.

    Returns:
        (rate, result) where result == amount * rate
    """
    rate = exchange_rate(from_currency, to_currency)
    return rate, amount * rate
