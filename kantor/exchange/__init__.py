"""Currency exchange package."""

from kantor.exchange.rates import (
    BASE_CURRENCY,
    EXCHANGE_RATES,
    SUPPORTED_CURRENCIES,
    convert,
    exchange_rate,
)

__all__ = [
    "BASE_CURRENCY",
    "EXCHANGE_RATES",
    "SUPPORTED_CURRENCIES",
    "convert",
    "exchange_rate",
]
