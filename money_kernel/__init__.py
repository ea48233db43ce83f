"""
Money Kernel

Currency-aware monetary values with:
- ISO 4217, crypto and provider-specific currencies
- A runtime metadata registry for precision, symbols and locales
- Two interchangeable decimal backends
- Explicit rounding policy for conversions
- Locale-aware formatting and strict parsing
"""

__version__ = "0.1.0"

from money_kernel.domain import (
    BTC,
    ETH,
    XMR,
    Currency,
    CurrencyKind,
    CurrencyMetadata,
    ExchangeRate,
    Locale,
    LocalizedMoney,
    Money,
    RoundingStrategy,
    clear_currency_metadata,
    currency_metadata,
    set_currency_metadata,
    try_normalize_currency_code,
)
from money_kernel.exceptions import MoneyKernelError

__all__ = [
    "Currency",
    "CurrencyKind",
    "CurrencyMetadata",
    "Money",
    "ExchangeRate",
    "LocalizedMoney",
    "Locale",
    "RoundingStrategy",
    "BTC",
    "ETH",
    "XMR",
    "currency_metadata",
    "set_currency_metadata",
    "clear_currency_metadata",
    "try_normalize_currency_code",
    "MoneyKernelError",
]
