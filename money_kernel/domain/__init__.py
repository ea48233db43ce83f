"""
Pure domain layer.

This package contains the money value types and the numeric, locale and
registry machinery behind them, with NO dependencies on:
- Databases or network services
- Time/clock
- I/O beyond reading the bundled YAML defaults once

All value objects are immutable and deterministic.
"""

from money_kernel.domain.canonical import canonical_code, canonicalize, is_canonical
from money_kernel.domain.currency import IsoCurrencyInfo, IsoCurrencyTable
from money_kernel.domain.currency_metadata import (
    CurrencyMetadata,
    CurrencyMetadataStore,
    clear_currency_metadata,
    currency_metadata,
    get_metadata_store,
    install_metadata_store,
    isolated_metadata_store,
    set_currency_metadata,
    try_normalize_currency_code,
)
from money_kernel.domain.decimal_backend import (
    MAX_DECIMAL_PRECISION,
    MAX_MINOR_UNIT_DECIMALS,
    ArbitraryPrecisionBackend,
    DecimalBackend,
    FixedPrecisionBackend,
    RoundingStrategy,
    get_active_backend,
    parse_decimal,
    set_active_backend,
    to_canonical_string,
)
from money_kernel.domain.formatting import FormatItem, FormatParams, Formatter
from money_kernel.domain.locale import LocalFormat, Locale
from money_kernel.domain.parser import parse_localized_str
from money_kernel.domain.values import (
    BTC,
    ETH,
    XMR,
    Currency,
    CurrencyKind,
    ExchangeRate,
    LocalizedMoney,
    Money,
)

__all__ = [
    # Value Objects
    "Currency",
    "CurrencyKind",
    "Money",
    "ExchangeRate",
    "LocalizedMoney",
    "BTC",
    "ETH",
    "XMR",
    # Decimal backend
    "DecimalBackend",
    "FixedPrecisionBackend",
    "ArbitraryPrecisionBackend",
    "RoundingStrategy",
    "MAX_DECIMAL_PRECISION",
    "MAX_MINOR_UNIT_DECIMALS",
    "get_active_backend",
    "set_active_backend",
    "parse_decimal",
    "to_canonical_string",
    # Canonical codes
    "canonicalize",
    "canonical_code",
    "is_canonical",
    # ISO table
    "IsoCurrencyTable",
    "IsoCurrencyInfo",
    # Metadata registry
    "CurrencyMetadata",
    "CurrencyMetadataStore",
    "currency_metadata",
    "set_currency_metadata",
    "clear_currency_metadata",
    "get_metadata_store",
    "install_metadata_store",
    "isolated_metadata_store",
    "try_normalize_currency_code",
    # Locale & formatting
    "Locale",
    "LocalFormat",
    "FormatItem",
    "FormatParams",
    "Formatter",
    "parse_localized_str",
]
