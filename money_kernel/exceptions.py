"""
Typed Exception Hierarchy for the Money Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Monetary code must fail precisely. Every failure a caller can act on has its
own exception class, a machine-readable CODE attribute, and the structured
data needed to react without parsing the message:

    try:
        total = invoice.try_add(fee)
    except CurrencyMismatchError as e:
        api_response(code=e.code, expected=e.expected, found=e.found)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from MoneyKernelError:

    MoneyKernelError (base)
    |
    +-- CurrencyError
    |   +-- InvalidCurrencyError
    |   +-- CurrencyMismatchError
    |   +-- MetadataNotFoundError
    |
    +-- MinorUnitError
    |   +-- ExceedsDecimalPrecisionError
    |   +-- ExceedsMinorUnitScaleError
    |
    +-- MoneyArithmeticError
    |   +-- ConversionError
    |   +-- DivisionByZeroError
    |
    +-- ExchangeRateError
    |   +-- InvalidExchangeRateError
    |   +-- IncompatibleExchangeRateError
    |
    +-- AmountFormatError
        +-- InvalidDecimalError
        +-- InvalidAmountFormatError
        +-- InvalidGroupingError
        +-- ScaleTooLargeError
        +-- MismatchedCurrencyAffixError
        +-- UnsupportedLocaleError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Currency        | INVALID_CURRENCY            | Empty or uncanonicalizable code
                | CURRENCY_MISMATCH           | Mixed currencies in arithmetic
                | METADATA_NOT_FOUND          | No precision known for the currency
----------------|-----------------------------|-----------------------------------------
Minor units     | EXCEEDS_DECIMAL_PRECISION   | Precision above the backend ceiling
                | EXCEEDS_MINOR_UNIT_SCALE    | Precision above 10^18 scaling limit
----------------|-----------------------------|-----------------------------------------
Arithmetic      | CONVERSION_ERROR            | Scale/overflow bound exceeded
                | DIVISION_BY_ZERO            | Money divided by zero
----------------|-----------------------------|-----------------------------------------
Exchange Rate   | INVALID_EXCHANGE_RATE       | Same-currency pair or rate <= 0
                | INCOMPATIBLE_EXCHANGE_RATE  | Rate source != money currency
----------------|-----------------------------|-----------------------------------------
Amount format   | INVALID_DECIMAL             | Canonical decimal string rejected
                | INVALID_AMOUNT_FORMAT       | Stray characters / separators
                | INVALID_GROUPING            | Digit groups break the locale pattern
                | SCALE_TOO_LARGE             | More fraction digits than the currency
                | MISMATCHED_CURRENCY_AFFIX   | Symbol/code does not match currency
                | UNSUPPORTED_LOCALE          | Unknown locale tag

===============================================================================
DESIGN DECISIONS
===============================================================================

1. Domain exceptions inherit from Exception, not ValueError, so they are
   catchable as a group without mixing in programming errors.

2. `code` is a class attribute: codes are static per exception type.

3. All context is stored as attributes (as strings for currencies and
   decimals) so exceptions survive logging and serialization intact.
"""

from __future__ import annotations

from typing import Any


class MoneyKernelError(Exception):
    """
    Base exception for all money kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "MONEY_KERNEL_ERROR"


# Currency-related exceptions


class CurrencyError(MoneyKernelError):
    """Base exception for currency-related errors."""

    code: str = "CURRENCY_ERROR"


class InvalidCurrencyError(CurrencyError):
    """Currency text is empty or cannot be canonicalized."""

    code: str = "INVALID_CURRENCY"

    def __init__(self, value: Any, reason: str = "empty or invalid currency code"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid Currency value: {value!r} ({reason})")


class CurrencyMismatchError(CurrencyError):
    """Attempted arithmetic on Money values with different currencies."""

    code: str = "CURRENCY_MISMATCH"

    def __init__(self, expected: Any, found: Any):
        self.expected = str(expected)
        self.found = str(found)
        super().__init__(
            f"currency mismatch: expected {self.expected}, found {self.found}"
        )


class MetadataNotFoundError(CurrencyError):
    """
    No minor-unit precision is known for the currency.

    Raised for custom codes and exponent-less ISO codes (metals, funds)
    until metadata is registered. There is no implicit default precision.
    """

    code: str = "METADATA_NOT_FOUND"

    def __init__(self, currency: Any):
        self.currency = str(currency)
        super().__init__(f"metadata not registered for currency {self.currency}")


# Minor-unit configuration exceptions


class MinorUnitError(MoneyKernelError):
    """Base exception for rejected minor-unit precision overrides."""

    code: str = "MINOR_UNIT_ERROR"

    def __init__(self, decimals: int, limit: int, message: str):
        self.decimals = decimals
        self.limit = limit
        super().__init__(message)


class ExceedsDecimalPrecisionError(MinorUnitError):
    """Requested precision exceeds what the active decimal backend can hold."""

    code: str = "EXCEEDS_DECIMAL_PRECISION"

    def __init__(self, decimals: int, limit: int):
        super().__init__(
            decimals,
            limit,
            f"decimal precision {decimals} exceeds backend maximum of {limit}",
        )


class ExceedsMinorUnitScaleError(MinorUnitError):
    """Requested precision would overflow the 10^scale minor-unit multiplier."""

    code: str = "EXCEEDS_MINOR_UNIT_SCALE"

    def __init__(self, decimals: int, limit: int):
        super().__init__(
            decimals,
            limit,
            f"decimal precision {decimals} exceeds minor-unit scaling limit of {limit}",
        )


# Arithmetic exceptions


class MoneyArithmeticError(MoneyKernelError):
    """Base exception for arithmetic and scaling failures."""

    code: str = "MONEY_ARITHMETIC_ERROR"


class ConversionError(MoneyArithmeticError):
    """Scale or magnitude exceeds a supported bound."""

    code: str = "CONVERSION_ERROR"

    def __init__(self, reason: str = "could not convert amount to minor units"):
        self.reason = reason
        super().__init__(reason)


class DivisionByZeroError(MoneyArithmeticError):
    """Money divided by zero."""

    code: str = "DIVISION_BY_ZERO"

    def __init__(self) -> None:
        super().__init__("division by zero")


# Exchange rate exceptions


class ExchangeRateError(MoneyKernelError):
    """Base exception for exchange rate related errors."""

    code: str = "EXCHANGE_RATE_ERROR"


class InvalidExchangeRateError(ExchangeRateError):
    """
    Exchange rate is invalid.

    Rates must be strictly positive and must connect two different
    currencies. A same-currency rate is rejected because it can only be 1
    and hides caller mistakes.
    """

    code: str = "INVALID_EXCHANGE_RATE"

    def __init__(self, rate: Any, reason: str):
        self.rate = str(rate)
        self.reason = reason
        super().__init__(f"invalid exchange rate: {self.rate} ({reason})")


class IncompatibleExchangeRateError(ExchangeRateError):
    """Exchange rate source currency does not match the money being converted."""

    code: str = "INCOMPATIBLE_EXCHANGE_RATE"

    def __init__(self, from_currency: Any, to_currency: Any, money_currency: Any):
        self.from_currency = str(from_currency)
        self.to_currency = str(to_currency)
        self.money_currency = str(money_currency)
        super().__init__(
            f"incompatible exchange rate: from {self.from_currency} to "
            f"{self.to_currency}, but money currency is {self.money_currency}"
        )


# Amount parsing and formatting exceptions


class AmountFormatError(MoneyKernelError):
    """Base exception for amount parsing and rendering failures."""

    code: str = "AMOUNT_FORMAT_ERROR"


class InvalidDecimalError(AmountFormatError):
    """Canonical decimal string could not be parsed."""

    code: str = "INVALID_DECIMAL"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"invalid decimal: {value!r}")


class InvalidAmountFormatError(AmountFormatError):
    """Localized amount has invalid separators or characters."""

    code: str = "INVALID_AMOUNT_FORMAT"

    def __init__(self, value: Any, reason: str = "invalid localized amount format"):
        self.value = value
        self.reason = reason
        super().__init__(f"{reason}: {value!r}")


class InvalidGroupingError(AmountFormatError):
    """Digit groups do not match the expected locale pattern."""

    code: str = "INVALID_GROUPING"

    def __init__(self, value: Any, locale: Any):
        self.value = value
        self.locale = str(locale)
        super().__init__(f"invalid grouping for locale {self.locale}: {value!r}")


class ScaleTooLargeError(AmountFormatError):
    """Parsed fraction has more digits than the currency exponent allows."""

    code: str = "SCALE_TOO_LARGE"

    def __init__(self, digits: int, exponent: int):
        self.digits = digits
        self.exponent = exponent
        super().__init__(
            f"fraction scale {digits} exceeds currency exponent {exponent}"
        )


class MismatchedCurrencyAffixError(AmountFormatError):
    """Detected symbol or code does not match the provided currency."""

    code: str = "MISMATCHED_CURRENCY_AFFIX"

    def __init__(self, affix: str, currency: Any):
        self.affix = affix
        self.currency = str(currency)
        super().__init__(
            f"currency affix {affix!r} does not match currency {self.currency}"
        )


class UnsupportedLocaleError(AmountFormatError):
    """Locale tag is not one of the supported locales."""

    code: str = "UNSUPPORTED_LOCALE"

    def __init__(self, locale: Any):
        self.locale = str(locale)
        super().__init__(f"unsupported locale: {self.locale!r}")
