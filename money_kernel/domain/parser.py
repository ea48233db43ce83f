"""
Localized amount parser.

Responsibility
--------------
Inverse of the formatting engine: reads human-formatted money text such as
``"-$1,234.56"``, ``"1.234,56 €"`` or ``"USD 100,000"`` for a currency and
locale and returns the exact Decimal it denotes.

Architecture position
---------------------
**Kernel > Domain** -- called by ``Money.from_str_locale``. Reads the
currency's symbol, code, scale and default locale; hands the rebuilt
canonical text to the decimal backend.

Algorithm
---------
1. Trim; strip one optional leading ``-`` or ``+``.
2. The digit span runs from the first to the last ASCII digit. Text before
   it is the prefix affix, text after it the suffix affix.
3. Each non-empty affix must equal the currency symbol or code, ignoring
   case.
4. Inside the span only digits, the locale group separator and at most one
   decimal separator are allowed.
5. Grouping: strict mode requires every group after the first to match the
   locale pattern exactly and the first group to hold 1..size digits.
   Lenient mode only rejects empty groups.
6. The fraction may not have more digits than the currency scale.
7. ``-0`` parses to ``0``.

Failure modes
-------------
* ``InvalidAmountFormatError`` -- empty input, stray characters, repeated
  decimal separators or a dangling decimal separator.
* ``MismatchedCurrencyAffixError`` -- an affix that is neither symbol nor code.
* ``InvalidGroupingError`` -- digit groups that break the locale pattern.
* ``ScaleTooLargeError`` -- more fraction digits than the currency allows.
* ``MetadataNotFoundError`` -- the currency has no known scale.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from money_kernel.domain.decimal_backend import parse_decimal
from money_kernel.domain.locale import LocalFormat, Locale
from money_kernel.exceptions import (
    AmountFormatError,
    InvalidAmountFormatError,
    InvalidGroupingError,
    MismatchedCurrencyAffixError,
    ScaleTooLargeError,
)
from money_kernel.logging_config import LogContext, get_logger

if TYPE_CHECKING:
    from money_kernel.domain.values import Currency

logger = get_logger("domain.parser")


def parse_localized_str(
    text: str,
    currency: Currency,
    locale: Locale | None = None,
    strict: bool = True,
) -> Decimal:
    """
    Parse localized money text into a Decimal.

    ``locale`` defaults to the currency's default locale.
    """
    resolved = locale if locale is not None else currency.default_locale()
    with LogContext.bind(
        operation="parse", currency=currency.code, locale=resolved.value
    ):
        try:
            return _parse(text, currency, resolved, strict)
        except AmountFormatError as exc:
            logger.debug(
                "localized_amount_rejected",
                extra={
                    "input": text,
                    "strict": strict,
                    "error_code": exc.code,
                },
            )
            raise


def _parse(text: str, currency: Currency, locale: Locale, strict: bool) -> Decimal:
    rest = text.strip()
    if not rest:
        raise InvalidAmountFormatError(text, "empty amount")

    negative = False
    if rest.startswith("-"):
        negative = True
        rest = rest[1:]
    elif rest.startswith("+"):
        rest = rest[1:]
    rest = rest.lstrip()

    first = _first_digit(rest)
    last = _last_digit(rest)
    if first is None or last is None:
        raise InvalidAmountFormatError(text, "no digits in amount")

    prefix = rest[:first].strip()
    suffix = rest[last + 1:].strip()
    amount = rest[first:last + 1]

    symbol = currency.symbol() or currency.code
    for affix in (prefix, suffix):
        if affix:
            _match_affix(affix, symbol, currency)

    spec = locale.spec()
    decimal_count = 0
    for ch in amount:
        if (ch.isascii() and ch.isdigit()) or ch == spec.group_separator:
            continue
        if ch == spec.decimal_separator:
            decimal_count += 1
            if decimal_count > 1:
                raise InvalidAmountFormatError(text, "multiple decimal separators")
            continue
        raise InvalidAmountFormatError(text, f"unexpected character {ch!r}")

    integer_part, _, fraction_part = amount.rpartition(spec.decimal_separator)
    if not decimal_count:
        integer_part, fraction_part = amount, ""
    if decimal_count and not fraction_part:
        raise InvalidAmountFormatError(text, "missing fraction after decimal separator")
    if spec.group_separator in fraction_part:
        raise InvalidAmountFormatError(text, "group separator in fraction")

    _validate_grouping(integer_part, spec, strict, text, locale)

    integer_digits = integer_part.replace(spec.group_separator, "")
    exponent = currency.decimal_places()
    if len(fraction_part) > exponent:
        raise ScaleTooLargeError(len(fraction_part), exponent)

    is_zero = not integer_digits.strip("0") and not fraction_part.strip("0")

    canonical = integer_digits or "0"
    if fraction_part:
        canonical = f"{canonical}.{fraction_part}"
    if negative and not is_zero:
        canonical = f"-{canonical}"

    value = parse_decimal(canonical)
    if value is None:
        raise InvalidAmountFormatError(text)
    return value


def _first_digit(text: str) -> int | None:
    for idx, ch in enumerate(text):
        if ch.isascii() and ch.isdigit():
            return idx
    return None


def _last_digit(text: str) -> int | None:
    for idx in range(len(text) - 1, -1, -1):
        if text[idx].isascii() and text[idx].isdigit():
            return idx
    return None


def _match_affix(token: str, symbol: str, currency: Currency) -> None:
    wanted = token.upper()
    if wanted == symbol.upper() or wanted == currency.code.upper():
        return
    raise MismatchedCurrencyAffixError(token, currency)


def _validate_grouping(
    integer_part: str,
    spec: LocalFormat,
    strict: bool,
    text: str,
    locale: Locale,
) -> None:
    if spec.group_separator not in integer_part:
        return

    groups = integer_part.split(spec.group_separator)
    if any(not group for group in groups):
        raise InvalidGroupingError(text, locale)
    if not strict:
        return

    # groups counted from the right; the leftmost may be shorter
    for index, group in enumerate(reversed(groups)):
        expected = spec.group_size(index)
        if index == len(groups) - 1:
            if len(group) > expected:
                raise InvalidGroupingError(text, locale)
        elif len(group) != expected:
            raise InvalidGroupingError(text, locale)
