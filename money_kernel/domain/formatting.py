"""
Formatting engine for locale-aware money rendering.

Responsibility
--------------
Turns a Decimal into display text for a locale: optional display rounding
(nearest-even), zero padding of the fraction, integer digit grouping and
assembly of caller-ordered tokens (sign, symbol, amount, code, space).

Architecture position
---------------------
**Kernel > Domain** -- used by ``Money`` rendering. Knows nothing about
currencies beyond the symbol and code strings it is handed.

Invariants enforced
-------------------
* A zero value never renders a sign, even when it was ``-0``.
* The fraction never has more digits than requested; display rounding
  happens once, before padding.
* Grouping is applied right to left and the last group size repeats.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from money_kernel.domain import decimal_backend as dec
from money_kernel.domain.decimal_backend import RoundingStrategy
from money_kernel.domain.locale import LocalFormat, Locale
from money_kernel.exceptions import InvalidAmountFormatError


class FormatItem(str, Enum):
    """Token positions that can be arranged in the output."""

    SIGN = "sign"  # "-" for negative amounts, nothing otherwise
    SYMBOL = "symbol"
    AMOUNT = "amount"
    CODE = "code"
    SPACE = "space"


@dataclass(frozen=True, slots=True)
class FormatParams:
    """How a value should be rendered."""

    positions: tuple[FormatItem, ...]
    rounding_digits: int | None = None
    symbol: str | None = None
    code: str | None = None


def build_positions(
    *,
    has_symbol: bool,
    symbol_first: bool,
    symbol_spacing: bool,
    include_code: bool,
) -> tuple[FormatItem, ...]:
    """
    Standard money layout.

        sign, symbol, [space], amount, [space, code]   symbol first
        sign, amount, [space], symbol, [space, code]   symbol after

    ``symbol_spacing`` adds the inner space, used for multi-character
    symbols such as ``BD`` or ``Br``.
    """
    positions: list[FormatItem] = [FormatItem.SIGN]
    if has_symbol:
        if symbol_first:
            positions.append(FormatItem.SYMBOL)
            if symbol_spacing:
                positions.append(FormatItem.SPACE)
            positions.append(FormatItem.AMOUNT)
        else:
            positions.append(FormatItem.AMOUNT)
            if symbol_spacing:
                positions.append(FormatItem.SPACE)
            positions.append(FormatItem.SYMBOL)
    else:
        positions.append(FormatItem.AMOUNT)

    if include_code:
        positions.extend((FormatItem.SPACE, FormatItem.CODE))
    return tuple(positions)


def apply_grouping(digits: str, grouping: tuple[int, ...], separator: str) -> str:
    """
    Insert ``separator`` between groups of ``digits`` from the right.

        apply_grouping("12345678", (3, 2, 2), ",") -> "1,23,45,678"
    """
    if not grouping:
        return digits

    repeat = grouping[-1]
    chunks: list[str] = []
    end = len(digits)
    index = 0
    while end > 0:
        size = grouping[index] if index < len(grouping) else repeat
        start = max(end - size, 0)
        chunks.append(digits[start:end])
        end = start
        index += 1

    return separator.join(reversed(chunks))


class Formatter:
    """Renders one value for one locale with the given parameters."""

    def __init__(self, value: Decimal, locale: Locale | LocalFormat, params: FormatParams):
        self._value = value
        self._format = locale.spec() if isinstance(locale, Locale) else locale
        self._params = params

    def format(self) -> str:
        """
        Produce the display string.

        Raises:
            InvalidAmountFormatError: If the fraction still has more digits
                than ``rounding_digits`` after display rounding.
        """
        value = self._value
        target = self._params.rounding_digits

        if target is not None:
            value = dec.round_dp_with_strategy(
                value, target, RoundingStrategy.MIDPOINT_NEAREST_EVEN
            )

        canonical = dec.to_canonical_string(value)
        negative = canonical.startswith("-") and not value.is_zero()
        canonical = canonical.lstrip("-")

        integer, _, fraction = canonical.partition(".")
        integer = integer or "0"

        if target is not None:
            if len(fraction) > target:
                raise InvalidAmountFormatError(
                    canonical, f"fraction exceeds {target} display digits"
                )
            fraction = fraction.ljust(target, "0")

        amount = apply_grouping(
            integer, self._format.grouping, self._format.group_separator
        )
        if fraction:
            amount = f"{amount}{self._format.decimal_separator}{fraction}"

        symbol = self._params.symbol or ""
        code = self._params.code or ""

        out: list[str] = []
        for item in self._params.positions:
            if item is FormatItem.SIGN:
                if negative:
                    out.append("-")
            elif item is FormatItem.SYMBOL:
                out.append(symbol)
            elif item is FormatItem.AMOUNT:
                out.append(amount)
            elif item is FormatItem.CODE:
                out.append(code)
            elif item is FormatItem.SPACE:
                out.append(" ")
        return "".join(out)
