"""
Values -- Immutable, self-validating money value objects.

Responsibility:
    Provides the value types every monetary computation goes through:
    Currency, Money, ExchangeRate and the LocalizedMoney rendering view.

Architecture position:
    Kernel > Domain -- pure functional core, no I/O beyond the in-memory
    metadata registry. Depends on the decimal backend (all arithmetic),
    the ISO table and the metadata registry (precision and display data),
    and the formatting/parsing engines (locale-aware text).

Invariants enforced:
    - Currency codes are canonical; OTHER codes never name an ISO or
      crypto code, so equality and parsing always agree.
    - Money.amount is quantized to the currency's resolved scale with
      midpoint-away-from-zero at construction. Precision is never guessed:
      an unknown scale raises MetadataNotFoundError.
    - Money arithmetic never mixes currencies.
    - ExchangeRate connects two different currencies with a rate > 0.
    - Floats are rejected everywhere an amount or factor is accepted.

Failure modes:
    - InvalidCurrencyError / MetadataNotFoundError from Currency.
    - InvalidDecimalError for unparseable amount text.
    - ConversionError when a scale or minor-unit integer leaves its bounds.
    - CurrencyMismatchError, DivisionByZeroError,
      IncompatibleExchangeRateError from arithmetic and conversion.
    - InvalidExchangeRateError from ExchangeRate construction.
    - TypeError for floats and unsupported operand types.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any

from money_kernel.domain import decimal_backend as dec
from money_kernel.domain.canonical import canonical_code
from money_kernel.domain.currency import IsoCurrencyTable
from money_kernel.domain.currency_metadata import CurrencyMetadata, currency_metadata
from money_kernel.domain.decimal_backend import MAX_MINOR_UNIT_DECIMALS, RoundingStrategy
from money_kernel.domain.formatting import FormatParams, Formatter, build_positions
from money_kernel.domain.locale import Locale
from money_kernel.domain.parser import parse_localized_str
from money_kernel.exceptions import (
    ConversionError,
    CurrencyMismatchError,
    DivisionByZeroError,
    IncompatibleExchangeRateError,
    InvalidCurrencyError,
    InvalidDecimalError,
    InvalidExchangeRateError,
    MetadataNotFoundError,
    MoneyKernelError,
)
from money_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.values")


class CurrencyKind(str, Enum):
    """Kind of currency code."""

    ISO = "iso"
    BTC = "btc"
    ETH = "eth"
    XMR = "xmr"
    OTHER = "other"

    @property
    def is_crypto(self) -> bool:
        return self in _CRYPTO_DECIMALS


# Fixed precision and names for the dedicated crypto kinds
_CRYPTO_DECIMALS: dict[CurrencyKind, int] = {
    CurrencyKind.BTC: 8,
    CurrencyKind.ETH: 18,
    CurrencyKind.XMR: 12,
}
_CRYPTO_NAMES: dict[CurrencyKind, str] = {
    CurrencyKind.BTC: "Bitcoin",
    CurrencyKind.ETH: "Ethereum",
    CurrencyKind.XMR: "Monero",
}
_CRYPTO_BY_CODE: dict[str, CurrencyKind] = {
    kind.name: kind for kind in _CRYPTO_DECIMALS
}

RESERVE_CURRENCIES = frozenset({"USD", "EUR", "GBP", "JPY", "CHF"})


def _classify(code: str) -> CurrencyKind:
    if code in _CRYPTO_BY_CODE:
        return _CRYPTO_BY_CODE[code]
    if IsoCurrencyTable.is_iso(code):
        return CurrencyKind.ISO
    return CurrencyKind.OTHER


@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency value object: an ISO 4217 code, a crypto asset or a provider code.

    Contract:
        Built from free text. The code is trimmed and canonicalized, then
        classified: BTC/ETH/XMR get their crypto kind, ISO 4217 codes are
        ISO, anything else is OTHER. Passing ``kind`` explicitly asserts the
        classification and fails if the code does not match it.

            Currency("usd")             -> Currency('USD')   kind ISO
            Currency("btc")             -> Currency('BTC')   kind BTC
            Currency("my token")        -> Currency('MY_TOKEN') kind OTHER
            Currency.other("USD")       -> InvalidCurrencyError

    Guarantees:
        - Immutable and hashable
        - code is canonical and never empty
        - Two currencies are equal exactly when their codes are equal

    Non-goals:
        - Does NOT store precision; it is resolved on demand from the ISO
          table, the crypto constants or the metadata registry
    """

    code: str
    kind: CurrencyKind | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.code, str):
            raise InvalidCurrencyError(self.code, "currency code must be a string")
        trimmed = self.code.strip()
        if not trimmed:
            raise InvalidCurrencyError(self.code)
        code = canonical_code(trimmed)
        actual = _classify(code)

        if self.kind is not None:
            expected = CurrencyKind(self.kind)
            if expected is not actual:
                raise InvalidCurrencyError(
                    self.code, f"code is {actual.value}, not {expected.value}"
                )

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "kind", actual)

    @classmethod
    def parse(cls, text: str) -> Currency:
        """Parse free-form currency text."""
        return cls(text)

    @classmethod
    def iso(cls, code: str) -> Currency:
        """Build an ISO 4217 currency, rejecting non-ISO codes."""
        return cls(code, CurrencyKind.ISO)

    @classmethod
    def other(cls, code: str) -> Currency:
        """Build a provider-specific currency, rejecting ISO and crypto codes."""
        return cls(code, CurrencyKind.OTHER)

    @classmethod
    def from_json(cls, value: str) -> Currency:
        return cls(value)

    def to_json(self) -> str:
        return self.code

    @property
    def is_iso(self) -> bool:
        return self.kind is CurrencyKind.ISO

    @property
    def is_crypto(self) -> bool:
        return self.kind.is_crypto

    @property
    def is_reserve_currency(self) -> bool:
        """USD, EUR, GBP, JPY and CHF."""
        return self.code in RESERVE_CURRENCIES

    @property
    def is_canonical(self) -> bool:
        """False for OTHER codes, which carry a free-form canonical payload."""
        return self.kind is not CurrencyKind.OTHER

    def metadata(self) -> CurrencyMetadata | None:
        """Registry metadata for this code (custom entry first, then built-in)."""
        return currency_metadata(self.code)

    def decimal_places(self) -> int:
        """
        Resolve the number of minor-unit digits.

        ISO codes use their published exponent and fall back to registered
        metadata when ISO publishes none. Crypto kinds are fixed. OTHER codes
        use registered metadata only.

        Raises:
            MetadataNotFoundError: If no precision is known.
        """
        if self.kind.is_crypto:
            return _CRYPTO_DECIMALS[self.kind]
        if self.kind is CurrencyKind.ISO:
            exponent = IsoCurrencyTable.exponent(self.code)
            if exponent is not None:
                return exponent
        metadata = self.metadata()
        if metadata is None:
            raise MetadataNotFoundError(self)
        return metadata.minor_units

    def minor_unit_scale(self) -> int:
        """
        ``10 ** decimal_places()``.

        Raises:
            MetadataNotFoundError: If no precision is known.
            ConversionError: If the precision exceeds MAX_MINOR_UNIT_DECIMALS.
        """
        return 10 ** _ensure_scale_within_limits(self.decimal_places())

    @property
    def full_name(self) -> str:
        if self.kind.is_crypto:
            return _CRYPTO_NAMES[self.kind]
        if self.kind is CurrencyKind.ISO:
            return IsoCurrencyTable.name(self.code) or self.code
        metadata = self.metadata()
        return metadata.full_name if metadata else self.code

    def symbol(self) -> str | None:
        metadata = self.metadata()
        return metadata.symbol if metadata else None

    def symbol_first(self) -> bool:
        metadata = self.metadata()
        return metadata.symbol_first if metadata else True

    def default_locale(self) -> Locale:
        metadata = self.metadata()
        if metadata is not None:
            return metadata.default_locale
        from money_kernel.config import get_config

        return Locale.parse(get_config().default_locale)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"Currency({self.code!r})"


BTC = Currency("BTC")
ETH = Currency("ETH")
XMR = Currency("XMR")


def _as_currency(value: Currency | str) -> Currency:
    if isinstance(value, Currency):
        return value
    if isinstance(value, str):
        return Currency(value)
    raise TypeError(f"currency must be Currency or str, got {type(value).__name__}")


def _as_decimal(value: Decimal | str | int) -> Decimal:
    """Coerce an amount, factor or rate to Decimal. Floats are refused."""
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(
            f"{type(value).__name__} is not accepted for money values; "
            "use Decimal, str or int"
        )
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise InvalidDecimalError(str(value))
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, str):
        parsed = dec.parse_decimal(value)
        if parsed is None:
            raise InvalidDecimalError(value)
        return parsed
    raise TypeError(f"cannot use {type(value).__name__} as a decimal amount")


def _ensure_scale_within_limits(decimals: int) -> int:
    if decimals > dec.MAX_DECIMAL_PRECISION:
        raise ConversionError(
            f"scale {decimals} exceeds decimal precision of {dec.MAX_DECIMAL_PRECISION}"
        )
    if decimals > MAX_MINOR_UNIT_DECIMALS:
        raise ConversionError(
            f"scale {decimals} exceeds minor-unit limit of {MAX_MINOR_UNIT_DECIMALS}"
        )
    return decimals


@dataclass(frozen=True, slots=True)
class Money:
    """
    Monetary amount value object.

    Contract:
        Pairs a Decimal amount with its Currency. The amount is quantized to
        the currency's scale at construction (midpoint away from zero), so
        every Money already carries exactly the precision its currency
        allows.

    Guarantees:
        - Immutable and hashable
        - amount is always a quantized Decimal (never float)
        - Money("1.230", "USD") == Money("1.23", "USD")
        - Arithmetic never mixes currencies

    Non-goals:
        - Does NOT fetch exchange rates
        - Does NOT guess precision for unknown currencies
    """

    amount: Decimal
    currency: Currency

    def __post_init__(self) -> None:
        currency = _as_currency(self.currency)
        amount = _as_decimal(self.amount)
        scale = _ensure_scale_within_limits(currency.decimal_places())
        rounded = dec.round_dp_with_strategy(
            amount, scale, RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO
        )
        if rounded.is_zero():
            rounded = rounded.copy_abs()
        object.__setattr__(self, "currency", currency)
        object.__setattr__(self, "amount", rounded)

    @classmethod
    def of(cls, amount: Decimal | str | int, currency: Currency | str) -> Money:
        """
        Factory method for creating Money.

        Raises:
            InvalidDecimalError: If ``amount`` is unparseable text.
            MetadataNotFoundError: If the currency has no known precision.
            TypeError: If ``amount`` is a float.
        """
        return cls(amount=amount, currency=currency)

    @classmethod
    def zero(cls, currency: Currency | str) -> Money:
        """Create a zero amount in the given currency."""
        return cls(amount=dec.zero(), currency=currency)

    @classmethod
    def from_canonical_str(cls, text: str, currency: Currency | str) -> Money:
        """
        Parse a canonical decimal string (``"-1234.5"``, ``"+7"``).

        Raises:
            InvalidDecimalError: On empty input, scientific notation or any
                other non-canonical text.
        """
        amount = dec.parse_decimal(text)
        if amount is None:
            raise InvalidDecimalError(text)
        return cls(amount=amount, currency=currency)

    @classmethod
    def from_minor_units(cls, minor_units: int, currency: Currency | str) -> Money:
        """
        Build Money from an integer count of minor units (cents, satoshis).

        Raises:
            ConversionError: If the scale exceeds MAX_MINOR_UNIT_DECIMALS or
                the integer is outside the signed 128-bit range.
        """
        if isinstance(minor_units, bool) or not isinstance(minor_units, int):
            raise TypeError(
                f"minor_units must be int, got {type(minor_units).__name__}"
            )
        currency = _as_currency(currency)
        scale = _ensure_scale_within_limits(currency.decimal_places())
        return cls(amount=dec.from_minor_units(minor_units, scale), currency=currency)

    def as_minor_units(self) -> int:
        """
        The amount as an integer count of minor units.

        Raises:
            ConversionError: If the scale exceeds limits or the result is
                outside the signed 128-bit range.
        """
        scale = _ensure_scale_within_limits(self.currency.decimal_places())
        return dec.to_minor_units(self.amount, scale)

    @property
    def is_zero(self) -> bool:
        return self.amount.is_zero()

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    # ------------------------------------------------------------------
    # Checked arithmetic
    # ------------------------------------------------------------------

    def _check_same_currency(self, other: Money) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"expected Money, got {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def try_add(self, other: Money) -> Money:
        """Add two Money values. Raises CurrencyMismatchError on mixed currencies."""
        self._check_same_currency(other)
        return Money(dec.add(self.amount, other.amount), self.currency)

    def try_sub(self, other: Money) -> Money:
        """Subtract two Money values. Raises CurrencyMismatchError on mixed currencies."""
        self._check_same_currency(other)
        return Money(dec.sub(self.amount, other.amount), self.currency)

    def try_mul(self, factor: Decimal | str | int) -> Money:
        """Scale the amount by a factor, re-quantizing to the currency."""
        return Money(dec.mul(self.amount, _as_decimal(factor)), self.currency)

    def try_div(self, divisor: Decimal | str | int) -> Money:
        """Divide the amount. Raises DivisionByZeroError for a zero divisor."""
        divisor = _as_decimal(divisor)
        if divisor.is_zero():
            raise DivisionByZeroError()
        return Money(dec.div(self.amount, divisor), self.currency)

    def try_convert_with(
        self, rate: ExchangeRate, strategy: RoundingStrategy
    ) -> Money:
        """
        Convert to ``rate.to_currency`` rounding with ``strategy``.

        The product ``amount * rate`` is rounded once, to the target
        currency's scale.

        Raises:
            IncompatibleExchangeRateError: If the rate does not start from
                this money's currency.
            MetadataNotFoundError: If the target precision is unknown.
        """
        if not rate.is_compatible(self):
            raise IncompatibleExchangeRateError(
                rate.from_currency, rate.to_currency, self.currency
            )
        with LogContext.bind(operation="convert", currency=self.currency.code):
            scale = _ensure_scale_within_limits(rate.to_currency.decimal_places())
            product = dec.mul(self.amount, rate.rate)
            converted = dec.round_dp_with_strategy(product, scale, strategy)
            result = Money(converted, rate.to_currency)
            logger.debug(
                "money_converted",
                extra={
                    "from_currency": self.currency.code,
                    "to_currency": rate.to_currency.code,
                    "rate": dec.to_canonical_string(rate.rate),
                    "strategy": strategy.value,
                    "source_amount": dec.to_canonical_string(self.amount),
                    "converted_amount": dec.to_canonical_string(result.amount),
                },
            )
        return result

    def try_convert(self, rate: ExchangeRate) -> Money:
        """Convert using midpoint-away-from-zero rounding."""
        return self.try_convert_with(rate, RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO)

    # ------------------------------------------------------------------
    # Operators (delegate to the checked core)
    # ------------------------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.try_add(other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self.try_sub(other)

    def __neg__(self) -> Money:
        return self.try_mul(-1)

    def __abs__(self) -> Money:
        return -self if self.is_negative else self

    def __mul__(self, factor: Decimal | int | str) -> Money:
        if not isinstance(factor, (Decimal, int, str)) or isinstance(factor, bool):
            return NotImplemented
        return self.try_mul(factor)

    def __rmul__(self, factor: Decimal | int | str) -> Money:
        return self.__mul__(factor)

    def __truediv__(self, divisor: Decimal | int | str) -> Money:
        if not isinstance(divisor, (Decimal, int, str)) or isinstance(divisor, bool):
            return NotImplemented
        return self.try_div(divisor)

    def _compare_key(self, other: Money) -> tuple[Decimal, Decimal]:
        self._check_same_currency(other)
        return self.amount, other.amount

    def __lt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        a, b = self._compare_key(other)
        return a < b

    def __le__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        a, b = self._compare_key(other)
        return a <= b

    def __gt__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        a, b = self._compare_key(other)
        return a > b

    def __ge__(self, other: Money) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        a, b = self._compare_key(other)
        return a >= b

    # ------------------------------------------------------------------
    # Text and serialization
    # ------------------------------------------------------------------

    def format(self) -> str:
        """Canonical text: ``"<amount> <CODE>"`` (``"123.45 USD"``)."""
        return f"{dec.to_canonical_string(self.amount)} {self.currency.code}"

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"Money({dec.to_canonical_string(self.amount)!r}, {self.currency!r})"

    def to_dict(self) -> dict[str, str]:
        return {
            "amount": dec.to_canonical_string(self.amount),
            "currency": self.currency.to_json(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Money:
        return cls.from_canonical_str(str(data["amount"]), data["currency"])

    # ------------------------------------------------------------------
    # Locale-aware text
    # ------------------------------------------------------------------

    def localized(self, locale: Locale | str) -> LocalizedMoney:
        """Builder for locale-aware rendering (symbol shown, code hidden)."""
        return LocalizedMoney(money=self, locale=Locale.parse(locale))

    def to_localized_string(self) -> str:
        """Render with the currency's default locale."""
        return self.localized(self.currency.default_locale()).into_string()

    def format_with_locale(self, locale: Locale | str) -> str:
        """Render with an explicit locale (symbol included, code omitted)."""
        return self.localized(locale).into_string()

    def amount_string_with_locale(
        self, locale: Locale | str, fraction_digits: int
    ) -> str:
        """Render only the number with ``fraction_digits`` digits (no symbol or code)."""
        if fraction_digits < 0:
            raise ValueError(
                f"fraction digits cannot be negative, got {fraction_digits}"
            )
        return self._render_with_locale(
            Locale.parse(locale),
            include_symbol=False,
            include_code=False,
            symbol_first_override=None,
            rounding_digits=fraction_digits,
        )

    @classmethod
    def from_str_locale(
        cls,
        text: str,
        currency: Currency | str,
        locale: Locale | str,
        strict: bool = True,
    ) -> Money:
        """
        Parse localized text such as ``"$1,234.56"`` or ``"1.234,56 €"``.

        The text must already fit the currency's scale; no rounding happens.
        """
        currency = _as_currency(currency)
        amount = parse_localized_str(text, currency, Locale.parse(locale), strict)
        return cls(amount=amount, currency=currency)

    @classmethod
    def from_default_locale_str(cls, text: str, currency: Currency | str) -> Money:
        """Parse localized text using the currency's default locale."""
        from money_kernel.config import get_config

        currency = _as_currency(currency)
        return cls.from_str_locale(
            text,
            currency,
            currency.default_locale(),
            strict=get_config().strict_locale_parsing,
        )

    def _render_with_locale(
        self,
        locale: Locale,
        include_symbol: bool,
        include_code: bool,
        symbol_first_override: bool | None,
        rounding_digits: int,
    ) -> str:
        symbol = self.currency.symbol() if include_symbol else None
        if include_code and symbol and symbol.upper() == self.currency.code.upper():
            symbol = None

        symbol_first = (
            symbol_first_override
            if symbol_first_override is not None
            else self.currency.symbol_first()
        )
        positions = build_positions(
            has_symbol=bool(symbol),
            symbol_first=symbol_first,
            symbol_spacing=bool(symbol) and len(symbol) > 1,
            include_code=include_code,
        )
        params = FormatParams(
            positions=positions,
            rounding_digits=rounding_digits,
            symbol=symbol,
            code=self.currency.code if include_code else None,
        )
        return Formatter(self.amount, locale, params).format()


@dataclass(frozen=True, slots=True)
class LocalizedMoney:
    """
    Locale-aware rendering view returned by ``Money.localized``.

    Each option returns a new view:

        money.localized(Locale.EN_US).with_code().into_string()
        # "$1,234.56 USD"

    ``str()`` never raises; it falls back to the canonical ``Money.format``.
    """

    money: Money
    locale: Locale
    include_symbol: bool = True
    include_code: bool = False
    symbol_first_override: bool | None = None
    digits: int | None = None

    def with_code(self) -> LocalizedMoney:
        return replace(self, include_code=True)

    def without_symbol(self) -> LocalizedMoney:
        return replace(self, include_symbol=False)

    def symbol_first(self, first: bool) -> LocalizedMoney:
        return replace(self, symbol_first_override=first)

    def fraction_digits(self, digits: int) -> LocalizedMoney:
        if digits < 0:
            raise ValueError(f"fraction digits cannot be negative, got {digits}")
        return replace(self, digits=digits)

    def into_string(self) -> str:
        """
        Render according to the configured options.

        Raises:
            MetadataNotFoundError: If no digit count was given and the
                currency precision is unknown.
            InvalidAmountFormatError: If the value cannot be shown with the
                requested digits.
        """
        digits = (
            self.digits if self.digits is not None else self.money.currency.decimal_places()
        )
        return self.money._render_with_locale(
            self.locale,
            include_symbol=self.include_symbol,
            include_code=self.include_code,
            symbol_first_override=self.symbol_first_override,
            rounding_digits=digits,
        )

    def __str__(self) -> str:
        try:
            return self.into_string()
        except MoneyKernelError:
            return self.money.format()


@dataclass(frozen=True, slots=True)
class ExchangeRate:
    """
    Exchange rate between two currencies.

    Contract:
        1 unit of from_currency = rate units of to_currency. Validated on
        construction: rate must be positive and the currencies must differ.

    Guarantees:
        - Immutable and hashable
        - rate is always a positive Decimal (never float)
        - Conversions through Money.try_convert check the source currency

    Non-goals:
        - Does NOT store effective dates or sources
        - Does NOT triangulate cross rates
    """

    from_currency: Currency
    to_currency: Currency
    rate: Decimal

    def __post_init__(self) -> None:
        from_currency = _as_currency(self.from_currency)
        to_currency = _as_currency(self.to_currency)
        rate = _as_decimal(self.rate)

        if from_currency == to_currency:
            raise InvalidExchangeRateError(
                rate, f"source and target currency are both {from_currency}"
            )
        if rate <= 0:
            raise InvalidExchangeRateError(rate, "rate must be positive")

        object.__setattr__(self, "from_currency", from_currency)
        object.__setattr__(self, "to_currency", to_currency)
        object.__setattr__(self, "rate", rate)

    @classmethod
    def of(
        cls,
        from_currency: Currency | str,
        to_currency: Currency | str,
        rate: Decimal | str | int,
    ) -> ExchangeRate:
        """Factory method for creating ExchangeRate."""
        return cls(from_currency=from_currency, to_currency=to_currency, rate=rate)

    def inverse(self) -> ExchangeRate:
        """
        Get the inverse rate.

        If this rate is USD->EUR at 0.85, inverse is EUR->USD at 1/0.85.
        """
        return ExchangeRate(
            from_currency=self.to_currency,
            to_currency=self.from_currency,
            rate=dec.div(dec.one(), self.rate),
        )

    def is_compatible(self, money: Money) -> bool:
        """True if ``money`` is denominated in this rate's source currency."""
        return money.currency == self.from_currency

    def convert(
        self,
        money: Money,
        strategy: RoundingStrategy = RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO,
    ) -> Money:
        return money.try_convert_with(self, strategy)

    @property
    def pair(self) -> tuple[str, str]:
        """Get the currency pair as a tuple."""
        return (self.from_currency.code, self.to_currency.code)

    def to_dict(self) -> dict[str, str]:
        return {
            "from": self.from_currency.to_json(),
            "to": self.to_currency.to_json(),
            "rate": dec.to_canonical_string(self.rate),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExchangeRate:
        return cls(
            from_currency=data["from"],
            to_currency=data["to"],
            rate=str(data["rate"]),
        )

    def __str__(self) -> str:
        return (
            f"{self.from_currency}/{self.to_currency} = "
            f"{dec.to_canonical_string(self.rate)}"
        )

    def __repr__(self) -> str:
        return (
            f"ExchangeRate({self.from_currency!r}, "
            f"{self.to_currency!r}, {dec.to_canonical_string(self.rate)!r})"
        )
