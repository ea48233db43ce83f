"""
Decimal Backend Abstraction (``money_kernel.domain.decimal_backend``).

Responsibility
--------------
Owns every numeric primitive the money kernel uses: parsing decimal text,
constants, exact construction from minor units, rounding with an explicit
strategy, canonical string rendering and arithmetic. Two interchangeable
backends implement the same interface; exactly one is active per process.

Architecture position
---------------------
**Kernel > Domain** -- pure numeric layer below the currency model. It
reads ``money_kernel.config`` once to pick the initial backend and has no
other dependencies.

    FixedPrecisionBackend ("fixed")
        28 significant digits, scale at most 28, magnitude below 10^29.
        Arithmetic results that need more digits are rounded half-even;
        values that cannot fit raise ConversionError.

    ArbitraryPrecisionBackend ("arbitrary")
        Exact addition, subtraction and multiplication. Non-terminating
        division is carried to 100 significant digits.

Both backends produce ``decimal.Decimal`` values, so the public API and
serialized forms never depend on which one is active.

Invariants enforced
-------------------
* Scientific notation, NaN, Infinity and underscores are never parsed.
* ``to_canonical_string`` never emits an exponent or trailing fraction
  zeros, and renders every zero as ``"0"``.
* ``from_minor_units`` is exact or raises; it never rounds.

Failure modes
-------------
* ``ConversionError`` -- value outside the active backend's capacity, or a
  minor-unit integer outside the signed 128-bit range.
* ``ValueError`` -- unknown backend name passed to ``set_active_backend``.
"""

from __future__ import annotations

import re
import threading
from abc import ABC, abstractmethod
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Context,
    Decimal,
    InvalidOperation,
)
from enum import Enum
from typing import ClassVar

from money_kernel.exceptions import ConversionError
from money_kernel.logging_config import get_logger

logger = get_logger("domain.decimal_backend")

# Largest scale the fixed backend can represent.
MAX_DECIMAL_PRECISION = 28

# Largest scale usable for minor-unit integer conversions (10^18 fits i64).
MAX_MINOR_UNIT_DECIMALS = 18

MIN_MINOR_UNITS = -(2**127)
MAX_MINOR_UNITS = 2**127 - 1

ARBITRARY_DIVISION_PRECISION = 100

_DECIMAL_TEXT_RE = re.compile(r"-?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# Wide context used where a result must be exact.
_EXACT_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


class RoundingStrategy(str, Enum):
    """Rounding policy for money operations."""

    MIDPOINT_NEAREST_EVEN = "midpoint_nearest_even"
    MIDPOINT_AWAY_FROM_ZERO = "midpoint_away_from_zero"
    MIDPOINT_TOWARD_ZERO = "midpoint_toward_zero"
    TO_ZERO = "to_zero"
    AWAY_FROM_ZERO = "away_from_zero"
    TO_NEGATIVE_INFINITY = "to_negative_infinity"
    TO_POSITIVE_INFINITY = "to_positive_infinity"

    @property
    def decimal_rounding(self) -> str:
        """The ``decimal`` module rounding constant for this strategy."""
        return _DECIMAL_ROUNDING[self]


_DECIMAL_ROUNDING: dict[RoundingStrategy, str] = {
    RoundingStrategy.MIDPOINT_NEAREST_EVEN: ROUND_HALF_EVEN,
    RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO: ROUND_HALF_UP,
    RoundingStrategy.MIDPOINT_TOWARD_ZERO: ROUND_HALF_DOWN,
    RoundingStrategy.TO_ZERO: ROUND_DOWN,
    RoundingStrategy.AWAY_FROM_ZERO: ROUND_UP,
    RoundingStrategy.TO_NEGATIVE_INFINITY: ROUND_FLOOR,
    RoundingStrategy.TO_POSITIVE_INFINITY: ROUND_CEILING,
}


class DecimalBackend(ABC):
    """
    Strategy interface for decimal arithmetic.

    Subclasses decide capacity (``max_precision``) and how results that
    exceed it are handled (``fit``). Everything else is shared.
    """

    name: ClassVar[str]
    max_precision: ClassVar[int | None]

    @abstractmethod
    def fit(self, value: Decimal) -> Decimal:
        """Bring ``value`` within capacity, rounding or raising ConversionError."""

    @abstractmethod
    def div(self, a: Decimal, b: Decimal) -> Decimal:
        """Divide ``a`` by a non-zero ``b``."""

    def parse(self, text: str) -> Decimal | None:
        if _DECIMAL_TEXT_RE.fullmatch(text) is None:
            return None
        try:
            return self.fit(Decimal(text))
        except ConversionError:
            return None

    def add(self, a: Decimal, b: Decimal) -> Decimal:
        return self.fit(_EXACT_CONTEXT.add(a, b))

    def sub(self, a: Decimal, b: Decimal) -> Decimal:
        return self.fit(_EXACT_CONTEXT.subtract(a, b))

    def mul(self, a: Decimal, b: Decimal) -> Decimal:
        return self.fit(_EXACT_CONTEXT.multiply(a, b))

    def round_dp(
        self, value: Decimal, scale: int, strategy: RoundingStrategy
    ) -> Decimal:
        """Round ``value`` to ``scale`` fractional digits using ``strategy``."""
        exponent = Decimal(1).scaleb(-scale)
        try:
            rounded = value.quantize(
                exponent, rounding=strategy.decimal_rounding, context=_EXACT_CONTEXT
            )
        except InvalidOperation as exc:
            raise ConversionError(
                f"cannot round {value} to {scale} decimal places"
            ) from exc
        return self.fit(rounded)

    def from_minor_units(self, value: int, scale: int) -> Decimal:
        """Build ``value * 10**-scale`` exactly."""
        if not MIN_MINOR_UNITS <= value <= MAX_MINOR_UNITS:
            raise ConversionError(
                f"minor units {value} outside the signed 128-bit range"
            )
        exact = Decimal(value).scaleb(-scale, context=_EXACT_CONTEXT)
        fitted = self.fit(exact)
        if fitted != exact:
            raise ConversionError(
                f"minor units {value} at scale {scale} exceed {self.name} backend capacity"
            )
        return fitted


class FixedPrecisionBackend(DecimalBackend):
    """28-digit backend with a bounded exponent."""

    name = "fixed"
    max_precision = MAX_DECIMAL_PRECISION

    def __init__(self) -> None:
        self._context = Context(
            prec=MAX_DECIMAL_PRECISION,
            rounding=ROUND_HALF_EVEN,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )
        self._min_exponent = Decimal(1).scaleb(-MAX_DECIMAL_PRECISION)

    def fit(self, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ConversionError(f"non-finite value {value}")
        if value.is_zero():
            if value.as_tuple().exponent < -MAX_DECIMAL_PRECISION:
                return Decimal((0, (0,), -MAX_DECIMAL_PRECISION))
            return value
        rounded = self._context.plus(value)
        if rounded.adjusted() > MAX_DECIMAL_PRECISION:
            raise ConversionError(
                f"value {value} exceeds fixed backend capacity"
            )
        if rounded.as_tuple().exponent < -MAX_DECIMAL_PRECISION:
            rounded = rounded.quantize(
                self._min_exponent, rounding=ROUND_HALF_EVEN, context=_EXACT_CONTEXT
            )
        return rounded

    def div(self, a: Decimal, b: Decimal) -> Decimal:
        return self.fit(self._context.divide(a, b))


class ArbitraryPrecisionBackend(DecimalBackend):
    """Exact backend; only division is bounded."""

    name = "arbitrary"
    max_precision = None

    def __init__(self) -> None:
        self._division_context = Context(
            prec=ARBITRARY_DIVISION_PRECISION,
            rounding=ROUND_HALF_EVEN,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
        )

    def fit(self, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ConversionError(f"non-finite value {value}")
        return value

    def div(self, a: Decimal, b: Decimal) -> Decimal:
        return self._division_context.divide(a, b)


_BACKENDS: dict[str, type[DecimalBackend]] = {
    FixedPrecisionBackend.name: FixedPrecisionBackend,
    ArbitraryPrecisionBackend.name: ArbitraryPrecisionBackend,
}

_active_backend: DecimalBackend | None = None
_backend_lock = threading.Lock()


def create_backend(name: str) -> DecimalBackend:
    """Instantiate a backend by name (``"fixed"`` or ``"arbitrary"``)."""
    try:
        return _BACKENDS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown decimal backend {name!r}. Valid backends are: {sorted(_BACKENDS)}"
        ) from None


def get_active_backend() -> DecimalBackend:
    """Return the active backend, selecting it from config on first use."""
    global _active_backend
    with _backend_lock:
        if _active_backend is None:
            from money_kernel.config import get_config

            _active_backend = create_backend(get_config().decimal_backend)
            logger.info(
                "decimal_backend_selected",
                extra={
                    "backend": _active_backend.name,
                    "max_precision": _active_backend.max_precision,
                    "source": "config",
                },
            )
        return _active_backend


def set_active_backend(backend: DecimalBackend | str | None) -> DecimalBackend | None:
    """
    Swap the active backend and return the previous one.

    Passing None clears the selection so the next use re-reads config.
    Intended for tests and process start-up; values created under one
    backend remain valid Decimals under the other.
    """
    global _active_backend
    if isinstance(backend, str):
        backend = create_backend(backend)
    with _backend_lock:
        previous = _active_backend
        _active_backend = backend
    if backend is not None:
        logger.info(
            "decimal_backend_selected",
            extra={
                "backend": backend.name,
                "max_precision": backend.max_precision,
                "source": "explicit",
            },
        )
    return previous


# ---------------------------------------------------------------------------
# Module-level API delegating to the active backend
# ---------------------------------------------------------------------------


def parse_decimal(text: str) -> Decimal | None:
    """
    Parse decimal text with the active backend.

    Whitespace is trimmed and a single leading ``+`` is accepted. Empty
    input, scientific notation and anything other than an optional sign
    followed by digits with an optional fraction return None.
    """
    trimmed = text.strip()
    if not trimmed or "e" in trimmed or "E" in trimmed:
        return None
    if trimmed.startswith("+"):
        trimmed = trimmed[1:]
    return get_active_backend().parse(trimmed)


def zero() -> Decimal:
    return Decimal(0)


def one() -> Decimal:
    return Decimal(1)


def from_minor_units(value: int, scale: int) -> Decimal:
    """Build a decimal from an integer count of minor units and a scale."""
    return get_active_backend().from_minor_units(value, scale)


def to_minor_units(value: Decimal, scale: int) -> int:
    """
    Exact inverse of ``from_minor_units``: ``value * 10**scale`` as an int.

    Raises:
        ConversionError: If the product is not integral or leaves the signed
            128-bit range.
    """
    scaled = value.scaleb(scale, context=_EXACT_CONTEXT)
    if scaled != scaled.to_integral_value(context=_EXACT_CONTEXT):
        raise ConversionError(f"{value} is not a whole number of 10^-{scale} units")
    units = int(scaled)
    if not MIN_MINOR_UNITS <= units <= MAX_MINOR_UNITS:
        raise ConversionError(f"minor units {units} outside the signed 128-bit range")
    return units


def round_dp_with_strategy(
    value: Decimal, scale: int, strategy: RoundingStrategy
) -> Decimal:
    """Round a decimal to ``scale`` places using ``strategy``."""
    return get_active_backend().round_dp(value, scale, strategy)


def add(a: Decimal, b: Decimal) -> Decimal:
    return get_active_backend().add(a, b)


def sub(a: Decimal, b: Decimal) -> Decimal:
    return get_active_backend().sub(a, b)


def mul(a: Decimal, b: Decimal) -> Decimal:
    return get_active_backend().mul(a, b)


def div(a: Decimal, b: Decimal) -> Decimal:
    return get_active_backend().div(a, b)


def to_canonical_string(value: Decimal) -> str:
    """
    Render ``value`` without exponent or trailing fractional zeros.

        Decimal("100.00")  -> "100"
        Decimal("1.2300")  -> "1.23"
        Decimal("-0.0")    -> "0"
        Decimal("1E+3")    -> "1000"
    """
    if value.is_zero():
        return "0"
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
