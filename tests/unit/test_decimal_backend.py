"""
Tests for the decimal backend abstraction.

Both backends must look identical to callers: same parsing rules, same
canonical strings, same rounding. They differ only in capacity.
"""

from decimal import Decimal

import pytest

from money_kernel.domain import decimal_backend as dec
from money_kernel.domain.decimal_backend import (
    MAX_DECIMAL_PRECISION,
    ArbitraryPrecisionBackend,
    FixedPrecisionBackend,
    RoundingStrategy,
    create_backend,
    get_active_backend,
    set_active_backend,
)
from money_kernel.exceptions import ConversionError


class TestParseDecimal:
    """parse_decimal accepts plain decimal text only."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", Decimal("123.45")),
            ("  42  ", Decimal("42")),
            ("+7.5", Decimal("7.5")),
            ("-0.001", Decimal("-0.001")),
            ("1.", Decimal("1")),
            (".5", Decimal("0.5")),
            ("0", Decimal("0")),
        ],
    )
    def test_accepts_plain_decimals(self, backend, text, expected):
        assert dec.parse_decimal(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "1e5", "1E5", "2.5e-3", "NaN", "Infinity", "1_000", "abc", "1.2.3", "--1", "++1", "1,000", "١٢٣", "१२.३"],
    )
    def test_rejects_non_canonical_text(self, backend, text):
        assert dec.parse_decimal(text) is None

    def test_fixed_backend_rejects_values_beyond_capacity(self, fixed_backend):
        assert dec.parse_decimal("1" + "0" * 30) is None

    def test_arbitrary_backend_parses_large_values(self, arbitrary_backend):
        text = "1" + "0" * 40
        assert dec.parse_decimal(text) == Decimal(text)


class TestCanonicalString:
    """to_canonical_string never emits exponents or trailing zeros."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("100.00"), "100"),
            (Decimal("1.2300"), "1.23"),
            (Decimal("-0.0"), "0"),
            (Decimal("0E-8"), "0"),
            (Decimal("1E+3"), "1000"),
            (Decimal("0.000001"), "0.000001"),
            (Decimal("-123.450"), "-123.45"),
        ],
    )
    def test_canonical_forms(self, value, expected):
        assert dec.to_canonical_string(value) == expected


class TestRoundingStrategies:
    """Every strategy on the 1.005 midpoint and its negative."""

    @pytest.mark.parametrize(
        "strategy,positive,negative",
        [
            (RoundingStrategy.MIDPOINT_NEAREST_EVEN, "1.00", "-1.00"),
            (RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO, "1.01", "-1.01"),
            (RoundingStrategy.MIDPOINT_TOWARD_ZERO, "1.00", "-1.00"),
            (RoundingStrategy.TO_ZERO, "1.00", "-1.00"),
            (RoundingStrategy.AWAY_FROM_ZERO, "1.01", "-1.01"),
            (RoundingStrategy.TO_POSITIVE_INFINITY, "1.01", "-1.00"),
            (RoundingStrategy.TO_NEGATIVE_INFINITY, "1.00", "-1.01"),
        ],
    )
    def test_midpoint(self, backend, strategy, positive, negative):
        assert dec.round_dp_with_strategy(Decimal("1.005"), 2, strategy) == Decimal(positive)
        assert dec.round_dp_with_strategy(Decimal("-1.005"), 2, strategy) == Decimal(negative)

    def test_nearest_even_rounds_to_even_digit(self, backend):
        strategy = RoundingStrategy.MIDPOINT_NEAREST_EVEN
        assert dec.round_dp_with_strategy(Decimal("2.5"), 0, strategy) == Decimal("2")
        assert dec.round_dp_with_strategy(Decimal("3.5"), 0, strategy) == Decimal("4")

    def test_rounding_pads_scale(self, backend):
        rounded = dec.round_dp_with_strategy(
            Decimal("1.5"), 3, RoundingStrategy.MIDPOINT_AWAY_FROM_ZERO
        )
        assert str(rounded) == "1.500"


class TestMinorUnits:
    """Exact construction from integer minor units."""

    def test_from_minor_units_is_exact(self, backend):
        assert dec.from_minor_units(12345, 2) == Decimal("123.45")
        assert dec.from_minor_units(-1, 8) == Decimal("-0.00000001")
        assert dec.from_minor_units(10**19, 18) == Decimal("10")

    def test_to_minor_units_inverts(self, backend):
        assert dec.to_minor_units(Decimal("123.45"), 2) == 12345

    def test_to_minor_units_rejects_fractional_units(self, backend):
        with pytest.raises(ConversionError):
            dec.to_minor_units(Decimal("1.005"), 2)

    def test_minor_units_outside_i128_rejected(self, backend):
        with pytest.raises(ConversionError):
            dec.from_minor_units(2**127, 0)
        with pytest.raises(ConversionError):
            dec.from_minor_units(-(2**127) - 1, 0)

    def test_fixed_backend_refuses_to_round_minor_units(self, fixed_backend):
        # 39 significant digits cannot be held in 28
        with pytest.raises(ConversionError):
            dec.from_minor_units(2**127 - 1, 18)

    def test_arbitrary_backend_holds_full_i128(self, arbitrary_backend):
        value = dec.from_minor_units(2**127 - 1, 18)
        assert dec.to_minor_units(value, 18) == 2**127 - 1


class TestBackendCapacity:
    """Capacity differences between the two backends."""

    def test_fixed_backend_metadata(self):
        backend = FixedPrecisionBackend()
        assert backend.name == "fixed"
        assert backend.max_precision == MAX_DECIMAL_PRECISION

    def test_arbitrary_backend_metadata(self):
        backend = ArbitraryPrecisionBackend()
        assert backend.name == "arbitrary"
        assert backend.max_precision is None

    def test_fixed_backend_rounds_to_28_digits(self, fixed_backend):
        third = dec.div(Decimal(1), Decimal(3))
        assert len(third.as_tuple().digits) == 28

    def test_fixed_backend_overflow(self, fixed_backend):
        big = Decimal("9" * 28)
        with pytest.raises(ConversionError):
            dec.mul(big, Decimal(100))

    def test_arbitrary_backend_exact_multiplication(self, arbitrary_backend):
        big = Decimal("9" * 40)
        assert dec.mul(big, Decimal(10)) == Decimal("9" * 40 + "0")

    def test_arbitrary_division_precision(self, arbitrary_backend):
        third = dec.div(Decimal(1), Decimal(3))
        assert len(third.as_tuple().digits) == 100

    def test_constants(self, backend):
        assert dec.zero() == 0
        assert dec.one() == 1
        assert dec.add(Decimal("0.1"), Decimal("0.2")) == Decimal("0.3")
        assert dec.sub(Decimal("1"), Decimal("0.01")) == Decimal("0.99")


class TestBackendSelection:
    """Active backend selection and swapping."""

    def test_default_backend_from_config(self, fresh_config):
        set_active_backend(None)
        assert get_active_backend().name == "fixed"

    def test_set_active_backend_by_name_returns_previous(self, fixed_backend):
        previous = set_active_backend("arbitrary")
        assert previous is fixed_backend
        assert get_active_backend().name == "arbitrary"

    def test_unknown_backend_name_rejected(self):
        with pytest.raises(ValueError, match="Unknown decimal backend"):
            create_backend("float")

    def test_selection_is_logged(self, log_capture):
        set_active_backend("arbitrary")
        records = log_capture.find("decimal_backend_selected")
        assert records
        assert records[-1]["backend"] == "arbitrary"
        assert records[-1]["source"] == "explicit"
