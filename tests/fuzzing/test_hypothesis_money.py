"""
Hypothesis-based property tests for money values.

Properties checked:
- Construction quantizes exactly once (idempotence)
- Minor units round-trip exactly
- Addition and subtraction are inverse within a currency
- Mixed-currency arithmetic is always rejected
- Inverse exchange rates multiply back to one
- Localized rendering parses back to the same value
- parse_decimal never accepts scientific notation

Round-trip and idempotence properties run once per decimal backend.
"""

from decimal import Decimal

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from money_kernel.domain import decimal_backend as dec
from money_kernel.domain.values import ExchangeRate, Money
from money_kernel.exceptions import CurrencyMismatchError

FIAT = ["USD", "EUR", "JPY", "BHD", "INR", "BYN", "GBP"]

# the metadata store and backend fixtures are safe to share across examples
FUZZ_SETTINGS = settings(
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)

amounts = st.decimals(
    min_value=Decimal("-1000000000"),
    max_value=Decimal("1000000000"),
    allow_nan=False,
    allow_infinity=False,
    places=4,
)
codes = st.sampled_from(FIAT)
minor_units = st.integers(min_value=-(10**15), max_value=10**15)
rates = st.decimals(
    min_value=Decimal("0.0001"),
    max_value=Decimal("10000"),
    allow_nan=False,
    allow_infinity=False,
    places=6,
)


class TestMoneyProperties:
    @FUZZ_SETTINGS
    @given(amount=amounts, code=codes)
    def test_quantization_is_idempotent(self, backend, amount, code):
        money = Money.of(amount, code)
        assert Money.of(money.amount, code) == money
        assert -money.amount.as_tuple().exponent == money.currency.decimal_places()

    @FUZZ_SETTINGS
    @given(units=minor_units, code=codes)
    def test_minor_units_round_trip(self, backend, units, code):
        assert Money.from_minor_units(units, code).as_minor_units() == units

    @FUZZ_SETTINGS
    @given(a=amounts, b=amounts, code=codes)
    def test_add_then_sub(self, backend, a, b, code):
        x = Money.of(a, code)
        y = Money.of(b, code)
        assert (x + y) - y == x

    @FUZZ_SETTINGS
    @given(a=amounts, b=amounts, pair=st.permutations(FIAT))
    def test_mixed_currencies_rejected(self, a, b, pair):
        x = Money.of(a, pair[0])
        y = Money.of(b, pair[1])
        with pytest.raises(CurrencyMismatchError):
            x + y
        with pytest.raises(CurrencyMismatchError):
            x - y

    @FUZZ_SETTINGS
    @given(rate=rates)
    def test_inverse_rate_product(self, rate):
        forward = ExchangeRate.of("USD", "EUR", rate)
        product = forward.rate * forward.inverse().rate
        assert abs(product - 1) < Decimal("0.000001")


class TestTextProperties:
    @pytest.mark.parametrize("code", ["USD", "EUR", "INR", "BYN"])
    @pytest.mark.parametrize("amount", ["1234.56", "-7890.12"])
    def test_locale_round_trip(self, code, amount):
        money = Money.of(amount, code)
        text = money.to_localized_string()
        assert Money.from_default_locale_str(text, code) == money

    @FUZZ_SETTINGS
    @given(amount=amounts, code=codes)
    def test_fuzzed_locale_round_trip(self, backend, amount, code):
        money = Money.of(amount, code)
        locale = money.currency.default_locale()
        text = money.format_with_locale(locale)
        assert Money.from_str_locale(text, code, locale) == money

    @FUZZ_SETTINGS
    @given(
        mantissa=st.integers(min_value=-(10**6), max_value=10**6),
        exponent=st.integers(min_value=-10, max_value=10),
        marker=st.sampled_from(["e", "E"]),
    )
    def test_scientific_notation_never_parses(self, mantissa, exponent, marker):
        assert dec.parse_decimal(f"{mantissa}{marker}{exponent}") is None

    @FUZZ_SETTINGS
    @given(amount=amounts)
    def test_canonical_string_round_trip(self, backend, amount):
        text = dec.to_canonical_string(amount)
        assert "E" not in text and "e" not in text
        assert dec.parse_decimal(text) == amount
