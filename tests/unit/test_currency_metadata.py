"""
Tests for the currency metadata registry.

Custom entries shadow built-ins, are validated against the decimal precision
ceiling and the minor-unit limit, and are removed without touching built-ins.
"""

from decimal import Decimal

import pytest

from money_kernel.domain.currency_metadata import (
    CurrencyMetadata,
    CurrencyMetadataStore,
    clear_currency_metadata,
    currency_metadata,
    get_metadata_store,
    install_metadata_store,
    isolated_metadata_store,
    load_builtin_metadata,
    set_currency_metadata,
    try_normalize_currency_code,
)
from money_kernel.domain.locale import Locale
from money_kernel.domain.values import BTC, Currency, CurrencyKind, Money
from money_kernel.exceptions import (
    ExceedsDecimalPrecisionError,
    ExceedsMinorUnitScaleError,
    InvalidCurrencyError,
    MetadataNotFoundError,
    MinorUnitError,
)
from money_kernel.logging_config import LogContext


class TestBuiltinMetadata:
    """Bundled built-in table."""

    def test_iso_display_entries(self):
        usd = currency_metadata("usd")
        assert usd is not None
        assert usd.symbol == "$"
        assert usd.symbol_first
        assert usd.default_locale is Locale.EN_US

    def test_token_overrides(self):
        expected = {
            "USDC": 6, "USDT": 6, "BNB": 8, "ADA": 6, "SOL": 9, "XRP": 6, "DOT": 10,
            "DOGE": 8, "AVAX": 8, "LINK": 8, "LTC": 8, "MATIC": 8, "UNI": 8,
        }
        for code, decimals in expected.items():
            metadata = currency_metadata(code)
            assert metadata is not None, code
            assert metadata.minor_units == decimals

    def test_no_entries_for_exponentless_iso_codes(self):
        for code in ["XAU", "XAG", "XPD", "XPT", "XDR", "XSU", "XTS", "XUA", "XXX"]:
            assert currency_metadata(code) is None

    def test_lookup_canonicalizes(self):
        assert currency_metadata(" usdc ") == currency_metadata("USDC")

    def test_unknown_code(self):
        assert currency_metadata("NOT_REGISTERED") is None

    def test_builtin_file_rejects_duplicates(self, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text(
            "currencies:\n"
            "  - {code: ABC, full_name: One, minor_units: 2}\n"
            "  - {code: abc, full_name: Two, minor_units: 2}\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="duplicate"):
            load_builtin_metadata(path)

    def test_builtin_file_rejects_missing_fields(self, tmp_path):
        path = tmp_path / "missing.yaml"
        path.write_text("currencies:\n  - {code: ABC, full_name: One}\n", encoding="utf-8")
        with pytest.raises(ValueError, match="missing"):
            load_builtin_metadata(path)


class TestSetCurrencyMetadata:
    """Registering custom metadata."""

    def test_register_and_lookup(self):
        previous = set_currency_metadata(
            "cstm", "Custom", 2, symbol="¤", symbol_first=False, default_locale=Locale.EN_EU
        )
        assert previous is None
        metadata = currency_metadata("CSTM")
        assert metadata == CurrencyMetadata(
            code="CSTM",
            full_name="Custom",
            minor_units=2,
            symbol="¤",
            symbol_first=False,
            default_locale=Locale.EN_EU,
        )

    def test_replacement_returns_prior_custom_entry(self):
        set_currency_metadata("TOK", "Token", 4)
        previous = set_currency_metadata("TOK", "Token v2", 6)
        assert previous is not None
        assert previous.full_name == "Token"
        assert currency_metadata("TOK").minor_units == 6

    def test_replacing_a_builtin_returns_none(self):
        # built-ins are not custom entries, so nothing custom was replaced
        assert set_currency_metadata("USDC", "USD Coin", 8) is None
        assert currency_metadata("USDC").minor_units == 8

    def test_quantizes_money_for_registered_code(self):
        set_currency_metadata("TOK", "Token", 4)
        assert Money.of("1.23456", "TOK").amount == Decimal("1.2346")

    def test_xau_shadowing_and_clear(self):
        with pytest.raises(MetadataNotFoundError):
            Currency("XAU").decimal_places()

        set_currency_metadata("XAU", "Gold", 3)
        assert Currency("XAU").decimal_places() == 3

        removed = clear_currency_metadata("XAU")
        assert removed is not None and removed.full_name == "Gold"
        with pytest.raises(MetadataNotFoundError):
            Currency("XAU").decimal_places()

    def test_clear_keeps_builtin(self):
        set_currency_metadata("USDC", "Shadow", 2)
        clear_currency_metadata("USDC")
        assert currency_metadata("USDC").minor_units == 6
        assert clear_currency_metadata("USDC") is None

    def test_eighteen_minor_units_accepted(self, backend):
        set_currency_metadata("DEEP", "Deep", 18)
        assert Currency("DEEP").decimal_places() == 18

    def test_nineteen_minor_units_exceed_scale(self, backend):
        with pytest.raises(ExceedsMinorUnitScaleError) as exc_info:
            set_currency_metadata("DEEP", "Deep", 19)
        assert exc_info.value.decimals == 19
        assert exc_info.value.limit == 18
        assert exc_info.value.code == "EXCEEDS_MINOR_UNIT_SCALE"

    def test_precision_ceiling_checked_first(self, backend):
        with pytest.raises(ExceedsDecimalPrecisionError) as exc_info:
            set_currency_metadata("DEEP", "Deep", 29)
        assert exc_info.value.limit == 28

    def test_minor_unit_errors_share_base(self, backend):
        with pytest.raises(MinorUnitError):
            set_currency_metadata("DEEP", "Deep", 40)

    def test_negative_minor_units_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            set_currency_metadata("NEG", "Negative", -1)

    def test_empty_code_rejected(self):
        with pytest.raises(InvalidCurrencyError):
            set_currency_metadata("!!!", "Nothing", 2)

    def test_rejected_metadata_leaves_registry_unchanged(self):
        with pytest.raises(ExceedsMinorUnitScaleError):
            set_currency_metadata("TOK", "Token", 25)
        assert currency_metadata("TOK") is None

    def test_unknown_locale_rejected(self):
        from money_kernel.exceptions import UnsupportedLocaleError

        with pytest.raises(UnsupportedLocaleError):
            set_currency_metadata("TOK", "Token", 2, default_locale="fr-FR")

    def test_registration_is_logged(self, log_capture):
        set_currency_metadata("TOK", "Token", 4)
        records = log_capture.find("currency_metadata_registered")
        assert records[-1]["code"] == "TOK"
        assert records[-1]["minor_units"] == 4
        assert records[-1]["replaced"] is False
        assert records[-1]["operation"] == "register_metadata"
        assert records[-1]["currency"] == "TOK"
        assert LogContext.get_all() == {}

    def test_rejection_is_logged_as_warning(self, log_capture):
        with pytest.raises(ExceedsMinorUnitScaleError):
            set_currency_metadata("TOK", "Token", 19)
        records = log_capture.find("currency_metadata_rejected")
        assert records[-1]["level"] == "WARNING"
        assert records[-1]["error_code"] == "EXCEEDS_MINOR_UNIT_SCALE"
        assert records[-1]["operation"] == "register_metadata"
        assert LogContext.get_all() == {}


class TestMetadataStores:
    """Store injection and isolation."""

    def test_isolated_store_discards_custom_entries(self):
        with isolated_metadata_store():
            set_currency_metadata("TEMP", "Temporary", 2)
            assert currency_metadata("TEMP") is not None
        assert currency_metadata("TEMP") is None

    def test_isolated_store_keeps_builtins(self):
        with isolated_metadata_store() as store:
            assert store.get("USD") is not None
            assert store.custom_codes() == frozenset()

    def test_install_returns_previous(self):
        empty = CurrencyMetadataStore()
        previous = install_metadata_store(empty)
        try:
            assert get_metadata_store() is empty
            assert currency_metadata("USD") is None
        finally:
            install_metadata_store(previous)

    def test_store_tiers(self):
        builtin = CurrencyMetadata("ABC", "Built in", 2)
        store = CurrencyMetadataStore({"ABC": builtin})
        custom = CurrencyMetadata("ABC", "Custom", 4)

        assert store.put(custom) is None
        assert store.get("abc") is custom
        assert store.builtin("ABC") is builtin
        assert store.remove("ABC") is custom
        assert store.get("ABC") is builtin
        assert store.builtin_codes() == frozenset({"ABC"})


class TestCurrencyMetadataValue:
    """CurrencyMetadata normalization."""

    def test_normalizes_fields(self):
        metadata = CurrencyMetadata("my coin", "My Coin", 3, symbol="", default_locale="en_in")
        assert metadata.code == "MY_COIN"
        assert metadata.symbol is None
        assert metadata.default_locale is Locale.EN_IN

    @pytest.mark.parametrize("minor_units", [-1, 29, True, "2"])
    def test_invalid_minor_units(self, minor_units):
        with pytest.raises(ValueError):
            CurrencyMetadata("ABC", "Abc", minor_units)

    def test_dict_round_trip(self):
        metadata = CurrencyMetadata("ABC", "Abc", 2, symbol="A", symbol_first=False)
        assert CurrencyMetadata.from_dict(metadata.to_dict()) == metadata


class TestNormalizeCurrencyCode:
    def test_returns_parsed_currency(self):
        assert try_normalize_currency_code("usd") == Currency("USD")
        assert try_normalize_currency_code("btc") == BTC
        assert try_normalize_currency_code("some coin").kind is CurrencyKind.OTHER

    def test_empty_code_raises(self):
        with pytest.raises(InvalidCurrencyError):
            try_normalize_currency_code("  ")
