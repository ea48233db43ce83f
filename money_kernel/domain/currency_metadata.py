"""
Currency Metadata Registry (``money_kernel.domain.currency_metadata``).

Responsibility
--------------
Supplies per-currency display and precision metadata (full name,
minor-unit count, symbol, symbol position, default locale) whenever the
ISO 4217 table is silent: custom provider codes, crypto tokens and ISO
codes published without an exponent (metals, funds, SDRs).

Architecture position
---------------------
**Kernel > Domain** -- consulted by ``Currency`` for precision and display
data. Depends on the decimal backend (for the precision ceilings),
the canonical code helper, the locale enum and PyYAML for loading the
bundled built-in table.

Two-tier lookup:

    lookup(code)
        |
        +-- custom table   (mutable, set_currency_metadata / clear_currency_metadata)
        |        hit -> return
        |
        +-- built-in table (immutable, loaded from currency_metadata.yaml)
                 hit -> return, miss -> None

Invariants enforced
-------------------
* Keys are canonical codes; every lookup canonicalizes first.
* Custom entries shadow built-ins for the same code; built-ins are never
  mutated and ``clear_currency_metadata`` removes only the custom entry.
* ``minor_units`` never exceeds ``MAX_DECIMAL_PRECISION`` nor
  ``MAX_MINOR_UNIT_DECIMALS``, on either backend.
* The custom table is guarded by a ReadWriteLock: readers share, writers
  are exclusive and last-writer-wins. Each lock section covers a single map
  access, so no read ever observes a half-written entry.

Failure modes
-------------
* ``ExceedsDecimalPrecisionError`` -- minor units above the 28-digit
  decimal ceiling, whichever backend is active.
* ``ExceedsMinorUnitScaleError`` -- minor units above 18.
* ``InvalidCurrencyError`` -- code canonicalizes to an empty token.
* ``ValueError`` -- negative minor units or malformed built-in YAML.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from money_kernel.domain.canonical import canonical_code, canonicalize
from money_kernel.domain.decimal_backend import (
    MAX_DECIMAL_PRECISION,
    MAX_MINOR_UNIT_DECIMALS,
)
from money_kernel.domain.locale import Locale
from money_kernel.exceptions import (
    ExceedsDecimalPrecisionError,
    ExceedsMinorUnitScaleError,
    MinorUnitError,
)
from money_kernel.logging_config import LogContext, get_logger
from money_kernel.utils.rwlock import ReadWriteLock

if TYPE_CHECKING:
    from money_kernel.domain.values import Currency

logger = get_logger("domain.currency_metadata")


@dataclass(frozen=True, slots=True)
class CurrencyMetadata:
    """
    Metadata for one currency code.

    Construction canonicalizes the code, resolves the locale tag and turns
    an empty symbol into None.
    """

    code: str
    full_name: str
    minor_units: int
    symbol: str | None = None
    symbol_first: bool = True
    default_locale: Locale = Locale.EN_US

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", canonical_code(self.code))
        object.__setattr__(self, "default_locale", Locale.parse(self.default_locale))
        if not self.symbol:
            object.__setattr__(self, "symbol", None)

        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise ValueError(
                f"minor_units must be an integer, got {type(self.minor_units).__name__}"
            )
        if not 0 <= self.minor_units <= MAX_DECIMAL_PRECISION:
            raise ValueError(
                f"minor_units must be between 0 and {MAX_DECIMAL_PRECISION}, "
                f"got {self.minor_units}"
            )
        if not self.full_name:
            raise ValueError(f"full_name cannot be empty for {self.code}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CurrencyMetadata:
        return cls(
            code=data["code"],
            full_name=data["full_name"],
            minor_units=data["minor_units"],
            symbol=data.get("symbol"),
            symbol_first=data.get("symbol_first", True),
            default_locale=data.get("default_locale", Locale.EN_US),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "full_name": self.full_name,
            "minor_units": self.minor_units,
            "symbol": self.symbol,
            "symbol_first": self.symbol_first,
            "default_locale": self.default_locale.value,
        }


def load_builtin_metadata(path: Path | str) -> dict[str, CurrencyMetadata]:
    """
    Load the built-in metadata table from YAML.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If an entry is malformed or a code appears twice.
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    entries = raw.get("currencies", [])
    if not isinstance(entries, list):
        raise ValueError(f"'currencies' in {path} must be a list")

    table: dict[str, CurrencyMetadata] = {}
    for entry in entries:
        try:
            metadata = CurrencyMetadata.from_dict(entry)
        except KeyError as exc:
            raise ValueError(
                f"currency metadata entry {entry!r} in {path} is missing {exc}"
            ) from exc
        if metadata.code in table:
            raise ValueError(f"duplicate currency metadata for {metadata.code} in {path}")
        table[metadata.code] = metadata

    logger.info(
        "currency_metadata_builtins_loaded",
        extra={"path": str(path), "count": len(table)},
    )
    return table


class CurrencyMetadataStore:
    """
    Two-tier metadata store: immutable built-ins overlaid by custom entries.

    Stores are independent objects; the module-level functions operate on
    the process-wide default store, which tests can replace with
    ``install_metadata_store`` or ``isolated_metadata_store``.
    """

    def __init__(self, builtins: Mapping[str, CurrencyMetadata] | None = None):
        self._builtins: dict[str, CurrencyMetadata] = dict(builtins or {})
        self._custom: dict[str, CurrencyMetadata] = {}
        self._lock = ReadWriteLock()

    @classmethod
    def from_yaml(cls, path: Path | str) -> CurrencyMetadataStore:
        return cls(load_builtin_metadata(path))

    def get(self, code: str) -> CurrencyMetadata | None:
        key = canonicalize(code)
        with self._lock.read():
            custom = self._custom.get(key)
        if custom is not None:
            return custom
        return self._builtins.get(key)

    def builtin(self, code: str) -> CurrencyMetadata | None:
        return self._builtins.get(canonicalize(code))

    def custom(self, code: str) -> CurrencyMetadata | None:
        key = canonicalize(code)
        with self._lock.read():
            return self._custom.get(key)

    def put(self, metadata: CurrencyMetadata) -> CurrencyMetadata | None:
        """Store a custom entry and return the custom entry it replaced."""
        with self._lock.write():
            previous = self._custom.get(metadata.code)
            self._custom[metadata.code] = metadata
        return previous

    def remove(self, code: str) -> CurrencyMetadata | None:
        key = canonicalize(code)
        with self._lock.write():
            return self._custom.pop(key, None)

    def custom_codes(self) -> frozenset[str]:
        with self._lock.read():
            return frozenset(self._custom)

    def builtin_codes(self) -> frozenset[str]:
        return frozenset(self._builtins)

    def copy_builtins(self) -> CurrencyMetadataStore:
        """New store sharing this store's built-ins with an empty custom tier."""
        return CurrencyMetadataStore(self._builtins)


# ---------------------------------------------------------------------------
# Process-wide default store
# ---------------------------------------------------------------------------

_default_store: CurrencyMetadataStore | None = None
_store_lock = threading.Lock()


def get_metadata_store() -> CurrencyMetadataStore:
    """Return the default store, loading built-ins from config on first use."""
    global _default_store
    with _store_lock:
        if _default_store is None:
            from money_kernel.config import get_config

            _default_store = CurrencyMetadataStore.from_yaml(
                get_config().builtin_metadata_path
            )
        return _default_store


def install_metadata_store(
    store: CurrencyMetadataStore | None,
) -> CurrencyMetadataStore | None:
    """
    Replace the default store and return the previous one.

    Passing None drops the default so it is rebuilt from config on next use.
    """
    global _default_store
    with _store_lock:
        previous = _default_store
        _default_store = store
    return previous


@contextmanager
def isolated_metadata_store() -> Iterator[CurrencyMetadataStore]:
    """Run a block against a fresh store with the same built-ins."""
    fresh = get_metadata_store().copy_builtins()
    previous = install_metadata_store(fresh)
    try:
        yield fresh
    finally:
        install_metadata_store(previous)


# ---------------------------------------------------------------------------
# Registry API
# ---------------------------------------------------------------------------


def validate_minor_units(minor_units: int) -> int:
    """
    Check a requested minor-unit count against the precision limits.

    The limits are the same for every decimal backend.

    Raises:
        ValueError: If ``minor_units`` is not a non-negative integer.
        ExceedsDecimalPrecisionError: If it exceeds MAX_DECIMAL_PRECISION.
        ExceedsMinorUnitScaleError: If it exceeds MAX_MINOR_UNIT_DECIMALS.
    """
    if isinstance(minor_units, bool) or not isinstance(minor_units, int):
        raise ValueError(
            f"minor_units must be an integer, got {type(minor_units).__name__}"
        )
    if minor_units < 0:
        raise ValueError(f"minor_units cannot be negative, got {minor_units}")

    if minor_units > MAX_DECIMAL_PRECISION:
        raise ExceedsDecimalPrecisionError(minor_units, MAX_DECIMAL_PRECISION)
    if minor_units > MAX_MINOR_UNIT_DECIMALS:
        raise ExceedsMinorUnitScaleError(minor_units, MAX_MINOR_UNIT_DECIMALS)
    return minor_units


def currency_metadata(code: str) -> CurrencyMetadata | None:
    """Look up metadata for ``code``: custom entry first, then built-in."""
    return get_metadata_store().get(code)


def set_currency_metadata(
    code: str,
    full_name: str,
    minor_units: int,
    symbol: str | None = None,
    symbol_first: bool = True,
    default_locale: Locale | str = Locale.EN_US,
) -> CurrencyMetadata | None:
    """
    Register or replace custom metadata for ``code``.

    Returns the custom entry that was replaced, or None. Built-in entries
    are never modified; a custom entry simply shadows them.
    """
    with LogContext.bind(operation="register_metadata", currency=str(code)):
        try:
            validate_minor_units(minor_units)
        except MinorUnitError as exc:
            logger.warning(
                "currency_metadata_rejected",
                extra={
                    "code": code,
                    "minor_units": minor_units,
                    "error_code": exc.code,
                    "limit": exc.limit,
                },
            )
            raise

        metadata = CurrencyMetadata(
            code=code,
            full_name=full_name,
            minor_units=minor_units,
            symbol=symbol,
            symbol_first=symbol_first,
            default_locale=default_locale,
        )
        previous = get_metadata_store().put(metadata)
        logger.info(
            "currency_metadata_registered",
            extra={
                "code": metadata.code,
                "minor_units": metadata.minor_units,
                "symbol": metadata.symbol,
                "default_locale": metadata.default_locale.value,
                "replaced": previous is not None,
            },
        )
        return previous


def clear_currency_metadata(code: str) -> CurrencyMetadata | None:
    """Remove the custom entry for ``code`` and return it (built-ins stay)."""
    removed = get_metadata_store().remove(code)
    if removed is not None:
        logger.info("currency_metadata_cleared", extra={"code": removed.code})
    return removed


def try_normalize_currency_code(code: str) -> Currency:
    """Parse ``code`` into a Currency (ISO, crypto or canonical other)."""
    from money_kernel.domain.values import Currency

    return Currency.parse(code)
