"""
Canonical code normalization.

One function produces the canonical token used everywhere a currency code is
parsed, stored as a registry key, displayed or serialized. Sharing it keeps
equality, lookups and round trips consistent.

Canonical form is ``[A-Z0-9]+(?:_[A-Z0-9]+)*``:

    canonicalize("usd")                  -> "USD"
    canonicalize("S&P 500")              -> "S_P_500"
    canonicalize("  multiple   spaces ") -> "MULTIPLE_SPACES"
    canonicalize("!@#")                  -> ""

Only ASCII letters and digits are kept. Every other character, including
non-ASCII letters, acts as a separator. Runs of separators collapse into a
single underscore and leading/trailing separators are dropped.
"""

from __future__ import annotations

import re

from money_kernel.exceptions import InvalidCurrencyError

_CANONICAL_RE = re.compile(r"[A-Z0-9]+(?:_[A-Z0-9]+)*")
_SEPARATOR_RUN_RE = re.compile(r"[^A-Z0-9]+")


def is_canonical(value: str) -> bool:
    """Return True if ``value`` is already in canonical form."""
    return _CANONICAL_RE.fullmatch(value) is not None


def canonicalize(value: str) -> str:
    """Normalize ``value`` to its canonical token (possibly empty)."""
    if is_canonical(value):
        return value
    upper = "".join(ch.upper() if ch.isascii() else " " for ch in value)
    return _SEPARATOR_RUN_RE.sub("_", upper).strip("_")


def canonical_code(value: str) -> str:
    """
    Canonicalize ``value`` and reject empty results.

    Raises:
        InvalidCurrencyError: If the value canonicalizes to an empty token.
    """
    token = canonicalize(value)
    if not token:
        raise InvalidCurrencyError(value)
    return token
