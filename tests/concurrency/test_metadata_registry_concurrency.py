"""
Concurrency tests for the currency metadata registry.

Readers run while writers register and clear custom entries. Every read
must observe either the built-in entry or one complete custom entry, never
a partial one, and the last write must win.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from money_kernel.domain.currency_metadata import (
    clear_currency_metadata,
    currency_metadata,
    set_currency_metadata,
)
from money_kernel.domain.values import Currency, Money

pytestmark = pytest.mark.slow

THREADS = 8
ITERATIONS = 200


class TestConcurrentRegistry:
    def test_readers_see_whole_entries(self):
        """USDC flips between its built-in and a custom entry under load."""
        valid = {
            ("USD Coin", 6, None),
            ("Shadow A", 4, "A"),
            ("Shadow B", 8, "B"),
        }
        stop = threading.Event()
        seen: list[tuple] = []
        errors: list[Exception] = []

        def writer(name, decimals, symbol):
            for _ in range(ITERATIONS):
                set_currency_metadata("USDC", name, decimals, symbol=symbol)
                clear_currency_metadata("USDC")

        def reader():
            try:
                while True:
                    m = currency_metadata("USDC")
                    seen.append((m.full_name, m.minor_units, m.symbol))
                    if stop.is_set():
                        break
            except Exception as exc:
                errors.append(exc)

        readers = [threading.Thread(target=reader) for _ in range(THREADS)]
        for t in readers:
            t.start()
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(writer, "Shadow A", 4, "A"),
                pool.submit(writer, "Shadow B", 8, "B"),
            ]
            for f in futures:
                f.result()
        stop.set()
        for t in readers:
            t.join(timeout=10)

        assert not errors
        assert seen
        assert set(seen) <= valid

    def test_last_writer_wins(self):
        barrier = threading.Barrier(THREADS)

        def register(decimals):
            barrier.wait()
            set_currency_metadata("RACE", "Race", decimals)

        with ThreadPoolExecutor(max_workers=THREADS) as pool:
            list(pool.map(register, range(THREADS)))

        final = currency_metadata("RACE")
        assert final is not None
        assert final.minor_units in range(THREADS)
        assert Currency("RACE").decimal_places() == final.minor_units

    def test_money_construction_during_registration(self):
        """Money built concurrently always carries one registered precision."""
        set_currency_metadata("TOK", "Token", 2)
        stop = threading.Event()
        amounts = []

        def build():
            while True:
                amounts.append(Money.of("1.23456789", "TOK").amount)
                if stop.is_set():
                    break

        builders = [threading.Thread(target=build) for _ in range(4)]
        for t in builders:
            t.start()
        for i in range(ITERATIONS):
            set_currency_metadata("TOK", "Token", 2 if i % 2 else 6)
        stop.set()
        for t in builders:
            t.join(timeout=10)

        allowed = {-2, -6}
        assert amounts
        assert {a.as_tuple().exponent for a in amounts} <= allowed
