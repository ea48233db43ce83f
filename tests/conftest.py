"""
Pytest fixtures for the money kernel test suite.

Provides:
- An isolated currency metadata store per test (custom entries never leak)
- Clean logging and config state per test
- A ``backend`` fixture running a test against both decimal backends
- Log capture through the structured JSON formatter
"""

import json
import logging
from io import StringIO

import pytest

from money_kernel.config import reset_config
from money_kernel.domain.currency_metadata import isolated_metadata_store
from money_kernel.domain.decimal_backend import (
    ArbitraryPrecisionBackend,
    FixedPrecisionBackend,
    get_active_backend,
    set_active_backend,
)
from money_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


@pytest.fixture(autouse=True)
def metadata_store():
    """Every test runs against a fresh store sharing the bundled built-ins."""
    with isolated_metadata_store() as store:
        yield store


@pytest.fixture(autouse=True)
def _restore_backend():
    """Tests may swap the decimal backend; put the previous one back."""
    previous = get_active_backend()
    yield
    set_active_backend(previous)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()


@pytest.fixture
def fresh_config():
    """Drop the cached config before and after the test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(params=["fixed", "arbitrary"])
def backend(request):
    """Run the test once per decimal backend."""
    instance = (
        FixedPrecisionBackend() if request.param == "fixed" else ArbitraryPrecisionBackend()
    )
    set_active_backend(instance)
    return instance


@pytest.fixture
def fixed_backend():
    instance = FixedPrecisionBackend()
    set_active_backend(instance)
    return instance


@pytest.fixture
def arbitrary_backend():
    instance = ArbitraryPrecisionBackend()
    set_active_backend(instance)
    return instance


class LogCapture:
    """Collects JSON log lines emitted under the money_kernel logger."""

    def __init__(self, stream: StringIO):
        self._stream = stream

    def records(self) -> list[dict]:
        lines = self._stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    def messages(self) -> list[str]:
        return [record["message"] for record in self.records()]

    def find(self, message: str) -> list[dict]:
        return [record for record in self.records() if record["message"] == message]


@pytest.fixture
def log_capture():
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    configure_logging(handler=handler, level=logging.DEBUG)
    return LogCapture(stream)
