"""
Pytest configuration for the instrumentation benchmark tests.

Unit tests drive the harness with deterministic fake operations and fake
executors. Integration tests (tests/integration) need a reachable PostgreSQL
server and skip otherwise.
"""

import pytest

from otelsql_bench.config import BenchmarkConfiguration
from otelsql_bench.exceptions import UnitOfWorkError


class FakeExecutor:
    """Executor double: fixed elapsed time per invocation, records lifecycle."""

    def __init__(self, name, elapsed_ns=1000, fail_after=None):
        self.name = name
        self.elapsed_ns = elapsed_ns
        self.fail_after = fail_after
        self.calls = 0
        self.entered = False
        self.closed = False

    def timed_execute(self):
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise UnitOfWorkError(f"{self.name}: connection reset")
        return self.elapsed_ns

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True


@pytest.fixture
def small_config():
    """Window of 5, tolerance 5%, record size 3."""
    return BenchmarkConfiguration(window_size=5, tolerance=0.05, record_size=3)


@pytest.fixture
def constant_operation():
    """Factory for operations returning the same duration every call."""
    def make(duration):
        calls = []

        def operation():
            calls.append(duration)
            return duration

        operation.calls = calls
        return operation

    return make


@pytest.fixture
def window_operation():
    """
    Factory for operations returning one constant value per window.

    make([100, 200], window_size=5) yields 100 five times, then 200 five times.
    """
    def make(window_values, window_size):
        values = iter([v for v in window_values for _ in range(window_size)])
        return lambda: next(values)

    return make


@pytest.fixture
def fake_executor():
    """The FakeExecutor class, for building subjects in runner tests."""
    return FakeExecutor
