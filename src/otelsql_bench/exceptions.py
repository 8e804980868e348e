"""
Error taxonomy for the benchmark harness.

Every error is fatal for the subject that raised it. The runner only keeps
going past a failed subject when subject isolation is enabled.
"""


class BenchmarkError(Exception):
    """Base class for all benchmark failures."""


class EmptySampleError(BenchmarkError, ValueError):
    """A statistics function was given zero samples."""


class InvalidDurationError(BenchmarkError, ValueError):
    """A duration that is not a finite non-negative number (None, NaN, inf)."""


class NegativeDurationError(InvalidDurationError):
    """A duration below zero reached the statistics or the runner."""


class IncompleteWindowError(BenchmarkError):
    """Statistics were requested on a window that is not exactly full."""


class SubjectSetupError(BenchmarkError):
    """An executor failed to open its instrumented database handle."""


class UnitOfWorkError(BenchmarkError):
    """A single timed invocation failed (query, fetch or commit)."""


class WarmupTimeoutError(BenchmarkError):
    """Warmup did not stabilize within the configured window or time limit."""

    def __init__(self, message: str, windows: int, latest_p50=None):
        super().__init__(message)
        self.windows = windows
        self.latest_p50 = latest_p50
