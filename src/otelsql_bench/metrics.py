"""
Latency statistics for benchmark windows.

Calculates per-window metrics:
- p(50): median latency, upper-biased for even window sizes
- p(99): 99th percentile, linear interpolation between neighbouring ranks
- avg: arithmetic mean

Durations are integer nanoseconds in normal operation. Integer input keeps
integer (truncating) arithmetic so reports stay in whole nanoseconds; float
input returns floats.
"""

import math
from typing import Dict, List, Sequence, Union

import numpy as np

from otelsql_bench.exceptions import (
    EmptySampleError,
    IncompleteWindowError,
    InvalidDurationError,
    NegativeDurationError,
)

Duration = Union[int, float]


def _sorted_samples(samples: Sequence[Duration]) -> np.ndarray:
    # np.sort returns a new array, the caller's sequence keeps its order
    ordered = np.sort(np.asarray(samples))
    if ordered.size == 0:
        raise EmptySampleError("no sample")
    if not np.isfinite(ordered).all():
        raise InvalidDurationError("undefined duration in samples")
    if ordered[0] < 0:
        raise NegativeDurationError(f"negative duration in samples: {ordered[0]}")
    return ordered


def _is_integral(ordered: np.ndarray) -> bool:
    return bool(np.issubdtype(ordered.dtype, np.integer))


def median(samples: Sequence[Duration]) -> Duration:
    """
    Median (p50) of a window.

    Odd length returns the middle element. Even length averages the elements
    at sorted positions n/2 and n/2+1, which leans toward the upper half. A
    two-element window has no position n/2+1, so both elements are averaged.

    Raises:
        EmptySampleError: If samples is empty
        NegativeDurationError: If any sample is negative
    """
    ordered = _sorted_samples(samples)
    n = len(ordered)
    mid = n // 2

    if n % 2 == 1:
        return ordered[mid].item()

    if n == 2:
        low, high = ordered[0], ordered[1]
    else:
        low, high = ordered[mid], ordered[mid + 1]

    if _is_integral(ordered):
        return int((int(low) + int(high)) // 2)
    return float((low + high) / 2)


def p99(samples: Sequence[Duration]) -> Duration:
    """
    99th percentile with linear interpolation.

    position = 0.99 * (n - 1); the result interpolates between the values at
    floor(position) and floor(position) + 1. When floor(position) is the last
    index its value is returned as is.

    Example:
        >>> p99([float(v) for v in range(100)])  # doctest: +ELLIPSIS
        98.01...
    """
    ordered = _sorted_samples(samples)
    n = len(ordered)
    position = (99 / 100) * (n - 1)
    index = int(math.floor(position))
    frac = position - index

    if index + 1 < n:
        low = float(ordered[index])
        high = float(ordered[index + 1])
        # equal neighbours interpolate to exactly the same value
        value = low + (high - low) * frac
        if _is_integral(ordered):
            return int(value)
        return value

    return ordered[index].item()


def mean(samples: Sequence[Duration]) -> Duration:
    """Arithmetic mean; truncating division for integer durations."""
    ordered = _sorted_samples(samples)
    if _is_integral(ordered):
        return sum(int(v) for v in ordered) // len(ordered)
    return float(ordered.sum()) / len(ordered)


def calculate_metrics(samples: Sequence[Duration]) -> Dict[str, Duration]:
    """
    Calculate the reported metrics for one window.

    Args:
        samples: Durations of a complete window

    Returns:
        Dictionary with p50, p99, mean, min, max and count
    """
    ordered = _sorted_samples(samples)
    return {
        "p50": median(samples),
        "p99": p99(samples),
        "mean": mean(samples),
        "min": ordered[0].item(),
        "max": ordered[-1].item(),
        "count": len(ordered),
    }


class SampleWindow:
    """
    Fixed-size batch of durations from consecutive invocations.

    Samples are appended in invocation order. Statistics are only available
    once exactly ``size`` samples have been collected.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"window size must be > 0, got {size}")
        self.size = size
        self._samples: List[Duration] = []

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def is_full(self) -> bool:
        return len(self._samples) == self.size

    def append(self, duration: Duration) -> None:
        if self.is_full:
            raise IncompleteWindowError(f"window already holds {self.size} samples")
        if duration is None or not math.isfinite(duration):
            raise InvalidDurationError(f"undefined duration: {duration!r}")
        if duration < 0:
            raise NegativeDurationError(f"negative duration: {duration}")
        self._samples.append(duration)

    @property
    def samples(self) -> List[Duration]:
        if not self.is_full:
            raise IncompleteWindowError(
                f"window has {len(self._samples)} of {self.size} samples"
            )
        return list(self._samples)

    def p50(self) -> Duration:
        return median(self.samples)

    def p99(self) -> Duration:
        return p99(self.samples)

    def mean(self) -> Duration:
        return mean(self.samples)
