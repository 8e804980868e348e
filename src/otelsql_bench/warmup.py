"""
Warmup stability detection.

A subject is considered warm once the medians of its last K windows all sit
within a relative tolerance of the most recent one. Stability can therefore
not be declared before K windows have been observed.
"""

from typing import List

from otelsql_bench.metrics import Duration


class WarmupState:
    """
    Ring buffer of the last ``record_size`` window medians.

    ``record`` overwrites the slot under the cursor and advances it modulo the
    capacity, so recording never allocates. ``count`` keeps growing for the
    lifetime of the state.
    """

    def __init__(self, record_size: int, tolerance: float):
        if record_size < 0:
            raise ValueError(f"record_size must be >= 0, got {record_size}")
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        self._p50s: List[Duration] = [0] * record_size
        self._cursor = 0
        self.count = 0
        self.tolerance = tolerance

    @property
    def capacity(self) -> int:
        return len(self._p50s)

    @property
    def cursor(self) -> int:
        """Index of the next slot to overwrite."""
        return self._cursor

    def record(self, p50: Duration) -> None:
        self.count += 1
        if not self._p50s:
            return
        self._p50s[self._cursor] = p50
        self._cursor = (self._cursor + 1) % len(self._p50s)

    @property
    def latest(self):
        """Most recently recorded median, or None before the first record."""
        if not self._p50s or self.count == 0:
            return None
        return self._p50s[(self._cursor - 1) % len(self._p50s)]

    @property
    def values(self) -> List[Duration]:
        """Buffered medians in chronological order, oldest first."""
        if self.count < len(self._p50s):
            return self._p50s[: self.count]
        return self._p50s[self._cursor:] + self._p50s[: self._cursor]

    def is_stable(self) -> bool:
        if not self._p50s:
            return False
        if self.count < len(self._p50s):
            return False

        reference = self.latest
        if reference == 0:
            # relative difference is undefined; only an all-zero history agrees
            return all(value == 0 for value in self._p50s)

        return all(
            abs(reference - value) / reference <= self.tolerance
            for value in self._p50s
        )
