"""
Unit tests for nanosecond duration formatting.
"""

import pytest

from otelsql_bench.durations import MILLISECOND, MINUTE, SECOND, format_duration


class TestFormatDuration:

    @pytest.mark.parametrize("value,expected", [
        (0, "0s"),
        (1, "1ns"),
        (850, "850ns"),
        (1000, "1µs"),
        (1500, "1.5µs"),
        (1_234_567, "1.234567ms"),
        (12 * MILLISECOND, "12ms"),
        (2 * SECOND, "2s"),
        (1_500_000_000, "1.5s"),
        (MINUTE, "1m0s"),
        (90 * SECOND, "1m30s"),
        (3_723_500_000_000, "1h2m3.5s"),
    ])
    def test_units(self, value, expected):
        assert format_duration(value) == expected

    def test_negative(self):
        assert format_duration(-1500) == "-1.5µs"

    def test_float_is_truncated(self):
        assert format_duration(1500.9) == "1.5µs"
