"""
Unit tests for window statistics: median, p99, mean and SampleWindow.
"""

import pytest

from otelsql_bench.exceptions import (
    EmptySampleError,
    IncompleteWindowError,
    InvalidDurationError,
    NegativeDurationError,
)
from otelsql_bench.metrics import SampleWindow, calculate_metrics, mean, median, p99


class TestMedian:
    """median() including the upper-biased even-length rule"""

    def test_odd_length_returns_middle_element(self):
        assert median([5, 1, 3]) == 3
        assert median([9, 2, 7, 4, 5]) == 5

    def test_even_length_averages_upper_neighbours(self):
        """Even length averages sorted positions n/2 and n/2+1"""
        # sorted [1, 2, 3, 4]: positions 2 and 3 -> (3 + 4) // 2
        assert median([4, 1, 3, 2]) == 3
        assert median([10, 20, 30, 40, 50, 60]) == 45

    def test_even_length_floats(self):
        assert median([1.0, 2.0, 3.0, 4.0]) == pytest.approx(3.5)

    def test_two_elements_average_both(self):
        assert median([10, 21]) == 15
        assert median([1.0, 2.0]) == pytest.approx(1.5)

    def test_single_element(self):
        assert median([42]) == 42

    def test_integer_input_returns_int(self):
        result = median([1, 2, 3, 4])
        assert isinstance(result, int), f"Expected int, got {type(result)}"

    def test_does_not_reorder_caller_sequence(self):
        samples = [3, 1, 2]
        median(samples)
        assert samples == [3, 1, 2]


class TestP99:
    """p99() with linear interpolation"""

    def test_single_element_is_returned(self):
        assert p99([7]) == 7

    def test_hundred_values_interpolate(self):
        """0..99: position 98.01 between v[98] and v[99]"""
        samples = [float(v) for v in range(100)]
        assert p99(samples) == pytest.approx(98.01)

    def test_integer_durations_truncate(self):
        assert p99(list(range(100))) == 98

    def test_unsorted_input(self):
        samples = [float(v) for v in reversed(range(100))]
        assert p99(samples) == pytest.approx(98.01)

    def test_constant_samples(self):
        assert p99([250] * 200) == 250

    def test_does_not_reorder_caller_sequence(self):
        samples = [5, 4, 3, 2, 1]
        p99(samples)
        assert samples == [5, 4, 3, 2, 1]


class TestMean:
    """mean() with truncating division on integer durations"""

    def test_integer_mean_truncates(self):
        assert mean([1, 2]) == 1
        assert mean([10, 10, 11]) == 10

    def test_float_mean(self):
        assert mean([1.0, 2.0]) == pytest.approx(1.5)

    @pytest.mark.parametrize("samples", [
        [1],
        [3, 1, 2],
        [100, 100, 100, 900],
        [0, 1_000_000_000],
        list(range(1, 201)),
    ])
    def test_mean_between_min_and_max(self, samples):
        result = mean(samples)
        assert min(samples) <= result <= max(samples), \
            f"mean {result} outside [{min(samples)}, {max(samples)}]"


class TestInvalidSamples:
    """Empty and negative inputs are contract violations"""

    @pytest.mark.parametrize("func", [median, p99, mean, calculate_metrics])
    def test_empty_samples_raise(self, func):
        with pytest.raises(EmptySampleError):
            func([])

    def test_empty_sample_error_is_value_error(self):
        with pytest.raises(ValueError):
            median([])

    @pytest.mark.parametrize("func", [median, p99, mean])
    def test_negative_duration_raises(self, func):
        with pytest.raises(NegativeDurationError):
            func([10, -1, 20])

    @pytest.mark.parametrize("func", [median, p99, mean, calculate_metrics])
    @pytest.mark.parametrize("undefined", [float("nan"), float("inf")])
    def test_undefined_duration_raises(self, func, undefined):
        """NaN sorts last and never compares below zero"""
        with pytest.raises(InvalidDurationError):
            func([1.0, undefined, 3.0])


class TestCalculateMetrics:
    """calculate_metrics() summary"""

    def test_constant_window(self):
        metrics = calculate_metrics([500] * 10)
        assert metrics == {
            "p50": 500,
            "p99": 500,
            "mean": 500,
            "min": 500,
            "max": 500,
            "count": 10,
        }

    def test_min_max(self):
        metrics = calculate_metrics([30, 10, 20])
        assert metrics["min"] == 10
        assert metrics["max"] == 30
        assert metrics["p50"] == 20


class TestSampleWindow:
    """SampleWindow must be exactly full before statistics"""

    def test_statistics_on_full_window(self):
        window = SampleWindow(3)
        for value in (300, 100, 200):
            window.append(value)

        assert window.is_full
        assert window.p50() == 200
        assert window.mean() == 200
        assert window.samples == [300, 100, 200], "samples keep invocation order"

    def test_partial_window_raises(self):
        window = SampleWindow(3)
        window.append(100)

        with pytest.raises(IncompleteWindowError):
            window.p50()
        with pytest.raises(IncompleteWindowError):
            window.samples

    def test_overfill_raises(self):
        window = SampleWindow(1)
        window.append(100)

        with pytest.raises(IncompleteWindowError):
            window.append(200)
        assert len(window) == 1

    def test_negative_duration_rejected(self):
        window = SampleWindow(2)
        with pytest.raises(NegativeDurationError):
            window.append(-5)

    @pytest.mark.parametrize("undefined", [None, float("nan"), float("inf")])
    def test_undefined_duration_rejected(self, undefined):
        window = SampleWindow(2)
        with pytest.raises(InvalidDurationError):
            window.append(undefined)
        assert len(window) == 0

    def test_size_must_be_positive(self):
        with pytest.raises(ValueError):
            SampleWindow(0)
