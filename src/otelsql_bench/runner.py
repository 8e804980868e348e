"""
Benchmark runner.

Implements:
- Window collection with integer nanosecond timings
- Warmup until the window medians stabilize
- One measurement window per subject
- Sequential execution across subjects
"""

import math
import time
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Dict

import structlog

from otelsql_bench.config import (
    BenchmarkConfiguration,
    BenchmarkReport,
    BenchmarkState,
    SubjectReport,
)
from otelsql_bench.durations import format_duration
from otelsql_bench.exceptions import (
    BenchmarkError,
    InvalidDurationError,
    NegativeDurationError,
    WarmupTimeoutError,
)
from otelsql_bench.metrics import SampleWindow
from otelsql_bench.warmup import WarmupState

if TYPE_CHECKING:
    from otelsql_bench.executors.base import SubjectExecutor

logger = structlog.get_logger()

# Runs one unit of work and returns its elapsed time in nanoseconds
Operation = Callable[[], int]


class BenchmarkRunner:
    """
    Adaptive benchmark runner.

    Every subject is warmed up until the medians of its last ``record_size``
    windows agree within ``tolerance``, then a single window is measured and
    reported. Subjects run one after another and share no state.
    """

    def __init__(
        self,
        config: BenchmarkConfiguration,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize benchmark runner.

        Args:
            config: Benchmark configuration
            clock: Wall clock in seconds, used for the warmup time limit

        Raises:
            ValueError: If configuration validation fails
        """
        errors = config.validate()
        if errors:
            raise ValueError("Invalid configuration:\n" + "\n".join(errors))

        self.config = config
        self.clock = clock

    def collect_window(self, operation: Operation, window_size: int) -> SampleWindow:
        """Invoke ``operation`` ``window_size`` times, in order, into a new window."""
        window = SampleWindow(window_size)
        for _ in range(window_size):
            elapsed = operation()
            if elapsed is None or not math.isfinite(elapsed):
                raise InvalidDurationError(f"operation returned undefined duration: {elapsed!r}")
            if elapsed < 0:
                raise NegativeDurationError(f"operation returned negative duration: {elapsed!r}")
            window.append(elapsed)
        return window

    def run_warmup(
        self,
        operation: Operation,
        window_size: int,
        detector: WarmupState,
    ) -> int:
        """
        Run windows until ``detector`` reports stability.

        Returns:
            Number of warmup windows executed

        Raises:
            WarmupTimeoutError: If max_warmup_windows or max_warmup_seconds is exceeded
        """
        max_windows = self.config.max_warmup_windows
        max_seconds = self.config.max_warmup_seconds
        started = self.clock()
        windows = 0

        while not detector.is_stable():
            if max_windows is not None and windows >= max_windows:
                raise WarmupTimeoutError(
                    f"warmup did not stabilize after {windows} windows",
                    windows=windows,
                    latest_p50=detector.latest,
                )
            if max_seconds is not None and self.clock() - started > max_seconds:
                raise WarmupTimeoutError(
                    f"warmup did not stabilize within {max_seconds}s ({windows} windows)",
                    windows=windows,
                    latest_p50=detector.latest,
                )

            window = self.collect_window(operation, window_size)
            p50 = window.p50()
            detector.record(p50)
            windows += 1
            logger.debug("Warmup window", window=windows, p50_ns=p50,
                         stable=detector.is_stable())

        return windows

    def run_measurement(self, operation: Operation, window_size: int) -> SampleWindow:
        """Execute exactly one window; no stability check."""
        return self.collect_window(operation, window_size)

    def benchmark_subject(self, name: str, operation: Operation) -> SubjectReport:
        """
        Warm up and measure a single subject.

        Prints the ``===name===`` header and the final p(50)/p(99)/avg block.

        Raises:
            UnitOfWorkError: If any invocation fails
            WarmupTimeoutError: If warmup does not stabilize in time
        """
        window_size = self.config.window_size

        print(f"==={name}===")
        logger.info("warmup", subject=name)
        detector = WarmupState(self.config.record_size, self.config.tolerance)
        warmup_windows = self.run_warmup(operation, window_size, detector)

        logger.info("start bench", subject=name, warmup_windows=warmup_windows)
        window = self.run_measurement(operation, window_size)

        report = SubjectReport(
            name=name,
            p50=window.p50(),
            p99=window.p99(),
            mean=window.mean(),
            window_size=window_size,
            warmup_windows=warmup_windows,
        )
        errors = report.validate()
        if errors:
            raise BenchmarkError(f"{name}: invalid report: " + "; ".join(errors))

        print(
            f"p(50): {format_duration(report.p50)}\n"
            f"p(99): {format_duration(report.p99)}\n"
            f"avg: {format_duration(report.mean)}"
        )
        print("======")
        return report

    def run(self, subjects: Dict[str, Callable[[], "SubjectExecutor"]]) -> BenchmarkReport:
        """
        Execute the benchmark for every subject, in order.

        Args:
            subjects: Mapping of subject name to a factory returning a
                connected executor

        Returns:
            BenchmarkReport with one SubjectReport per subject

        Raises:
            SubjectSetupError: On executor setup failure, unless isolate_subjects
            UnitOfWorkError: On query failure, unless isolate_subjects
        """
        report_id = f"benchmark_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        start_time = datetime.now()

        logger.info("Starting benchmark", report_id=report_id,
                    subjects=list(subjects),
                    window_size=self.config.window_size,
                    tolerance=self.config.tolerance,
                    record_size=self.config.record_size)

        subject_reports: Dict[str, SubjectReport] = {}
        state = BenchmarkState.RUNNING

        for name, factory in subjects.items():
            try:
                with factory() as executor:
                    subject_reports[name] = self.benchmark_subject(name, executor.timed_execute)
            except BenchmarkError as e:
                if not self.config.isolate_subjects:
                    raise
                logger.error("Subject failed", subject=name,
                             error_type=type(e).__name__, error=str(e))
                subject_reports[name] = SubjectReport.failed(
                    name,
                    self.config.window_size,
                    error=str(e),
                    warmup_windows=getattr(e, "windows", 0),
                )
                state = BenchmarkState.FAILED

        end_time = datetime.now()
        if state is BenchmarkState.RUNNING:
            state = BenchmarkState.COMPLETED

        logger.info("Benchmark complete", report_id=report_id, state=state.value,
                    duration_seconds=(end_time - start_time).total_seconds())

        return BenchmarkReport(
            report_id=report_id,
            config=self.config,
            start_time=start_time,
            end_time=end_time,
            total_duration_seconds=(end_time - start_time).total_seconds(),
            subject_reports=subject_reports,
            state=state,
        )

