"""
Configuration and data models for the instrumentation benchmark.

Defaults reproduce the reference run: windows of 200 queries, 5% tolerance
over the last 3 window medians, and a 65536-row LIMIT on the messages table.
"""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from psycopg.conninfo import make_conninfo
from sqlalchemy.engine import URL

from otelsql_bench.durations import format_duration

SUBJECT_NAMES = ("dbapi", "sqlalchemy", "psycopg")
BASELINE_SUBJECT = "baseline"
TRACING_MODES = ("none", "sdk", "console")

DEFAULT_QUERY = "SELECT id, content FROM messages LIMIT %(limit)s"


class BenchmarkState(Enum):
    """Benchmark execution states"""
    INITIALIZING = "initializing"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ConnectionConfig:
    """Connection parameters for the PostgreSQL server under test"""
    host: str = "localhost"
    port: int = 5432
    database: str = "hello_db"
    username: Optional[str] = "postgres"
    password: Optional[str] = "postgres"
    connection_timeout: int = 10

    @classmethod
    def from_env(cls) -> "ConnectionConfig":
        """
        Build from the standard libpq environment variables.

        Raises:
            ValueError: If PGPORT is set but not an integer
        """
        defaults = cls()
        port = os.environ.get("PGPORT")
        try:
            port = int(port) if port else defaults.port
        except ValueError:
            raise ValueError(f"PGPORT must be an integer, got {port!r}") from None
        return cls(
            host=os.environ.get("PGHOST", defaults.host),
            port=port,
            database=os.environ.get("PGDATABASE", defaults.database),
            username=os.environ.get("PGUSER", defaults.username),
            password=os.environ.get("PGPASSWORD", defaults.password),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.host:
            errors.append("host cannot be empty")

        if not (1 <= self.port <= 65535):
            errors.append(f"Port must be 1-65535, got {self.port}")

        if not self.database:
            errors.append("database cannot be empty")

        if self.connection_timeout <= 0:
            errors.append(f"connection_timeout must be > 0, got {self.connection_timeout}")

        return errors

    def connect_kwargs(self) -> Dict:
        """Connection parameters as libpq keywords."""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "dbname": self.database,
            "connect_timeout": self.connection_timeout,
        }
        if self.username:
            kwargs["user"] = self.username
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def conninfo(self) -> str:
        """libpq connection string passed to psycopg.connect()."""
        return make_conninfo(**self.connect_kwargs())

    def sqlalchemy_url(self) -> URL:
        """SQLAlchemy URL using the psycopg (3.x) dialect."""
        return URL.create(
            "postgresql+psycopg",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


@dataclass
class BenchmarkConfiguration:
    """Configuration for a benchmark run"""
    window_size: int = 200
    tolerance: float = 0.05
    record_size: int = 3
    max_warmup_windows: Optional[int] = 1000
    max_warmup_seconds: Optional[float] = None
    row_limit: int = 65536
    query: str = DEFAULT_QUERY
    subjects: List[str] = field(default_factory=lambda: list(SUBJECT_NAMES))
    include_baseline: bool = False
    isolate_subjects: bool = False
    tracing_mode: str = "none"
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if self.window_size <= 0:
            errors.append(f"window_size must be > 0, got {self.window_size}")

        if self.tolerance < 0:
            errors.append(f"tolerance must be >= 0, got {self.tolerance}")

        if self.record_size <= 0:
            errors.append(f"record_size must be > 0, got {self.record_size}")

        if self.max_warmup_windows is not None and self.max_warmup_windows < self.record_size:
            errors.append(
                f"max_warmup_windows must be >= record_size ({self.record_size}), "
                f"got {self.max_warmup_windows}"
            )

        if self.max_warmup_seconds is not None and self.max_warmup_seconds <= 0:
            errors.append(f"max_warmup_seconds must be > 0, got {self.max_warmup_seconds}")

        if self.row_limit <= 0:
            errors.append(f"row_limit must be > 0, got {self.row_limit}")

        if not self.subjects and not self.include_baseline:
            errors.append("at least one subject must be selected")

        unknown = [name for name in self.subjects if name not in SUBJECT_NAMES]
        if unknown:
            errors.append(f"Unknown subjects: {unknown} (valid: {list(SUBJECT_NAMES)})")

        if self.tracing_mode not in TRACING_MODES:
            errors.append(
                f"Invalid tracing_mode: {self.tracing_mode} (valid: {list(TRACING_MODES)})"
            )

        errors.extend(f"connection: {e}" for e in self.connection.validate())

        return errors

    def selected_subjects(self) -> List[str]:
        """Subject names in execution order."""
        names = [BASELINE_SUBJECT] if self.include_baseline else []
        names.extend(name for name in SUBJECT_NAMES if name in self.subjects)
        return names


@dataclass
class SubjectReport:
    """Distribution of the final window for one subject"""
    name: str
    p50: int
    p99: int
    mean: int
    window_size: int
    warmup_windows: int
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, name: str, window_size: int, error: str, warmup_windows: int = 0):
        return cls(
            name=name,
            p50=0,
            p99=0,
            mean=0,
            window_size=window_size,
            warmup_windows=warmup_windows,
            error=error,
        )

    def validate(self) -> List[str]:
        errors = []

        for label, value in [("p50", self.p50), ("p99", self.p99), ("mean", self.mean)]:
            if value < 0:
                errors.append(f"{label} cannot be negative, got {value}")

        if self.warmup_windows < 0:
            errors.append(f"warmup_windows cannot be negative, got {self.warmup_windows}")

        return errors


@dataclass
class BenchmarkReport:
    """Complete benchmark results across subjects"""
    report_id: str
    config: BenchmarkConfiguration
    start_time: datetime
    end_time: datetime
    total_duration_seconds: float
    subject_reports: Dict[str, SubjectReport]
    state: BenchmarkState = BenchmarkState.INITIALIZING

    def to_json(self) -> Dict:
        """
        Export report as JSON.

        Returns:
            Dict suitable for json.dumps(); durations in nanoseconds
        """
        return {
            "report_id": self.report_id,
            "timestamp": self.start_time.isoformat(),
            "state": self.state.value,
            "config": {
                "window_size": self.config.window_size,
                "tolerance": self.config.tolerance,
                "record_size": self.config.record_size,
                "row_limit": self.config.row_limit,
                "tracing_mode": self.config.tracing_mode,
            },
            "duration_seconds": self.total_duration_seconds,
            "results": {
                name: {
                    "p50_ns": report.p50,
                    "p99_ns": report.p99,
                    "mean_ns": report.mean,
                    "window_size": report.window_size,
                    "warmup_windows": report.warmup_windows,
                    "error": report.error,
                }
                for name, report in self.subject_reports.items()
            },
        }

    def to_table_rows(self) -> List[List]:
        """
        Export report as table rows for console display.

        Returns:
            List of rows [name, p50, p99, avg, warmup windows]
        """
        rows = []
        for report in self.subject_reports.values():
            if report.succeeded:
                rows.append([
                    report.name,
                    format_duration(report.p50),
                    format_duration(report.p99),
                    format_duration(report.mean),
                    report.warmup_windows,
                ])
            else:
                rows.append([report.name, "-", "-", "-", f"failed: {report.error}"])
        return rows
