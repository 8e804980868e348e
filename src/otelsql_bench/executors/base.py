"""
Common executor behaviour for benchmark subjects.

An executor owns one instrumented database handle end to end. Its unit of
work opens a REPEATABLE READ transaction, runs the benchmark query with the
configured row limit, drains every row and commits.
"""

import time
from typing import Any, Optional

import psycopg
import structlog

from otelsql_bench.config import DEFAULT_QUERY, ConnectionConfig
from otelsql_bench.exceptions import SubjectSetupError, UnitOfWorkError

logger = structlog.get_logger()


class SubjectExecutor:
    """Base class: open a handle, run the unit of work, time it."""

    name = ""

    def __init__(
        self,
        connection_config: ConnectionConfig,
        query: str = DEFAULT_QUERY,
        row_limit: int = 65536,
        tracer_provider: Optional[Any] = None,
    ):
        """
        Initialize executor.

        Args:
            connection_config: PostgreSQL connection parameters
            query: Parameterized query; receives ``limit`` as a named parameter
            row_limit: Value bound to ``limit``
            tracer_provider: OpenTelemetry tracer provider handed to the wrapper
        """
        self.connection_config = connection_config
        self.query = query
        self.row_limit = row_limit
        self.tracer_provider = tracer_provider
        self.connection: Optional[Any] = None

    def _open(self) -> Any:
        """Return the instrumented handle stored on ``self.connection``."""
        raise NotImplementedError

    def _open_psycopg(self) -> psycopg.Connection:
        connection = psycopg.connect(self.connection_config.conninfo(), autocommit=False)
        connection.isolation_level = psycopg.IsolationLevel.REPEATABLE_READ
        return connection

    def connect(self):
        """
        Open the instrumented handle.

        Raises:
            SubjectSetupError: If the driver or the wrapper fails to set up
        """
        if self.connection is not None:
            return
        try:
            self.connection = self._open()
        except Exception as e:
            raise SubjectSetupError(f"{self.name}: {e}") from e
        logger.info("Subject connected", subject=self.name,
                    host=self.connection_config.host,
                    port=self.connection_config.port,
                    database=self.connection_config.database)

    def _run_unit_of_work(self) -> int:
        # psycopg starts the transaction implicitly on the first execute
        cursor = self.connection.cursor()
        try:
            cursor.execute(self.query, {"limit": self.row_limit})
            rows = 0
            for _row in cursor:
                rows += 1
        finally:
            cursor.close()
        self.connection.commit()
        return rows

    def execute(self) -> int:
        """
        Run one unit of work.

        Returns:
            Number of rows drained

        Raises:
            UnitOfWorkError: If the query, the fetch or the commit fails
        """
        if self.connection is None:
            self.connect()

        try:
            return self._run_unit_of_work()
        except Exception as e:
            raise UnitOfWorkError(f"{self.name}: {e}") from e

    def timed_execute(self) -> int:
        """Run one unit of work and return its elapsed time in nanoseconds."""
        start = time.perf_counter_ns()
        self.execute()
        return time.perf_counter_ns() - start

    def close(self):
        """Close database connection."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
