"""
SQLAlchemy instrumentation executor.

Builds an engine on the psycopg dialect and instruments it with
opentelemetry-instrumentation-sqlalchemy. The instrumentor is process-wide,
so it is uninstrumented again when the executor closes.
"""

from typing import Any, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine

from otelsql_bench.executors.base import SubjectExecutor


class SQLAlchemyExecutor(SubjectExecutor):
    """Execute the benchmark query through an instrumented SQLAlchemy engine."""

    name = "sqlalchemy"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.engine: Optional[Engine] = None
        self._instrumentor: Optional[Any] = None

    def _open(self) -> Connection:
        from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

        self.engine = create_engine(
            self.connection_config.sqlalchemy_url(),
            isolation_level="REPEATABLE READ",
            connect_args={"connect_timeout": self.connection_config.connection_timeout},
        )
        try:
            instrumentor = SQLAlchemyInstrumentor()
            # None when already active in this process or on a dependency conflict
            engine_tracer = instrumentor.instrument(
                engine=self.engine,
                tracer_provider=self.tracer_provider,
            )
            if engine_tracer is None:
                raise RuntimeError(
                    "SQLAlchemyInstrumentor left the engine uninstrumented "
                    "(already instrumented or unsupported sqlalchemy version)"
                )
            self._instrumentor = instrumentor
            return self.engine.connect()
        except Exception:
            self.close()
            raise

    def _run_unit_of_work(self) -> int:
        rows = 0
        with self.connection.begin():
            # driver-level SQL keeps the query text identical across subjects
            result = self.connection.exec_driver_sql(self.query, {"limit": self.row_limit})
            for _row in result:
                rows += 1
        return rows

    def close(self):
        """Close connection, dispose engine and remove instrumentation."""
        super().close()
        if self._instrumentor is not None:
            self._instrumentor.uninstrument()
            self._instrumentor = None
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
