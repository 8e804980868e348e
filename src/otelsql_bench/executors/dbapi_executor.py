"""
Generic DB-API instrumentation executor.

Wraps a psycopg connection in the opentelemetry-instrumentation-dbapi
connection proxy. Bound parameters are recorded on each span, so this subject
also pays for argument capture.
"""

from typing import Any

from otelsql_bench.executors.base import SubjectExecutor

# psycopg keeps connection details under ``connection.info``
CONNECTION_ATTRIBUTES = {
    "database": "info.dbname",
    "port": "info.port",
    "host": "info.host",
    "user": "info.user",
}


class DbapiExecutor(SubjectExecutor):
    """Execute the benchmark query through a traced DB-API connection proxy."""

    name = "dbapi"

    def _open(self) -> Any:
        from opentelemetry.instrumentation import dbapi

        connection = self._open_psycopg()
        try:
            return dbapi.instrument_connection(
                __name__,
                connection,
                database_system="postgresql",
                connection_attributes=CONNECTION_ATTRIBUTES,
                tracer_provider=self.tracer_provider,
                capture_parameters=True,
            )
        except Exception:
            connection.close()
            raise
