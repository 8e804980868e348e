"""
psycopg instrumentation executor.

Wraps a psycopg connection with opentelemetry-instrumentation-psycopg, which
swaps in a traced cursor factory on that connection only.
"""

import psycopg

from otelsql_bench.executors.base import SubjectExecutor


class PsycopgExecutor(SubjectExecutor):
    """Execute the benchmark query through PsycopgInstrumentor."""

    name = "psycopg"

    def _open(self) -> psycopg.Connection:
        from opentelemetry.instrumentation.psycopg import PsycopgInstrumentor

        connection = self._open_psycopg()
        try:
            return PsycopgInstrumentor.instrument_connection(
                connection,
                tracer_provider=self.tracer_provider,
            )
        except Exception:
            connection.close()
            raise

