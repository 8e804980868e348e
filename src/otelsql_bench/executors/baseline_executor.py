"""
Uninstrumented psycopg executor.

Runs the same unit of work as the instrumented subjects with no wrapper, so
their overhead can be read against raw driver latency.
"""

import psycopg

from otelsql_bench.executors.base import SubjectExecutor


class BaselineExecutor(SubjectExecutor):
    """Plain psycopg connection, no tracing."""

    name = "baseline"

    def _open(self) -> psycopg.Connection:
        return self._open_psycopg()
