"""
OpenTelemetry SQL Instrumentation Benchmark

Benchmark comparing the latency overhead of SQL instrumentation wrappers:
- opentelemetry-instrumentation-psycopg
- opentelemetry-instrumentation-dbapi
- opentelemetry-instrumentation-sqlalchemy

Each wrapper runs the same query until its window medians stabilize, then one
measurement window is reported as p(50), p(99) and average latency.
"""

__version__ = "0.1.0"
__author__ = "otelsql-bench Team"

__all__ = ["__version__", "__author__"]
