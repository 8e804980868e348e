"""
Benchmark subjects, one executor per SQL instrumentation wrapper.
"""

from functools import partial
from typing import Any, Callable, Dict, Optional

from otelsql_bench.config import BenchmarkConfiguration
from otelsql_bench.executors.base import SubjectExecutor
from otelsql_bench.executors.baseline_executor import BaselineExecutor
from otelsql_bench.executors.dbapi_executor import DbapiExecutor
from otelsql_bench.executors.psycopg_executor import PsycopgExecutor
from otelsql_bench.executors.sqlalchemy_executor import SQLAlchemyExecutor

EXECUTORS = {
    BaselineExecutor.name: BaselineExecutor,
    DbapiExecutor.name: DbapiExecutor,
    SQLAlchemyExecutor.name: SQLAlchemyExecutor,
    PsycopgExecutor.name: PsycopgExecutor,
}


def open_subject(
    name: str,
    config: BenchmarkConfiguration,
    tracer_provider: Optional[Any] = None,
) -> SubjectExecutor:
    """
    Create and connect the executor for one subject.

    Raises:
        KeyError: If no executor is registered under ``name``
        SubjectSetupError: If the instrumented handle cannot be opened
    """
    executor = EXECUTORS[name](
        config.connection,
        query=config.query,
        row_limit=config.row_limit,
        tracer_provider=tracer_provider,
    )
    executor.connect()
    return executor


def subject_factories(
    config: BenchmarkConfiguration,
    tracer_provider: Optional[Any] = None,
) -> Dict[str, Callable[[], SubjectExecutor]]:
    """Ordered factories for every selected subject; nothing is opened yet."""
    return {
        name: partial(open_subject, name, config, tracer_provider)
        for name in config.selected_subjects()
    }


__all__ = [
    "EXECUTORS",
    "SubjectExecutor",
    "BaselineExecutor",
    "DbapiExecutor",
    "PsycopgExecutor",
    "SQLAlchemyExecutor",
    "open_subject",
    "subject_factories",
]
