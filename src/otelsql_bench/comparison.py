#!/usr/bin/env python3
"""
SQL Instrumentation Benchmark.

Main CLI entry point for comparing:
- opentelemetry-instrumentation-dbapi
- opentelemetry-instrumentation-sqlalchemy
- opentelemetry-instrumentation-psycopg

Subjects run one after another against the same PostgreSQL table. Each is
warmed up until its window medians stabilize, then measured over one window.
"""

import argparse
import logging
import sys
from typing import List, Optional

import structlog

from otelsql_bench.config import (
    SUBJECT_NAMES,
    TRACING_MODES,
    BenchmarkConfiguration,
    ConnectionConfig,
)
from otelsql_bench.exceptions import BenchmarkError
from otelsql_bench.executors import subject_factories
from otelsql_bench.output.json_exporter import export_json
from otelsql_bench.output.table_exporter import export_table
from otelsql_bench.runner import BenchmarkRunner
from otelsql_bench.tracing import tracer_provider
from otelsql_bench.validate_connections import validate_connection

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    env = ConnectionConfig.from_env()
    defaults = BenchmarkConfiguration()

    parser = argparse.ArgumentParser(
        description="SQL Instrumentation Benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with default configuration (window 200, tolerance 5%, record size 3)
  otelsql-bench

  # Smaller windows, tighter tolerance, recorded spans
  otelsql-bench --window-size 100 --tolerance 0.02 --tracing sdk

  # Compare against raw psycopg and keep going if one wrapper fails
  otelsql-bench --include-baseline --isolate-subjects
        """
    )

    parser.add_argument('--host', default=env.host, help=f'PostgreSQL host (default: {env.host})')
    parser.add_argument('--port', type=int, default=env.port, help=f'PostgreSQL port (default: {env.port})')
    parser.add_argument('--database', default=env.database, help=f'Database name (default: {env.database})')
    parser.add_argument('--user', default=env.username, help='Database user')
    parser.add_argument('--password', default=env.password, help='Database password')

    parser.add_argument(
        '--window-size',
        type=int,
        default=defaults.window_size,
        help=f'Queries per window (default: {defaults.window_size})'
    )
    parser.add_argument(
        '--tolerance',
        type=float,
        default=defaults.tolerance,
        help=f'Relative p50 tolerance for warmup stability (default: {defaults.tolerance})'
    )
    parser.add_argument(
        '--record-size',
        type=int,
        default=defaults.record_size,
        help=f'Window medians that must agree (default: {defaults.record_size})'
    )
    parser.add_argument(
        '--max-warmup-windows',
        type=int,
        default=defaults.max_warmup_windows,
        help=f'Abort warmup after this many windows, 0 for no limit (default: {defaults.max_warmup_windows})'
    )
    parser.add_argument(
        '--max-warmup-seconds',
        type=float,
        default=None,
        help='Abort warmup after this many seconds (default: no limit)'
    )
    parser.add_argument(
        '--row-limit',
        type=int,
        default=defaults.row_limit,
        help=f'LIMIT bound to the benchmark query (default: {defaults.row_limit})'
    )

    for name in SUBJECT_NAMES:
        parser.add_argument(
            f'--skip-{name}',
            action='store_true',
            help=f'Skip {name} benchmark'
        )
    parser.add_argument(
        '--include-baseline',
        action='store_true',
        help='Also benchmark plain psycopg without instrumentation'
    )
    parser.add_argument(
        '--isolate-subjects',
        action='store_true',
        help='Record a failing subject and continue with the next one'
    )
    parser.add_argument(
        '--tracing',
        choices=TRACING_MODES,
        default=defaults.tracing_mode,
        help=f'Tracer provider handed to the wrappers (default: {defaults.tracing_mode})'
    )
    parser.add_argument(
        '--output-json',
        type=str,
        default=None,
        help='Also write the report as JSON into this directory'
    )
    parser.add_argument(
        '--output-table',
        type=str,
        default=None,
        help='Also write the summary table into this directory'
    )
    parser.add_argument(
        '--skip-validation',
        action='store_true',
        help='Do not check the connection and messages table first'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Log every warmup window'
    )
    return parser


def build_config(args: argparse.Namespace) -> BenchmarkConfiguration:
    """Translate parsed CLI arguments into a BenchmarkConfiguration."""
    return BenchmarkConfiguration(
        window_size=args.window_size,
        tolerance=args.tolerance,
        record_size=args.record_size,
        max_warmup_windows=args.max_warmup_windows or None,
        max_warmup_seconds=args.max_warmup_seconds,
        row_limit=args.row_limit,
        subjects=[name for name in SUBJECT_NAMES if not getattr(args, f"skip_{name}")],
        include_baseline=args.include_baseline,
        isolate_subjects=args.isolate_subjects,
        tracing_mode=args.tracing,
        connection=ConnectionConfig(
            host=args.host,
            port=args.port,
            database=args.database,
            username=args.user,
            password=args.password,
        ),
    )


def configure_logging(verbose: bool = False):
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.INFO
        ),
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        parser = build_parser()
    except ValueError as e:
        logger.error("Invalid configuration", error=str(e))
        return 1

    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    config = build_config(args)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error("Invalid configuration", error=error)
        return 1

    if not args.skip_validation:
        error = validate_connection(config.connection)
        if error:
            logger.error("Connection validation failed", error=error)
            return 1

    runner = BenchmarkRunner(config)

    try:
        with tracer_provider(config.tracing_mode) as provider:
            report = runner.run(subject_factories(config, provider))
    except BenchmarkError as e:
        logger.error("Benchmark failed", error_type=type(e).__name__, error=str(e))
        return 1

    print()
    print(export_table(report, args.output_table))

    if args.output_json:
        json_path = export_json(report, args.output_json)
        logger.info("Report exported", path=json_path)

    return 0 if all(r.succeeded for r in report.subject_reports.values()) else 1


if __name__ == "__main__":
    sys.exit(main())
