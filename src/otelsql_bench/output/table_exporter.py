"""
Console table export for benchmark results.

Exports benchmark results as formatted console tables using tabulate.
"""

from pathlib import Path
from typing import Optional

from tabulate import tabulate

from otelsql_bench.config import BenchmarkReport

HEADERS = ["Subject", "p(50)", "p(99)", "avg", "Warmup windows"]


def export_table(report: BenchmarkReport, output_dir: Optional[str] = None) -> str:
    """
    Render benchmark report as a formatted table.

    Args:
        report: BenchmarkReport to export
        output_dir: If given, the table is also saved there as <report_id>.txt

    Returns:
        Formatted table string

    Example:
        >>> print(export_table(report))
        Subject     p(50)       p(99)       avg         Warmup windows
        ----------  ----------  ----------  ----------  ----------------
        dbapi       3.204117ms  4.981022ms  3.301245ms  4
        ...
    """
    table_str = tabulate(report.to_table_rows(), headers=HEADERS, tablefmt="simple")

    output = []
    output.append("=" * 70)
    output.append("SQL Instrumentation Benchmark")
    output.append("=" * 70)
    output.append(f"Report ID: {report.report_id}")
    output.append(f"Timestamp: {report.start_time.isoformat()}")
    output.append("")
    output.append("Configuration:")
    output.append(f"  Window size:   {report.config.window_size}")
    output.append(f"  Tolerance:     {report.config.tolerance:.2%}")
    output.append(f"  Record size:   {report.config.record_size}")
    output.append(f"  Row limit:     {report.config.row_limit:,}")
    output.append(f"  Tracing mode:  {report.config.tracing_mode}")
    output.append("")
    output.append("Results:")
    output.append(table_str)
    output.append("")
    output.append(f"Benchmark {report.state.value} in {report.total_duration_seconds:.2f} seconds.")
    output.append("=" * 70)

    full_output = "\n".join(output)

    if output_dir is not None:
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)
        with open(output_path / f"{report.report_id}.txt", "w") as f:
            f.write(full_output)

    return full_output
