"""
JSON export for benchmark results.

Exports benchmark results as JSON files.
"""

import json
from pathlib import Path

from otelsql_bench.config import BenchmarkReport


def export_json(report: BenchmarkReport, output_dir: str = "results/json") -> str:
    """
    Export benchmark report as JSON file.

    Args:
        report: BenchmarkReport to export
        output_dir: Directory for JSON output

    Returns:
        Path to created JSON file

    Example:
        >>> filepath = export_json(report)
        >>> # Creates: results/json/<report_id>.json
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    filepath = output_path / f"{report.report_id}.json"

    with open(filepath, "w") as f:
        json.dump(report.to_json(), f, indent=2)

    return str(filepath)
