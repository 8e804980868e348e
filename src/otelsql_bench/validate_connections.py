"""
Connection validation before benchmark execution.

Abort with a clear error if PostgreSQL is unreachable or the messages table
is missing, before any subject is opened.
"""

import sys
from typing import Optional

import psycopg

from otelsql_bench.config import ConnectionConfig


def validate_connection(config: ConnectionConfig, table: str = "messages") -> Optional[str]:
    """
    Validate the PostgreSQL connection and the benchmark table.

    Args:
        config: Connection parameters
        table: Table the benchmark query reads from

    Returns:
        None if successful, error message if failed
    """
    try:
        with psycopg.connect(config.conninfo()) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT to_regclass(%s)", (table,))
                row = cur.fetchone()
                if row is None or row[0] is None:
                    return f"table '{table}' does not exist in database {config.database}"
        return None
    except psycopg.Error as e:
        return f"PostgreSQL connection failed ({config.host}:{config.port}): {e}"


def main() -> int:
    """Validate the connection described by the libpq environment."""
    try:
        config = ConnectionConfig.from_env()
    except ValueError as e:
        print(f"❌ {e}")
        return 1
    error = validate_connection(config)
    if error:
        print(f"❌ {error}")
        return 1
    print(f"✅ PostgreSQL reachable at {config.host}:{config.port}/{config.database}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
