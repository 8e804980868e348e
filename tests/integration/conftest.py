"""
Integration test infrastructure.

Requires a reachable PostgreSQL server, configured through the standard
PGHOST/PGPORT/PGDATABASE/PGUSER/PGPASSWORD variables. Tests skip when the
server cannot be reached.
"""

import socket

import pytest

from otelsql_bench.config import BenchmarkConfiguration, ConnectionConfig
from otelsql_bench.test_data.setup_database import seed_messages

SEEDED_ROWS = 256


def port_is_open(host, port, timeout=1.0):
    try:
        with socket.create_connection((host, port), timeout=timeout):
            return True
    except OSError:
        return False


@pytest.fixture(scope="session")
def pg_connection():
    """Connection parameters for the server under test; skip if unreachable."""
    config = ConnectionConfig.from_env()
    if not port_is_open(config.host, config.port):
        pytest.skip(f"PostgreSQL not reachable at {config.host}:{config.port}")
    return config


@pytest.fixture(scope="session")
def seeded_messages(pg_connection):
    """Small messages table shared by every integration test."""
    return seed_messages(pg_connection, rows=SEEDED_ROWS, content_length=16)


@pytest.fixture
def integration_config(pg_connection, seeded_messages):
    return BenchmarkConfiguration(
        window_size=5,
        record_size=3,
        tolerance=1.0,
        max_warmup_windows=50,
        row_limit=100,
        connection=pg_connection,
    )
