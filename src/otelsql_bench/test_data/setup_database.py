"""
Benchmark data setup.

Creates the ``messages`` table read by the benchmark query and fills it with
reproducible random text, so every subject drains identical rows.
"""

import argparse
import sys
import time
from typing import List

import numpy as np
import psycopg

from otelsql_bench.config import ConnectionConfig

ALPHABET = np.array(list("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"))


def generate_messages(count: int, content_length: int = 64, seed: int = 42) -> List[str]:
    """
    Generate reproducible random message bodies.

    Args:
        count: Number of messages
        content_length: Characters per message
        seed: Random seed; the same seed always yields the same messages

    Returns:
        List of ``count`` strings of ``content_length`` characters
    """
    rng = np.random.RandomState(seed)
    indices = rng.randint(0, len(ALPHABET), size=(count, content_length))
    return ["".join(ALPHABET[row]) for row in indices]


def seed_messages(
    config: ConnectionConfig,
    rows: int = 65536,
    content_length: int = 64,
    seed: int = 42,
) -> int:
    """
    (Re)create the messages table and load ``rows`` messages with COPY.

    Returns:
        Row count after loading

    Raises:
        psycopg.Error: If the database rejects any statement
    """
    print(f"📊 Seeding {rows:,} messages into {config.host}:{config.port}/{config.database}...", flush=True)
    messages = generate_messages(rows, content_length=content_length, seed=seed)

    start = time.perf_counter()
    with psycopg.connect(config.conninfo()) as conn:
        with conn.cursor() as cursor:
            cursor.execute("DROP TABLE IF EXISTS messages")
            cursor.execute("""
                CREATE TABLE messages (
                    id INTEGER PRIMARY KEY,
                    content TEXT NOT NULL
                )
            """)
            with cursor.copy("COPY messages (id, content) FROM STDIN") as copy:
                for message_id, content in enumerate(messages, start=1):
                    copy.write_row((message_id, content))

            cursor.execute("SELECT COUNT(*) FROM messages")
            count = cursor.fetchone()[0]

    elapsed = time.perf_counter() - start
    print(f"✅ Loaded {count:,} messages in {elapsed:.2f}s", flush=True)
    return count


def main() -> int:
    parser = argparse.ArgumentParser(description="Create and fill the benchmark messages table")
    parser.add_argument("--rows", type=int, default=65536, help="Number of messages (default: 65536)")
    parser.add_argument("--content-length", type=int, default=64, help="Characters per message (default: 64)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    try:
        seed_messages(
            ConnectionConfig.from_env(),
            rows=args.rows,
            content_length=args.content_length,
            seed=args.seed,
        )
    except (ValueError, psycopg.Error) as e:
        print(f"❌ Seeding failed: {e}", flush=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
