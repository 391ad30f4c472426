"""DuckDB persistence for normalized transaction records.

Writes from concurrently running account syncs share one connection. DuckDB
connections are not safe to use from several threads at once, so every write
opens its own cursor and runs in a worker thread.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType

import duckdb

from banksync.models import TransactionRecord

logger = logging.getLogger(__name__)


class TransactionStore:
    """Append-only transaction table in a DuckDB database file."""

    def __init__(self, database_path: Path, table_name: str = "transactions"):
        """Initialize the store.

        Args:
            database_path: Path to the DuckDB database file
            table_name: Table receiving the records (must be a plain identifier)
        """
        if not table_name.isidentifier():
            raise ValueError(f"Invalid table name: {table_name}")

        self.database_path = database_path
        self.table_name = table_name
        self._conn: duckdb.DuckDBPyConnection | None = None

    def connect(self) -> None:
        """Open the database and make sure the table exists."""
        if self._conn is not None:
            return

        try:
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
            # Pyright reports "Type of 'connect' is partially unknown" because of
            # the config parameter in DuckDB's stubs
            self._conn = duckdb.connect(str(self.database_path))  # type: ignore[misc]
            self._conn.execute(f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    username VARCHAR NOT NULL,
                    tx_date TIMESTAMP NOT NULL,
                    description VARCHAR,
                    amount DECIMAL(38, 10) NOT NULL,
                    scraped_at TIMESTAMP NOT NULL
                )
            """)
        except (duckdb.Error, OSError) as e:
            logger.error(f"Failed to open DuckDB database {self.database_path}: {e}")
            self.close()
            raise

        logger.info(f"Connected to DuckDB database: {self.database_path}")

    def close(self) -> None:
        """Close the database connection if it is open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.info("Disconnected from DuckDB")

    def __enter__(self) -> "TransactionStore":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def connection(self) -> duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise RuntimeError("TransactionStore is not connected")
        return self._conn

    async def insert_many(self, records: Sequence[TransactionRecord]) -> int:
        """Insert records in one batch.

        Args:
            records: Records to append; nothing happens when empty

        Returns:
            int: Number of records inserted

        Raises:
            duckdb.Error: If the insert fails
        """
        if not records:
            return 0

        return await asyncio.to_thread(self._insert, list(records))

    def _insert(self, records: list[TransactionRecord]) -> int:
        rows = [
            (r.username, r.transaction_date, r.description, r.amount, r.scraped_at)
            for r in records
        ]

        cursor = self.connection.cursor()
        try:
            cursor.executemany(
                f"INSERT INTO {self.table_name} VALUES (?, ?, ?, ?, ?)",  # noqa: S608  # table_name validated as identifier
                rows,
            )
        except duckdb.Error as e:
            logger.error(f"Failed to insert transactions: {e}")
            raise
        finally:
            cursor.close()

        logger.info(f"Inserted {len(rows)} transactions")
        return len(rows)

    def count(self, username: str | None = None) -> int:
        """Count stored records, optionally for one username."""
        query = f"SELECT COUNT(*) FROM {self.table_name}"  # noqa: S608
        params: list[str] = []
        if username is not None:
            query += " WHERE username = ?"
            params.append(username)

        result = self.connection.execute(query, params).fetchone()
        return int(result[0]) if result else 0

    def counts_by_username(self) -> dict[str, int]:
        """Return stored record counts keyed by username."""
        rows = self.connection.execute(
            f"SELECT username, COUNT(*) FROM {self.table_name} "  # noqa: S608
            "GROUP BY username ORDER BY username"
        ).fetchall()
        return {str(username): int(count) for username, count in rows}
