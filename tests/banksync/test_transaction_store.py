# ruff: noqa: S101
"""Tests for the DuckDB transaction store."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import duckdb
import pytest

from banksync.loaders.transaction_store import TransactionStore
from banksync.models import TransactionRecord


def _record(username: str, description: str = "Coffee") -> TransactionRecord:
    return TransactionRecord(
        username=username,
        transaction_date=datetime(2024, 5, 2, 9, 30),
        description=description,
        amount=Decimal("-4.75"),
        scraped_at=datetime(2024, 5, 3, 12, 0),
    )


class TestTransactionStore:
    @pytest.fixture
    def store(self, tmp_path: Path) -> Generator[TransactionStore, None, None]:
        store = TransactionStore(tmp_path / "nested" / "store.duckdb")
        store.connect()
        yield store
        store.close()

    def test_connect_creates_database_and_table(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "store.duckdb"

        with TransactionStore(path) as store:
            assert store.count() == 0

        assert path.exists()

    def test_rejects_unsafe_table_name(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Invalid table name"):
            TransactionStore(tmp_path / "x.duckdb", table_name="tx; DROP TABLE x")

    def test_requires_connection(self, tmp_path: Path) -> None:
        with pytest.raises(RuntimeError, match="not connected"):
            TransactionStore(tmp_path / "x.duckdb").count()

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_insert_many_round_trip(self, store: TransactionStore) -> None:
        inserted = await store.insert_many([_record("alice"), _record("alice", "Lunch")])

        assert inserted == 2
        row = store.connection.execute(
            "SELECT username, tx_date, description, amount, scraped_at "
            "FROM transactions ORDER BY description"
        ).fetchone()
        assert row == (
            "alice",
            datetime(2024, 5, 2, 9, 30),
            "Coffee",
            Decimal("-4.75"),
            datetime(2024, 5, 3, 12, 0),
        )

    @pytest.mark.asyncio
    async def test_empty_insert_is_noop(self, store: TransactionStore) -> None:
        assert await store.insert_many([]) == 0
        assert store.count() == 0

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_concurrent_inserts(self, store: TransactionStore) -> None:
        """Several account tasks can write at the same time."""
        users = [f"user{i}" for i in range(8)]

        results = await asyncio.gather(
            *(store.insert_many([_record(u), _record(u, "Tea")]) for u in users)
        )

        assert results == [2] * 8
        assert store.count() == 16
        assert store.counts_by_username() == {u: 2 for u in sorted(users)}

    @pytest.mark.asyncio
    async def test_insert_failure_propagates(
        self, store: TransactionStore
    ) -> None:
        store.connection.execute("DROP TABLE transactions")

        with pytest.raises(duckdb.Error):
            await store.insert_many([_record("alice")])

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        store = TransactionStore(tmp_path / "x.duckdb")
        store.connect()
        store.close()
        store.close()

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_amount_keeps_sub_cent_precision(
        self, store: TransactionStore
    ) -> None:
        record = _record("alice").model_copy(update={"amount": Decimal("-12.345")})

        await store.insert_many([record])

        row = store.connection.execute("SELECT amount FROM transactions").fetchone()
        assert row is not None
        assert row[0] == Decimal("-12.345")

    def test_connect_reports_unusable_directory(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = TransactionStore(blocker / "store.duckdb")

        with pytest.raises(OSError):
            store.connect()

        with pytest.raises(RuntimeError, match="not connected"):
            store.count()
