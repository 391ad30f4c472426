"""Database inspection commands for BankSync CLI."""

import logging
from pathlib import Path

import duckdb
import typer

from banksync.config import get_settings
from banksync.loaders import TransactionStore

app = typer.Typer(help="Inspect the local transaction database")
logger = logging.getLogger(__name__)


@app.command("status")
def db_status(
    database: Path | None = typer.Option(
        None,
        "--database",
        "-d",
        help="Path to DuckDB database file (default: config)",
    ),
) -> None:
    """Show how many transactions are stored per account.

    Every sync run appends the latest transactions again, so counts grow by
    the batch size on each run for an unchanged account.
    """
    try:
        settings = get_settings()
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e

    if database is None:
        database = settings.database.path
        logger.info(f"Using database from config: {database}")

    if not database.exists():
        logger.error(f"❌ Database file not found: {database}")
        logger.info("💡 Run 'banksync sync run' to create and populate it first")
        raise typer.Exit(1)

    try:
        with TransactionStore(database, settings.database.table_name) as store:
            counts = store.counts_by_username()
    except (duckdb.Error, OSError) as e:
        logger.error(f"❌ Failed to read database: {e}")
        raise typer.Exit(1) from e

    if not counts:
        typer.echo("No transactions stored")
        return

    for username, count in counts.items():
        typer.echo(f"{username}\t{count}")
    typer.echo(f"total\t{sum(counts.values())}")
