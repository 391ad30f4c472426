"""Data synchronization commands for BankSync CLI.

This module provides the commands that run a batch sync against the bank API
and check the configured account list.
"""

import asyncio
import logging

import duckdb
import typer

from banksync.config import get_settings
from banksync.loaders import TransactionStore
from banksync.logging import setup_logging
from banksync.models import BatchSummary
from banksync.sync import run_batch

app = typer.Typer(help="Sync transactions from the bank API")
logger = logging.getLogger(__name__)


def _log_summary(summary: BatchSummary) -> None:
    logger.info(f"Total accounts processed: {summary.total_accounts}")
    logger.info(f"Successful accounts: {summary.successful_accounts}")
    logger.info(f"Failed accounts: {summary.failed_accounts}")
    logger.info(f"Total transactions saved: {summary.total_transactions}")

    for outcome in summary.outcomes:
        if outcome.success:
            logger.info(
                f"✅ {outcome.username}: {outcome.transaction_count} transactions"
            )
        else:
            logger.error(f"❌ {outcome.username}: {outcome.error}")


@app.command("run")
def sync_run(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging"
    ),
    max_concurrency: int | None = typer.Option(
        None,
        "--max-concurrency",
        "-c",
        min=1,
        help="Maximum accounts synced at once (default: config, else unbounded)",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the batch summary as JSON on stdout"
    ),
) -> None:
    """Sync recent transactions for every configured account.

    Each account is logged into, its latest transactions are fetched and
    appended to the DuckDB database. A failing account is reported but does
    not stop the others; the command only fails when the batch cannot start.

    Args:
        verbose: Enable debug level logging
        max_concurrency: Cap on accounts processed concurrently
        as_json: Print the summary as JSON
    """
    setup_logging(cli_mode=True, verbose=verbose)
    logger.info("Starting BankSync batch run...")

    try:
        settings = get_settings()
        accounts = settings.get_accounts()
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e

    logger.info(f"Loaded {len(accounts)} accounts for processing")

    store = TransactionStore(settings.database.path, settings.database.table_name)
    try:
        store.connect()
    except (duckdb.Error, OSError) as e:
        logger.error(f"❌ Database unavailable: {e}")
        raise typer.Exit(1) from e

    try:
        summary = asyncio.run(
            run_batch(settings, accounts, store, max_concurrency=max_concurrency)
        )
    except Exception as e:
        logger.error(f"❌ Sync failed: {e}")
        raise typer.Exit(1) from e
    finally:
        store.close()

    _log_summary(summary)
    if as_json:
        typer.echo(summary.model_dump_json(indent=2))

    logger.info("✅ Sync run completed")


@app.command("accounts")
def list_accounts() -> None:
    """Validate the configured account list and print its usernames."""
    try:
        accounts = get_settings().get_accounts()
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise typer.Exit(1) from e

    for account in accounts:
        typer.echo(account.username)
