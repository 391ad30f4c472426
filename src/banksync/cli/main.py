"""Main CLI application for BankSync.

This module provides the unified entry point for all BankSync CLI operations.
"""

import logging
from typing import Annotated

import typer

from ..logging import setup_logging
from .commands import db, sync

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="banksync",
    help="BankSync: concurrent bank transaction synchronization",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose debug logging",
        ),
    ] = False,
) -> None:
    """Global options for BankSync CLI.

    Configuration is read from BANKSYNC_* environment variables or a .env
    file in the working directory, e.g.:

      API_URL=https://bank.example.com
      BANK_ACCOUNTS=alice:secret,bob:hunter2
    """
    setup_logging(cli_mode=True, verbose=verbose)


app.add_typer(sync.app, name="sync", help="Sync transactions from the bank API")
app.add_typer(db.app, name="db", help="Inspect the local transaction database")


def main() -> None:
    """Entry point for the BankSync CLI application."""
    app()


if __name__ == "__main__":
    main()
