"""Per-account unit of work: login, fetch, persist."""

import logging
from collections.abc import Sequence
from typing import Protocol

from banksync.connectors.auth import AuthenticationFlow
from banksync.connectors.transactions import TransactionFetcher
from banksync.models import AccountOutcome, BankAccount, TransactionRecord

logger = logging.getLogger(__name__)


class TransactionSink(Protocol):
    """Anything that can bulk-insert transaction records."""

    async def insert_many(self, records: Sequence[TransactionRecord]) -> int: ...


class AccountProcessor:
    """Sync one account and report the result as an :class:`AccountOutcome`.

    ``process`` is the isolation boundary for a single account: whatever goes
    wrong inside it comes back as a failed outcome, never as an exception.
    """

    def __init__(
        self,
        auth: AuthenticationFlow,
        fetcher: TransactionFetcher,
        store: TransactionSink,
    ):
        self.auth = auth
        self.fetcher = fetcher
        self.store = store

    async def process(self, account: BankAccount) -> AccountOutcome:
        """Run login, fetch and persist for ``account``."""
        username = account.username
        logger.info(f"Starting processing for account: {username}")

        try:
            login = await self.auth.login(account)
            if not login.success or not login.token:
                error = login.error_message or "Login failed"
                logger.error(f"{username}: Login failed - {error}")
                return AccountOutcome.failed(username, error)

            records = await self.fetcher.fetch_transactions(username, login.token)

            if not records:
                logger.warning(f"No transactions found for {username}")
                return AccountOutcome(
                    username=username, success=True, transaction_count=0
                )

            await self.store.insert_many(records)
        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.error(f"Error processing account {username}: {error_message}")
            return AccountOutcome.failed(username, error_message)

        logger.info(
            f"Successfully processed {username}: {len(records)} transactions saved"
        )
        return AccountOutcome(
            username=username, success=True, transaction_count=len(records)
        )
