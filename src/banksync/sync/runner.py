"""Wire the sync pipeline together for one batch run."""

import logging
from collections.abc import Sequence

import httpx

from banksync.config import BankSyncSettings
from banksync.connectors.auth import AuthenticationFlow
from banksync.connectors.http_client import create_http_client
from banksync.connectors.transactions import TransactionFetcher
from banksync.models import BankAccount, BatchSummary
from banksync.utils.retry import RetryExecutor

from .orchestrator import BatchOrchestrator
from .processor import AccountProcessor, TransactionSink

logger = logging.getLogger(__name__)


async def run_batch(
    settings: BankSyncSettings,
    accounts: Sequence[BankAccount],
    store: TransactionSink,
    max_concurrency: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> BatchSummary:
    """Sync every account once against the configured bank API.

    Args:
        settings: Loaded application settings
        accounts: Accounts to process
        store: Destination for fetched transactions
        max_concurrency: Overrides ``settings.sync.max_concurrency`` when given
        transport: Optional HTTP transport override, used by tests

    Returns:
        BatchSummary: One outcome per account
    """
    retry = RetryExecutor(settings.retry)
    limit = max_concurrency or settings.sync.max_concurrency

    logger.debug(
        f"Retry policy: {settings.retry.max_attempts} attempts, "
        f"{settings.retry.delay}s delay; concurrency limit: {limit or 'none'}"
    )

    async with create_http_client(settings.api, transport=transport) as client:
        processor = AccountProcessor(
            auth=AuthenticationFlow(client, retry),
            fetcher=TransactionFetcher(client, retry),
            store=store,
        )
        return await BatchOrchestrator(processor, max_concurrency=limit).run(accounts)
