"""Fan-out/fan-in over every configured account.

One asyncio task runs per account. All tasks are awaited to completion, a
failure in one never cancels the others, and the outcomes are reduced into a
single :class:`BatchSummary` in input order.

By default the fan-out is unbounded: a thousand accounts means a thousand
concurrent logins. ``max_concurrency`` caps that with a semaphore without
changing the isolation contract.
"""

import asyncio
import logging
from collections.abc import Sequence

from banksync.models import AccountOutcome, BankAccount, BatchSummary

from .processor import AccountProcessor

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Run an :class:`AccountProcessor` over many accounts concurrently."""

    def __init__(self, processor: AccountProcessor, max_concurrency: int | None = None):
        """Initialize the orchestrator.

        Args:
            processor: Per-account unit of work
            max_concurrency: Upper bound on accounts in flight; None for no bound
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.processor = processor
        self.max_concurrency = max_concurrency

    async def run(self, accounts: Sequence[BankAccount]) -> BatchSummary:
        """Process every account and summarize the batch."""
        logger.info(f"Starting concurrent processing of {len(accounts)} accounts")

        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )

        async def run_one(account: BankAccount) -> AccountOutcome:
            if semaphore is None:
                return await self.processor.process(account)
            async with semaphore:
                return await self.processor.process(account)

        results = await asyncio.gather(
            *(run_one(account) for account in accounts), return_exceptions=True
        )

        outcomes: list[AccountOutcome] = []
        for result in results:
            if isinstance(result, AccountOutcome):
                outcomes.append(result)
                continue

            # processor.process never raises; reaching here is a programming error
            logger.error(f"Account task failed: {result!r}")
            outcomes.append(
                AccountOutcome.failed("unknown", str(result) or "Task failed")
            )

        summary = BatchSummary.from_outcomes(outcomes)
        logger.info(
            f"Processing complete: {summary.successful_accounts}/"
            f"{summary.total_accounts} accounts successful, "
            f"{summary.total_transactions} total transactions"
        )
        return summary
