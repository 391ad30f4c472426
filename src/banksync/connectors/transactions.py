"""Fetch and normalize recent transactions for an authenticated account."""

import logging
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import ValidationError

from banksync.models import TransactionRecord
from banksync.utils.retry import RetryExecutor

from .errors import InvalidResponseError, TransactionFetchError
from .schemas import RawTransaction, TransactionsResponse, decode_response

logger = logging.getLogger(__name__)

# Provider returns newest first; only this many are kept per run
TRANSACTION_BATCH_SIZE = 10


class TransactionFetcher:
    """Retrieve an account's most recent transactions."""

    def __init__(self, client: httpx.AsyncClient, retry: RetryExecutor):
        self.client = client
        self.retry = retry

    async def fetch_transactions(
        self, username: str, token: str
    ) -> list[TransactionRecord]:
        """Fetch and normalize up to ``TRANSACTION_BATCH_SIZE`` transactions.

        Args:
            username: Account the token belongs to, copied onto every record
            token: Validated session token

        Returns:
            list[TransactionRecord]: Normalized records, provider order kept.
                An empty list is a valid result.

        Raises:
            TransactionFetchError: On any network, shape or retry failure
        """
        logger.info(f"Fetching transactions for user: {username}")

        try:
            payload = await self.retry.execute(
                lambda: self._request(token),
                label=f"fetch transactions for {username}",
            )
            records = [
                self._normalize(username, raw)
                for raw in payload.transactions[:TRANSACTION_BATCH_SIZE]
            ]
        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.error(f"Failed to fetch transactions for {username}: {error_message}")
            raise TransactionFetchError(username, error_message) from e

        logger.info(
            f"Successfully fetched {len(records)} transactions for {username}"
        )
        return records

    async def _request(self, token: str) -> TransactionsResponse:
        response = await self.client.get("/api/transactions", params={"token": token})
        response.raise_for_status()
        return decode_response(
            response,
            TransactionsResponse,
            InvalidResponseError,
            "Invalid response format",
        )

    @staticmethod
    def _normalize(username: str, raw: dict[str, Any]) -> TransactionRecord:
        try:
            entry = RawTransaction.model_validate(raw)
        except ValidationError as e:
            raise InvalidResponseError(f"Malformed transaction entry: {raw!r}") from e

        return TransactionRecord(
            username=username,
            transaction_date=entry.transaction_date,
            description=entry.description,
            amount=entry.amount,
            scraped_at=datetime.now(UTC).replace(tzinfo=None),
        )
