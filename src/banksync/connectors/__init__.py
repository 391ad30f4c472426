"""Bank API connectors."""

from .auth import AuthenticationFlow, derive_hash
from .errors import (
    AuthRejectedError,
    BankSyncError,
    InvalidResponseError,
    TokenInvalidError,
    TransactionFetchError,
)
from .http_client import create_http_client
from .transactions import TransactionFetcher

__all__ = [
    "AuthRejectedError",
    "AuthenticationFlow",
    "BankSyncError",
    "InvalidResponseError",
    "TokenInvalidError",
    "TransactionFetchError",
    "TransactionFetcher",
    "create_http_client",
    "derive_hash",
]
