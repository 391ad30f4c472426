"""Nonce/hash login handshake against the bank API.

The raw password never leaves the client. Each login attempt:

1. fetches a single-use nonce from ``/api/nonce``
2. hashes ``username:password:nonce`` with SHA-256
3. posts ``{username, nonce, hash}`` to ``/api/login`` for a session token
4. checks the token against ``/api/whoami`` before handing it out

Nonces are single-use, so a retry restarts the whole handshake instead of
resubmitting step 3 with a stale nonce.
"""

import hashlib
import logging

import httpx

from banksync.models import BankAccount, LoginResult
from banksync.utils.retry import RetryExecutor

from .errors import AuthRejectedError, InvalidResponseError, TokenInvalidError
from .schemas import LoginResponse, NonceResponse, decode_response

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def derive_hash(username: str, password: str, nonce: str) -> str:
    """Return the lowercase hex SHA-256 of ``username:password:nonce``."""
    payload = f"{username}:{password}:{nonce}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AuthenticationFlow:
    """Obtain validated session tokens for bank accounts."""

    def __init__(self, client: httpx.AsyncClient, retry: RetryExecutor):
        """Initialize the flow.

        Args:
            client: Shared HTTP client bound to the API base URL
            retry: Executor wrapping each handshake attempt
        """
        self.client = client
        self.retry = retry

    async def login(self, account: BankAccount) -> LoginResult:
        """Log in to one account.

        Never raises: any failure, including retry exhaustion, is returned as
        an unsuccessful :class:`LoginResult` carrying the last error message.
        """
        logger.info(f"Attempting login for user: {account.username}")

        try:
            token = await self.retry.execute(
                lambda: self._handshake(account),
                label=f"login {account.username}",
            )
        except Exception as e:
            error_message = str(e) or type(e).__name__
            logger.error(f"Login error for {account.username}: {error_message}")
            return LoginResult(success=False, error_message=error_message)

        logger.info(f"Login successful for {account.username}")
        return LoginResult(success=True, token=token)

    async def _handshake(self, account: BankAccount) -> str:
        nonce = await self._fetch_nonce()
        credential_hash = derive_hash(account.username, account.password, nonce)

        response = await self.client.post(
            "/api/login",
            json={
                "username": account.username,
                "nonce": nonce,
                "hash": credential_hash,
            },
        )
        response.raise_for_status()
        login = decode_response(
            response,
            LoginResponse,
            AuthRejectedError,
            "Login failed - invalid credentials",
        )

        await self._validate_token(login.token)
        return login.token

    async def _fetch_nonce(self) -> str:
        logger.debug("Fetching nonce from /api/nonce")
        response = await self.client.get("/api/nonce", headers=NO_CACHE_HEADERS)
        response.raise_for_status()
        nonce = decode_response(
            response, NonceResponse, InvalidResponseError, "Invalid nonce response"
        ).nonce
        logger.debug(f"Received nonce: {nonce[:10]}...")
        return nonce

    async def _validate_token(self, token: str) -> None:
        response = await self.client.get("/api/whoami", params={"token": token})
        if response.status_code != httpx.codes.OK:
            raise TokenInvalidError(
                f"Token validation failed with status {response.status_code}"
            )
