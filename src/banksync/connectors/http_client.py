"""Shared HTTP transport for the bank API."""

import httpx

from banksync.config import ApiConfig

JSON_HEADERS = {"Content-Type": "application/json"}


def create_http_client(
    config: ApiConfig, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Build the async client every connector shares.

    Args:
        config: API base URL, timeout and user agent
        transport: Optional transport override, used by tests

    Returns:
        httpx.AsyncClient: Client bound to the configured base URL
    """
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=config.timeout,
        headers={**JSON_HEADERS, "User-Agent": config.user_agent},
        transport=transport,
    )
