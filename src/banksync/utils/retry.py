"""Bounded retry for asynchronous network operations.

Every remote call made during a sync goes through :class:`RetryExecutor`.
Attempts run sequentially with a fixed pause between them; there is no
exponential backoff and no jitter.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """How many times to attempt an operation and how long to wait in between."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(
        default=3, ge=1, description="Total attempts, including the first one"
    )
    delay: float = Field(
        default=2.0, ge=0.0, description="Fixed pause between attempts in seconds"
    )


class RetryExecutor:
    """Run a zero-argument coroutine factory until it succeeds or attempts run out."""

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the executor.

        Args:
            policy: Default policy for calls that do not pass their own
            sleep: Awaitable used for the inter-attempt pause
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        label: str = "operation",
        policy: RetryPolicy | None = None,
    ) -> T:
        """Await ``operation()`` with bounded retries.

        Args:
            operation: Callable returning a fresh awaitable for every attempt
            label: Human readable name used in log messages
            policy: Per-call override of the executor's default policy

        Returns:
            The value produced by the first successful attempt

        Raises:
            Exception: The error raised by the final attempt
        """
        policy = policy or self.policy
        last_error: Exception | None = None

        for attempt in range(1, policy.max_attempts + 1):
            try:
                logger.debug(f"Attempting {label}, try {attempt}/{policy.max_attempts}")
                return await operation()
            except Exception as e:
                last_error = e
                logger.warning(f"{label} failed on attempt {attempt}: {e}")

                if attempt < policy.max_attempts:
                    logger.debug(f"Waiting {policy.delay}s before retrying {label}")
                    await self._sleep(policy.delay)

        logger.error(f"{label} failed after {policy.max_attempts} attempts")
        # RetryPolicy guarantees max_attempts >= 1, so last_error is set here
        raise last_error  # type: ignore[misc]
