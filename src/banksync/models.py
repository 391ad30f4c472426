"""Core data models for a sync run.

Accounts come in, transaction records flow through to the store, and every
account ends up as exactly one :class:`AccountOutcome` inside the run's
:class:`BatchSummary`.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class BankAccount(BaseModel):
    """Login credentials for one remote bank account."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)


class TransactionRecord(BaseModel):
    """A normalized transaction ready to be persisted."""

    model_config = ConfigDict(frozen=True)

    username: str
    transaction_date: datetime
    description: str
    amount: Decimal
    scraped_at: datetime


class LoginResult(BaseModel):
    """Result of one authentication handshake."""

    model_config = ConfigDict(frozen=True)

    success: bool
    token: str | None = None
    error_message: str | None = None


class AccountOutcome(BaseModel):
    """Per-account result, produced whichever stage failed."""

    model_config = ConfigDict(frozen=True)

    username: str
    success: bool
    transaction_count: int = Field(default=0, ge=0)
    error: str | None = None

    @classmethod
    def failed(cls, username: str, error: str) -> "AccountOutcome":
        """Build a failed outcome carrying ``error``."""
        return cls(username=username, success=False, transaction_count=0, error=error)


class BatchSummary(BaseModel):
    """Aggregated result of one batch run."""

    model_config = ConfigDict(frozen=True)

    total_accounts: int
    successful_accounts: int
    failed_accounts: int
    total_transactions: int
    outcomes: list[AccountOutcome]

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[AccountOutcome]) -> "BatchSummary":
        """Reduce per-account outcomes into a summary, keeping their order."""
        successful = sum(1 for outcome in outcomes if outcome.success)
        return cls(
            total_accounts=len(outcomes),
            successful_accounts=successful,
            failed_accounts=len(outcomes) - successful,
            total_transactions=sum(o.transaction_count for o in outcomes),
            outcomes=list(outcomes),
        )
