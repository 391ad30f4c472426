"""Pydantic schemas for bank API responses.

Responses are decoded into these models instead of poking at raw JSON so a
missing or mistyped field surfaces as a single structured error.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import BankSyncError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class NonceResponse(BaseSchema):
    """Payload of ``GET /api/nonce``."""

    nonce: str = Field(..., min_length=1)


class LoginResponse(BaseSchema):
    """Payload of ``POST /api/login``."""

    ok: bool
    token: str = Field(..., min_length=1)

    @field_validator("ok")
    @classmethod
    def require_ok(cls, v: bool) -> bool:
        """Reject explicit ``ok: false`` answers."""
        if not v:
            raise ValueError("login not acknowledged")
        return v


class RawTransaction(BaseSchema):
    """One transaction entry as the provider sends it."""

    transaction_date: datetime = Field(..., alias="date")
    description: str = Field(..., alias="desc")
    # Same precision as the amount column in TransactionStore
    amount: Decimal = Field(..., max_digits=38, decimal_places=10)

    @field_validator("transaction_date")
    @classmethod
    def to_naive_utc(cls, v: datetime) -> datetime:
        """Store every date as naive UTC so DuckDB TIMESTAMP columns line up."""
        if v.tzinfo is not None:
            return v.astimezone(UTC).replace(tzinfo=None)
        return v


class TransactionsResponse(BaseSchema):
    """Payload of ``GET /api/transactions``.

    Individual entries are kept raw here and validated one by one during
    normalization, since only the first few are ever used.
    """

    ok: bool
    transactions: list[dict[str, Any]]

    @field_validator("ok")
    @classmethod
    def require_ok(cls, v: bool) -> bool:
        """Reject explicit ``ok: false`` answers."""
        if not v:
            raise ValueError("transactions request not acknowledged")
        return v


def decode_response(
    response: httpx.Response,
    schema: type[SchemaT],
    error_cls: type[BankSyncError],
    message: str,
) -> SchemaT:
    """Decode a JSON response body into ``schema``.

    Args:
        response: HTTP response to decode
        schema: Pydantic model describing the expected payload
        error_cls: Error type raised when the payload does not match
        message: Prefix for the raised error's message

    Returns:
        The validated payload

    Raises:
        BankSyncError: ``error_cls`` when the body is not JSON or does not match
    """
    try:
        payload = response.json()
    except ValueError as e:
        raise error_cls(f"{message}: response body is not JSON") from e

    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "body" for err in e.errors()
        )
        raise error_cls(f"{message}: missing or invalid {fields}") from e
