"""Centralized configuration management for BankSync.

Settings are loaded with Pydantic Settings from ``BANKSYNC_``-prefixed
environment variables (nested sections use double underscores, e.g.
``BANKSYNC_RETRY__MAX_ATTEMPTS``) and from a ``.env`` file. The plain
variable names used by earlier deployments (``API_URL``, ``BANK_ACCOUNTS``,
``MAX_RETRIES``, ``RETRY_DELAY_MS``, ``DUCKDB_PATH``) are still honored.
"""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from banksync.models import BankAccount
from banksync.utils.retry import RetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class ApiConfig(BaseModel):
    """Bank API transport settings."""

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default="", description="Base URL of the bank API")
    timeout: float = Field(
        default=30.0, gt=0, le=300, description="Per-request timeout in seconds"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent header sent on every request"
    )


class DatabaseConfig(BaseModel):
    """Database configuration settings."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(
        default=Path("data/duckdb/banksync.duckdb"),
        description="Path to DuckDB database file",
    )
    table_name: str = Field(
        default="transactions", description="Table receiving transaction records"
    )
    create_dirs: bool = Field(
        default=True, description="Automatically create database directories"
    )

    @field_validator("path")
    @classmethod
    def validate_database_path(cls, v: Path) -> Path:
        """Ensure database path has correct extension."""
        if not str(v).endswith((".db", ".duckdb")):
            raise ValueError("Database path must end with .db or .duckdb")
        return v

    @field_validator("table_name")
    @classmethod
    def validate_table_name(cls, v: str) -> str:
        """Table name is interpolated into SQL, so it must be a plain identifier."""
        if not v.isidentifier():
            raise ValueError(f"Invalid table name: {v}")
        return v


class SyncConfig(BaseModel):
    """Batch sync settings."""

    model_config = ConfigDict(frozen=True)

    accounts: str = Field(
        default="", description="Comma separated username:password pairs"
    )
    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Maximum accounts processed at once (unbounded when unset)",
    )


class BankSyncSettings(BaseSettings):
    """Main application settings with environment variable integration.

    Environment variables are loaded with the BANKSYNC_ prefix.
    For nested configs, use double underscores: BANKSYNC_DATABASE__PATH
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    retry: RetryPolicy = Field(default_factory=RetryPolicy)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="BANKSYNC_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    def __init__(self, **kwargs: Any):
        """Initialize settings with legacy environment variable overrides.

        Args:
            **kwargs: Additional configuration overrides
        """
        if "api" not in kwargs:
            api_url = os.getenv("API_URL")
            if api_url:
                kwargs["api"] = ApiConfig(base_url=api_url)

        if "database" not in kwargs:
            duckdb_path = os.getenv("DUCKDB_PATH")
            if duckdb_path:
                kwargs["database"] = DatabaseConfig(path=Path(duckdb_path))

        if "retry" not in kwargs:
            retry_config: dict[str, Any] = {}
            max_retries = os.getenv("MAX_RETRIES")
            delay_ms = os.getenv("RETRY_DELAY_MS")

            if max_retries:
                retry_config["max_attempts"] = int(max_retries)
            if delay_ms:
                retry_config["delay"] = int(delay_ms) / 1000

            if retry_config:
                kwargs["retry"] = RetryPolicy(**retry_config)

        if "sync" not in kwargs:
            bank_accounts = os.getenv("BANK_ACCOUNTS")
            if bank_accounts:
                kwargs["sync"] = SyncConfig(accounts=bank_accounts)

        super().__init__(**kwargs)

    def create_directories(self) -> None:
        """Create necessary directories for the application."""
        self.database.path.parent.mkdir(parents=True, exist_ok=True)

    def get_accounts(self) -> list[BankAccount]:
        """Parse the configured account list.

        Raises:
            ValueError: If no account list is configured or none of it is valid
        """
        if not self.sync.accounts.strip():
            raise ValueError(
                "No accounts configured: set BANK_ACCOUNTS or BANKSYNC_SYNC__ACCOUNTS"
            )
        return parse_accounts(self.sync.accounts)


def parse_accounts(raw: str) -> list[BankAccount]:
    """Parse ``user1:pass1,user2:pass2`` into accounts.

    Pairs are split on the first colon, so passwords may contain colons.
    Malformed pairs are skipped with a warning.

    Args:
        raw: Comma separated username:password pairs

    Returns:
        list[BankAccount]: Accounts in the order they were listed

    Raises:
        ValueError: If no valid account remains
    """
    accounts: list[BankAccount] = []

    for pair in raw.split(","):
        username, _, password = pair.strip().partition(":")
        username, password = username.strip(), password.strip()

        if not username or not password:
            logger.warning(f"Invalid account format: {pair.strip()!r}")
            continue

        accounts.append(BankAccount(username=username, password=password))

    if not accounts:
        raise ValueError("No valid accounts found in account configuration")

    logger.info(f"Received {len(accounts)} accounts from configuration")
    return accounts


_settings: BankSyncSettings | None = None


def get_settings() -> BankSyncSettings:
    """Get the cached settings instance, loading it on first use.

    Returns:
        BankSyncSettings: The configuration instance

    Raises:
        ValueError: If configuration is invalid
    """
    global _settings

    if _settings is not None:
        return _settings

    # Legacy variables are read with os.getenv, so .env has to reach os.environ
    load_dotenv()

    try:
        settings = BankSyncSettings()

        if settings.database.create_dirs:
            settings.create_directories()

    except Exception as e:
        raise ValueError(f"Configuration error: {e}") from e

    _settings = settings
    return settings


def reload_settings() -> BankSyncSettings:
    """Reload settings from environment variables.

    Returns:
        BankSyncSettings: The reloaded configuration instance
    """
    clear_settings_cache()
    return get_settings()


def clear_settings_cache() -> None:
    """Forget the cached settings so the next access reloads them."""
    global _settings
    _settings = None
