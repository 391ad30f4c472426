"""Shared pytest fixtures for banksync tests."""

from collections.abc import Generator

import pytest
from fakes import FakeBankApi, raw_transactions

from banksync.config import clear_settings_cache
from banksync.utils.retry import RetryExecutor, RetryPolicy


@pytest.fixture(autouse=True)
def clean_settings_state() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def bank_api() -> FakeBankApi:
    """Fake bank API with two users, alice with 15 transactions."""
    return FakeBankApi(
        users={"alice": "secret", "bob": "hunter2"},
        transactions={"alice": raw_transactions(15), "bob": []},
    )


@pytest.fixture
def fast_retry() -> RetryExecutor:
    """Retry executor with three attempts and no delay."""
    return RetryExecutor(RetryPolicy(max_attempts=3, delay=0))
