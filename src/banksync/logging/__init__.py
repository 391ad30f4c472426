"""Logging setup for BankSync."""

from .config import LoggingConfig, setup_logging

__all__ = ["LoggingConfig", "setup_logging"]
