"""BankSync CLI package.

This package provides the command-line interface for running syncs and
inspecting the local transaction database.
"""

from .main import app, main

__all__ = ["app", "main"]
