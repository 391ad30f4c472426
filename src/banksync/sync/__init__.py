"""Concurrent multi-account synchronization pipeline."""

from .orchestrator import BatchOrchestrator
from .processor import AccountProcessor, TransactionSink
from .runner import run_batch

__all__ = ["AccountProcessor", "BatchOrchestrator", "TransactionSink", "run_batch"]
