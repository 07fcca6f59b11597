r"""Retry package implementing the attempt loop by composition.

Public API:
    - RetryDecider: Classification of an attempt as terminal or retryable
    - AttemptRecord: Outcome of one attempt
    - FailureAggregator: Attempt history and final error assembly
    - RetryExecutor: Synchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "AttemptRecord",
    "FailureAggregator",
    "RetryDecider",
    "RetryExecutor",
    "is_retryable_status",
]

from failaware.retry.aggregator import AttemptRecord, FailureAggregator
from failaware.retry.decider import RetryDecider, is_retryable_status
from failaware.retry.executor import RetryExecutor
