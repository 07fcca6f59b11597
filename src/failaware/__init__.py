r"""failaware - Fail-aware HTTP client with automatic retry logic.

This package wraps a synchronous ``httpx.Client`` with a retry loop that
decides whether each outcome is terminal or retryable, replays the
request body on every attempt, paces retries with exponential backoff
plus jitter, and raises a structured, inspectable error when every
attempt failed.

Key Features:
    - Automatic retry of transport errors, server errors (>= 500) and 429
    - Client errors (4xx) returned as-is, without wrapping
    - Request body buffered once and replayed identically on each attempt
    - Exponential backoff with +/- 1/3 jitter and a seedable random source
    - Structured failure with the per-attempt history (``keep_log=True``)
    - Cancellation signal observed before attempts and during backoff waits

Example:
    ```pycon
    >>> from failaware import ClientConfig, new_client
    >>> with new_client(ClientConfig(max_retries=5, keep_log=True)) as client:  # doctest: +SKIP
    ...     response = client.get("https://api.example.com/data")
    ...     response = client.post("https://api.example.com/data", "application/json", b"{}")
    ...

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptRecord",
    "BodyReadError",
    "CancelSignal",
    "ClientConfig",
    "FailAwareClient",
    "FailAwareError",
    "RequestCancelledError",
    "RetriesExhaustedError",
    "RetryFailedError",
    "__version__",
    "configure_logging",
    "new_client",
    "new_default_client",
]

from importlib.metadata import PackageNotFoundError, version

from failaware.client import FailAwareClient, new_client, new_default_client
from failaware.core.config import ClientConfig
from failaware.exceptions import (
    BodyReadError,
    FailAwareError,
    RequestCancelledError,
    RetriesExhaustedError,
    RetryFailedError,
)
from failaware.retry.aggregator import AttemptRecord
from failaware.utils.cancel import CancelSignal
from failaware.utils.structured_logging import configure_logging

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
