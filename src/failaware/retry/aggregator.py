r"""Per-attempt records and assembly of the final structured error.

The FailureAggregator follows one call of the retry loop: it keeps the
last outcome, optionally the full attempt history, and builds the
``RetriesExhaustedError`` or ``RequestCancelledError`` raised when the
loop ends without a terminal response.
"""

from __future__ import annotations

__all__ = ["AttemptRecord", "FailureAggregator"]

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from failaware.exceptions import RequestCancelledError, RetriesExhaustedError

if TYPE_CHECKING:
    import httpx


@dataclass(frozen=True)
class AttemptRecord:
    """Outcome of one attempt.

    Attributes:
        error: The transport error raised by the attempt, if any.
        response: The response received by the attempt, if any.
        started_at: Timestamp (``time.time()``) when the attempt started.
        finished_at: Timestamp (``time.time()``) when the attempt ended.
    """

    error: Exception | None
    response: httpx.Response | None
    started_at: float
    finished_at: float

    @property
    def duration(self) -> float:
        """The duration of the attempt in seconds."""
        return self.finished_at - self.started_at

    def describe(self) -> str:
        """Return a one-line human readable summary of the attempt."""
        if self.error is not None:
            outcome = f"{type(self.error).__name__}: {self.error}"
        elif self.response is not None:
            outcome = f"status {self.response.status_code}"
        else:
            outcome = "no response"
        return f"{outcome} (took {self.duration * 1000:.1f}ms)"


class FailureAggregator:
    """Collect the outcomes of the attempts of one call.

    Args:
        method: The HTTP method of the call.
        url: The URL of the call.
        keep_log: If ``True``, every attempt is stored as an
            ``AttemptRecord``; otherwise only the last outcome is kept.

    Example:
        ```pycon
        >>> import time
        >>> from failaware.retry.aggregator import FailureAggregator
        >>> aggregator = FailureAggregator("GET", "https://example.com", keep_log=True)
        >>> record = aggregator.record(ConnectionError("refused"), None, time.time())
        >>> aggregator.retries
        1
        >>> error = aggregator.exhausted()
        >>> error.retries, len(error.attempts)
        (1, 1)

        ```
    """

    def __init__(self, method: str, url: str, keep_log: bool = False) -> None:
        self.method = method
        self.url = url
        self.keep_log = keep_log
        self.retries = 0
        self.last_error: Exception | None = None
        self.last_response: httpx.Response | None = None
        self._attempts: list[AttemptRecord] = []

    @property
    def attempts(self) -> tuple[AttemptRecord, ...]:
        """The recorded attempts, in order."""
        return tuple(self._attempts)

    def record(
        self,
        error: Exception | None,
        response: httpx.Response | None,
        started_at: float,
    ) -> AttemptRecord:
        """Record the outcome of one attempt, finished now.

        Args:
            error: The transport error of the attempt, if any.
            response: The response of the attempt, if any.
            started_at: Timestamp when the attempt started.

        Returns:
            The record of the attempt.
        """
        record = AttemptRecord(
            error=error,
            response=response,
            started_at=started_at,
            finished_at=max(time.time(), started_at),
        )
        self.retries += 1
        self.last_error = error
        self.last_response = response
        if self.keep_log:
            self._attempts.append(record)
        return record

    def exhausted(self) -> RetriesExhaustedError:
        """Build the error describing a loop that ran out of attempts."""
        cause = (
            f"last error: {self.last_error}"
            if self.last_error is not None
            else f"last status: {_status(self.last_response)}"
        )
        return RetriesExhaustedError(
            method=self.method,
            url=self.url,
            message=(
                f"{self.method} request to {self.url} failed after "
                f"{self.retries} attempts ({cause})"
            ),
            retries=self.retries,
            attempts=self._attempts,
            last_error=self.last_error,
            response=self.last_response,
        )

    def cancelled(self) -> RequestCancelledError:
        """Build the error describing a loop interrupted by cancellation."""
        return RequestCancelledError(
            method=self.method,
            url=self.url,
            message=(
                f"{self.method} request to {self.url} was cancelled after "
                f"{self.retries} attempts"
            ),
            retries=self.retries,
            attempts=self._attempts,
            last_error=self.last_error,
            response=self.last_response,
        )


def _status(response: httpx.Response | None) -> str:
    return "none" if response is None else str(response.status_code)
