r"""Exceptions raised by the fail-aware HTTP client.

Every failure is surfaced to the caller as an exception value; nothing
is fatal to the process. Intermediate retryable failures are never
raised individually: they are recorded and attached to the final
``RetryFailedError``.
"""

from __future__ import annotations

__all__ = [
    "BodyReadError",
    "FailAwareError",
    "RequestCancelledError",
    "RetriesExhaustedError",
    "RetryFailedError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

    from failaware.retry.aggregator import AttemptRecord


class FailAwareError(Exception):
    """Base class of the errors raised by failaware.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: The error message.
    """

    def __init__(self, method: str, url: str, message: str) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class BodyReadError(FailAwareError):
    """Raised when the request body cannot be read into memory.

    The body is captured before the first attempt, so no request was
    sent when this error is raised.
    """


class RetryFailedError(FailAwareError):
    """Structured failure of a retried request.

    The error carries the full history of the call so callers can
    inspect what happened on each attempt.

    Args:
        method: The HTTP method of the failed request.
        url: The URL of the failed request.
        message: The error message.
        retries: The number of attempts actually performed.
        attempts: The per-attempt records, in order. Empty unless the
            client was configured with ``keep_log=True``.
        last_error: The transport error of the last attempt, if any.
        response: The response of the last attempt, if any.

    Example:
        ```pycon
        >>> from failaware.exceptions import RetriesExhaustedError
        >>> error = RetriesExhaustedError(
        ...     method="GET", url="https://example.com", message="boom", retries=3
        ... )
        >>> error.retries
        3
        >>> error.attempts
        ()

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        *,
        retries: int,
        attempts: Sequence[AttemptRecord] = (),
        last_error: Exception | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(method=method, url=url, message=message)
        self.retries = retries
        self.attempts = tuple(attempts)
        self.last_error = last_error
        self.response = response
        if last_error is not None:
            self.__cause__ = last_error

    @property
    def status_code(self) -> int | None:
        """The status code of the last response, if any."""
        return None if self.response is None else self.response.status_code

    def __str__(self) -> str:
        lines = [super().__str__()]
        lines.extend(
            f"  attempt {i}: {record.describe()}" for i, record in enumerate(self.attempts, 1)
        )
        return "\n".join(lines)


class RetriesExhaustedError(RetryFailedError):
    """Raised when every attempt of the retry loop ended with a
    retryable outcome."""


class RequestCancelledError(RetryFailedError):
    """Raised when the caller's cancel signal interrupts the retry loop.

    ``retries`` holds the number of attempts completed before the signal
    was observed, which can be zero.
    """
