r"""Retry decision logic for classifying the outcome of an attempt.

This module provides the RetryDecider class that decides, from the
response or transport error of one attempt, whether the retry loop
stops or tries again.
"""

from __future__ import annotations

__all__ = ["RetryDecider", "is_retryable_status"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

# 429: Too Many Requests - treated like a server error
TOO_MANY_REQUESTS = 429

# Every status code from this one upward is retried
SERVER_ERROR_THRESHOLD = 500


def is_retryable_status(status_code: int) -> bool:
    """Indicate whether a response status code triggers a retry.

    Args:
        status_code: The HTTP status code.

    Returns:
        ``True`` for server errors (>= 500) and rate limiting (429).

    Example:
        ```pycon
        >>> from failaware.retry.decider import is_retryable_status
        >>> is_retryable_status(503), is_retryable_status(429), is_retryable_status(404)
        (True, True, False)

        ```
    """
    return status_code >= SERVER_ERROR_THRESHOLD or status_code == TOO_MANY_REQUESTS


class RetryDecider:
    """Decides whether an attempt is terminal or retryable.

    Every outcome falls in exactly one of two classes:

    - terminal: no transport error and a status code below 500 other
      than 429. Client errors (4xx) are terminal too; the response is
      handed back unchanged and the caller inspects its status.
    - retryable: a transport error, a status code >= 500, or 429.

    Example:
        ```pycon
        >>> import httpx
        >>> from failaware.retry import RetryDecider
        >>> decider = RetryDecider()
        >>> decider.should_retry(httpx.Response(400), None)
        (False, 'status 400')
        >>> decider.should_retry(httpx.Response(503), None)
        (True, 'status 503')
        >>> decider.should_retry(None, httpx.ConnectError("refused"))
        (True, 'ConnectError')

        ```
    """

    def should_retry(
        self,
        response: httpx.Response | None,
        error: Exception | None,
    ) -> tuple[bool, str]:
        """Classify the outcome of one attempt.

        Args:
            response: The response of the attempt, if any.
            error: The transport error of the attempt, if any.

        Returns:
            Tuple of (should_retry, reason).
        """
        if error is not None:
            return (True, type(error).__name__)
        if response is None:
            # The transport returned neither a response nor an error
            return (True, "no response")
        return (is_retryable_status(response.status_code), f"status {response.status_code}")
