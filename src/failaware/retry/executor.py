r"""Synchronous retry executor for HTTP requests.

This module provides the RetryExecutor class that runs the attempt loop
of one call: it replays the request body, sends the request through the
injected ``httpx.Client``, classifies the outcome, waits with a jittered
exponential backoff between attempts, and raises a structured error when
the loop ends without a terminal response.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING

import httpx

from failaware.backoff import ExponentialJitterBackoff
from failaware.retry.aggregator import FailureAggregator
from failaware.retry.decider import RetryDecider

if TYPE_CHECKING:
    from failaware.core.config import ClientConfig
    from failaware.utils.body import BodyReplayer
    from failaware.utils.cancel import CancelSignal

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes HTTP requests with automatic retry logic.

    The executor orchestrates the following components:
    - BodyReplayer: Builds a fresh request with the captured body per attempt
    - RetryDecider: Classifies each attempt as terminal or retryable
    - ExponentialJitterBackoff: Calculates the wait between attempts
    - FailureAggregator: Records attempts and builds the final error

    The executor holds no per-call state, so one instance can serve
    concurrent calls from several threads.

    Args:
        client: The ``httpx.Client`` used as transport.
        config: The resolved client configuration.
        decider: Optional decider. Defaults to ``RetryDecider()``.
        backoff: Optional backoff strategy. Defaults to an
            ``ExponentialJitterBackoff`` built from
            ``config.backoff_delay_factor`` and ``config.rng``.

    Attributes:
        client: The transport.
        config: The resolved client configuration.
        decider: Logic for deciding whether to retry.
        backoff: Strategy for calculating retry delays.
        logger: Logger receiving the debug notices.

    Example:
        ```pycon
        >>> import httpx
        >>> from failaware.core import ClientConfig
        >>> from failaware.retry import RetryExecutor
        >>> from failaware.utils import BodyReplayer
        >>> with httpx.Client() as client:  # doctest: +SKIP
        ...     executor = RetryExecutor(client, ClientConfig().resolve())
        ...     request = client.build_request("GET", "https://api.example.com/data")
        ...     response = executor.execute(request, BodyReplayer.capture(request))
        ...

        ```
    """

    def __init__(
        self,
        client: httpx.Client,
        config: ClientConfig,
        decider: RetryDecider | None = None,
        backoff: ExponentialJitterBackoff | None = None,
    ) -> None:
        self.client = client
        self.config = config
        self.decider: RetryDecider = decider if decider is not None else RetryDecider()
        self.backoff: ExponentialJitterBackoff = (
            backoff
            if backoff is not None
            else ExponentialJitterBackoff(base_delay=config.backoff_delay_factor, rng=config.rng)
        )
        self.logger: logging.Logger = config.logger if config.logger is not None else logger

    @property
    def max_attempts(self) -> int:
        """The number of attempts of the loop, at least one."""
        return max(self.config.max_retries, 1)

    def execute(
        self,
        request: httpx.Request,
        replayer: BodyReplayer,
        signal: CancelSignal | None = None,
    ) -> httpx.Response:
        """Execute the request with retry logic.

        The loop performs up to ``max_attempts`` attempts:
        - Terminal responses (no error, status < 500 and != 429): Returned
          immediately, 4xx included
        - Retryable outcomes (transport error, status >= 500 or 429):
          Retried after the backoff wait, except after the last attempt
        - Cancellation: Checked before each attempt and during each wait

        Args:
            request: The original request, used as template for the
                request of each attempt.
            replayer: The captured request body.
            signal: Optional cancellation signal.

        Returns:
            The response of the terminal attempt.

        Raises:
            RetriesExhaustedError: If every attempt was retryable.
            RequestCancelledError: If the signal was cancelled.
        """
        method = request.method
        url = str(request.url)
        aggregator = FailureAggregator(method=method, url=url, keep_log=self.config.keep_log)

        for attempt in range(self.max_attempts):
            if signal is not None and signal.cancelled:
                self.logger.debug(f"{method} request to {url} cancelled before attempt {attempt + 1}")
                raise aggregator.cancelled()

            attempt_request = replayer.replay(request, timeout=self._attempt_timeout(signal))
            started_at = time.time()
            response: httpx.Response | None = None
            error: httpx.RequestError | None = None
            try:
                response = self.client.send(attempt_request)
            except httpx.RequestError as exc:
                error = exc
            aggregator.record(error, response, started_at)
            self.logger.debug(f"HTTP response: {response!r}, error: {error!r}")

            should_retry, reason = self.decider.should_retry(response, error)
            if not should_retry:
                return response

            if attempt == self.max_attempts - 1:
                break

            self.logger.debug(f"{method} request to {url}: will retry ({reason})")
            wait_time = self.backoff.calculate(attempt)
            if self._wait(wait_time, signal):
                self.logger.debug(f"{method} request to {url} cancelled during backoff")
                raise aggregator.cancelled()
            self.logger.debug(
                f"Retry #{attempt + 1} of {method} request to {url}, "
                f"waited {wait_time * 1000:.0f}ms before retry",
                extra={"attempt": attempt + 1, "wait_time": wait_time, "method": method, "url": url},
            )

        if signal is not None and signal.cancelled:
            self.logger.debug(f"{method} request to {url} cancelled during the last attempt")
            raise aggregator.cancelled()
        raise aggregator.exhausted()

    def _attempt_timeout(self, signal: CancelSignal | None) -> float:
        timeout = self.config.timeout
        remaining = None if signal is None else signal.remaining()
        if remaining is not None:
            timeout = min(timeout, remaining)
        return timeout

    @staticmethod
    def _wait(wait_time: float, signal: CancelSignal | None) -> bool:
        if signal is None:
            time.sleep(wait_time)
            return False
        return signal.wait(wait_time)
