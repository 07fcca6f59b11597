r"""Synchronous fail-aware HTTP client.

This module provides the FailAwareClient facade: ``do`` sends an
arbitrary ``httpx.Request`` through the retry executor, and ``get`` /
``post`` are thin request builders on top of it.
"""

from __future__ import annotations

__all__ = ["FailAwareClient", "new_client", "new_default_client"]

from typing import TYPE_CHECKING, Any

import httpx

from failaware.core.config import ClientConfig
from failaware.retry.executor import RetryExecutor
from failaware.utils.body import BodyReplayer, close_body

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from failaware.utils.body import BodySource
    from failaware.utils.cancel import CancelSignal


class FailAwareClient:
    r"""HTTP client retrying transient failures.

    Transport errors, server errors (status >= 500) and rate limiting
    (429) are retried with a jittered exponential backoff. Every other
    response, client errors included, is returned as-is: callers check
    ``response.status_code`` themselves. When no attempt succeeds, a
    ``RetriesExhaustedError`` carrying the attempt history is raised.

    The configuration is resolved once at construction: every field left
    at its zero value takes the default value (3 attempts, 1s timeout per
    attempt, 1s backoff factor, no attempt log).

    Two usage patterns are supported, as for any ``httpx.Client``:

    .. code-block:: python

        import httpx
        from failaware import FailAwareClient, ClientConfig

        # FailAwareClient creates and closes its own httpx.Client
        with FailAwareClient(ClientConfig(max_retries=5)) as client:
            response = client.get("https://api.example.com/data")

        # The caller manages the httpx.Client lifecycle
        with httpx.Client(headers={"Authorization": "Bearer token"}) as http_client:
            with FailAwareClient(client=http_client) as client:
                response = client.get("https://api.example.com/data")

    Args:
        config: Optional ClientConfig. If ``None``, the defaults are used.
        client: Optional ``httpx.Client`` used as transport. If ``None``,
            a new client is created with the per-attempt timeout.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self._config: ClientConfig = (config or ClientConfig()).resolve()
        self._owns_client = client is None
        self._client: httpx.Client = client or httpx.Client(timeout=self._config.timeout)
        self._executor = RetryExecutor(client=self._client, config=self._config)

    @property
    def config(self) -> ClientConfig:
        """The resolved configuration of the client."""
        return self._config

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying ``httpx.Client`` if this client created
        it."""
        if self._owns_client and not self._client.is_closed:
            self._client.close()

    def do(self, request: httpx.Request, *, signal: CancelSignal | None = None) -> httpx.Response:
        r"""Send an arbitrary request and retry it on retryable errors.

        The request body is read into memory once before the first
        attempt and replayed for every attempt. The original body stream
        is released on every exit path.

        Args:
            request: The request to send.
            signal: Optional cancellation signal, observed before every
                attempt and during every backoff wait.

        Returns:
            The response of the first terminal attempt.

        Raises:
            BodyReadError: If the request body cannot be read.
            RetriesExhaustedError: If no attempt got a terminal outcome.
            RequestCancelledError: If the signal was cancelled.

        Example:
            ```pycon
            >>> import httpx
            >>> from failaware import new_default_client
            >>> with new_default_client() as client:  # doctest: +SKIP
            ...     request = httpx.Request("PUT", "https://api.example.com/data", json={"a": 1})
            ...     response = client.do(request)
            ...

            ```
        """
        try:
            replayer = BodyReplayer.capture(request)
            return self._executor.execute(request, replayer, signal=signal)
        finally:
            close_body(request)

    def request(
        self,
        method: str,
        url: str,
        *,
        content: BodySource = None,
        signal: CancelSignal | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        r"""Build a request and send it with ``do``.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, ...).
            url: The URL to send the request to.
            content: Optional body: bytes, str, a file-like object or an
                iterable of byte chunks. A file-like body is closed once
                the call ends.
            signal: Optional cancellation signal.
            **kwargs: Additional keyword arguments passed to
                ``httpx.Client.build_request()`` (headers, params, ...).

        Returns:
            The response of the first terminal attempt.
        """
        try:
            body = BodyReplayer.capture(content, method=method, url=url).body
            request = self._client.build_request(method, url, content=body, **kwargs)
            return self.do(request, signal=signal)
        finally:
            close_body(content)

    def get(self, url: str, *, signal: CancelSignal | None = None, **kwargs: Any) -> httpx.Response:
        r"""Send a GET request without body.

        Args:
            url: The URL to send the GET request to.
            signal: Optional cancellation signal.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The response of the first terminal attempt.

        Example:
            ```pycon
            >>> from failaware import new_default_client
            >>> with new_default_client() as client:  # doctest: +SKIP
            ...     response = client.get("https://api.example.com/data")
            ...

            ```
        """
        return self.request("GET", url, signal=signal, **kwargs)

    def post(
        self,
        url: str,
        content_type: str,
        body: BodySource = None,
        *,
        signal: CancelSignal | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        r"""Send a POST request with the given content type and body.

        Args:
            url: The URL to send the POST request to.
            content_type: The value of the ``Content-Type`` header.
            body: Optional body (see request() method).
            signal: Optional cancellation signal.
            **kwargs: Additional keyword arguments (see request() method).

        Returns:
            The response of the first terminal attempt.

        Example:
            ```pycon
            >>> from failaware import new_default_client
            >>> with new_default_client() as client:  # doctest: +SKIP
            ...     response = client.post(
            ...         "https://api.example.com/data", "application/json", b'{"key": "value"}'
            ...     )
            ...

            ```
        """
        headers = httpx.Headers(kwargs.pop("headers", None))
        headers["Content-Type"] = content_type
        return self.request("POST", url, content=body, signal=signal, headers=headers, **kwargs)


def new_client(config: ClientConfig | None = None, **kwargs: Any) -> FailAwareClient:
    r"""Create a FailAwareClient.

    Args:
        config: Optional ClientConfig. Zero-valued fields take the
            default values.
        **kwargs: Additional keyword arguments passed to FailAwareClient.

    Returns:
        The new client.
    """
    return FailAwareClient(config, **kwargs)


def new_default_client() -> FailAwareClient:
    r"""Create a FailAwareClient with the default configuration.

    Returns:
        A client performing 3 attempts with a 1s timeout per attempt and
        a 1s backoff factor, without attempt log.

    Example:
        ```pycon
        >>> from failaware import new_default_client
        >>> with new_default_client() as client:
        ...     client.config.max_retries, client.config.timeout
        ...
        (3, 1.0)

        ```
    """
    return FailAwareClient()
