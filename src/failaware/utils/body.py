r"""Request body capture and replay.

A request body can only be streamed once, so it is read into memory
before the first attempt and a fresh request with a fresh byte stream is
built for every attempt: every attempt sends exactly the same bytes.
The whole body is buffered in memory.
"""

from __future__ import annotations

__all__ = ["BodyReplayer", "close_body"]

import logging
from typing import IO, TYPE_CHECKING, Any, Union

import httpx

from failaware.exceptions import BodyReadError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger: logging.Logger = logging.getLogger(__name__)

BodySource = Union[bytes, str, IO[Any], "Iterable[bytes]", httpx.Request, None]

# Headers describing the framing of the original body, recomputed for each
# replayed request
_FRAMING_HEADERS = frozenset({"content-length", "transfer-encoding"})


class BodyReplayer:
    """Hold a request body captured once and replay it for each attempt.

    Args:
        body: The captured body, or ``None`` if the request has no body.

    Example:
        ```pycon
        >>> import httpx
        >>> from failaware.utils.body import BodyReplayer
        >>> replayer = BodyReplayer.capture(b"payload")
        >>> template = httpx.Request("POST", "https://example.com")
        >>> replayer.replay(template).read()
        b'payload'
        >>> replayer.replay(template).read()
        b'payload'

        ```
    """

    def __init__(self, body: bytes | None = None) -> None:
        self._body = body

    @property
    def body(self) -> bytes | None:
        """The captured body, or ``None`` if there is no body."""
        return self._body

    @classmethod
    def capture(
        cls, source: BodySource, *, method: str = "", url: str = ""
    ) -> BodyReplayer:
        """Read a body source into memory exactly once.

        Args:
            source: The body to capture. Supported sources are ``None``,
                ``bytes``, ``str`` (UTF-8 encoded), a file-like object,
                an iterable of byte chunks, or an ``httpx.Request``.
            method: The HTTP method, used in error messages.
            url: The URL, used in error messages.

        Returns:
            A replayer holding the captured body.

        Raises:
            BodyReadError: If reading the source fails.
        """
        if isinstance(source, httpx.Request):
            method = method or source.method
            url = url or str(source.url)
        try:
            body = _read_source(source)
        except (OSError, httpx.StreamError) as exc:
            msg = f"failed to read the body of the {method} request to {url}: {exc}"
            raise BodyReadError(method=method, url=url, message=msg) from exc
        if body is not None:
            logger.debug(f"Captured {len(body)} byte(s) of {method} request body")
        return cls(body)

    def replay(self, template: httpx.Request, timeout: float | None = None) -> httpx.Request:
        """Build a fresh request for one attempt.

        The new request copies the method, URL, headers and extensions of
        ``template`` and carries its own byte stream positioned at offset
        zero, so no attempt can observe a body consumed by a previous one.

        Args:
            template: The original request.
            timeout: Optional per-attempt timeout in seconds, written in
                the ``timeout`` extension of the new request.

        Returns:
            A new ``httpx.Request`` ready to be sent.
        """
        headers = [
            (key, value)
            for key, value in template.headers.multi_items()
            if key.lower() not in _FRAMING_HEADERS
        ]
        extensions = dict(template.extensions)
        if timeout is not None:
            extensions["timeout"] = httpx.Timeout(timeout).as_dict()
        return httpx.Request(
            method=template.method,
            url=template.url,
            headers=headers,
            content=self._body,
            extensions=extensions,
        )


def close_body(source: BodySource) -> None:
    """Release the resources held by a body source.

    Args:
        source: The body source passed to ``BodyReplayer.capture``.
    """
    if isinstance(source, httpx.Request):
        stream = source.stream
        if isinstance(stream, httpx.SyncByteStream):
            stream.close()
        return
    close = getattr(source, "close", None)
    if callable(close):
        close()


def _read_source(source: BodySource) -> bytes | None:
    if source is None:
        return None
    if isinstance(source, httpx.Request):
        if "Content-Length" not in source.headers and "Transfer-Encoding" not in source.headers:
            return None
        return source.read()
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    if isinstance(source, str):
        return source.encode("utf-8")
    if hasattr(source, "read"):
        data = source.read()
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)
    return b"".join(source)
