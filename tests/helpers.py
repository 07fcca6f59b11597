r"""Shared test helpers for the fail-aware client tests.

This module contains a scripted in-memory transport and a local HTTP
server used across the unit and integration tests.
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

TEST_URL = "https://api.example.com/data"

# Nothing listens on port 1, so every connection is refused
UNREACHABLE_URL = "http://127.0.0.1:1/doesNotExist"


class RecordingTransport(httpx.MockTransport):
    """Transport replaying a script of outcomes and recording what it
    received.

    Each item of the script is either a status code, answered with a
    response carrying that status, or an exception instance, raised
    instead of answering. The last item is repeated once the script is
    exhausted.

    Args:
        outcomes: The scripted outcomes, in order.
    """

    def __init__(self, outcomes: Sequence[int | Exception]) -> None:
        super().__init__(self._handle)
        self.outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        index = min(len(self.requests), len(self.outcomes) - 1)
        self.requests.append(request)
        self.bodies.append(request.read())
        outcome = self.outcomes[index]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, text=f"{outcome} status code")


def make_client(transport: httpx.BaseTransport) -> httpx.Client:
    """Create an ``httpx.Client`` sending through ``transport``."""
    return httpx.Client(transport=transport)


def chunks(*parts: bytes) -> Iterator[bytes]:
    """Yield body chunks one by one, like a streamed upload."""
    yield from parts


class _StatusHandler(BaseHTTPRequestHandler):
    server: StatusServer

    def _reply(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        self.server.bodies.append(self.rfile.read(length))
        status = self.server.status_code
        payload = f"{status} status code".encode()
        self.send_response(status)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        self.wfile.write(payload)

    do_GET = _reply  # noqa: N815
    do_POST = _reply  # noqa: N815
    do_PUT = _reply  # noqa: N815

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        pass


class StatusServer(ThreadingHTTPServer):
    """Local HTTP server answering every request with one status code.

    Args:
        status_code: The status code of every response.
    """

    daemon_threads = True

    def __init__(self, status_code: int) -> None:
        super().__init__(("127.0.0.1", 0), _StatusHandler)
        self.status_code = status_code
        self.bodies: list[bytes] = []
        self._thread = threading.Thread(target=self.serve_forever, daemon=True)

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    def __enter__(self) -> StatusServer:
        self._thread.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.shutdown()
        self.server_close()
        self._thread.join()
