r"""Integration tests of the FailAwareClient against real sockets.

These tests run a local HTTP server and use an unreachable local port,
so no external network access is needed.
"""

from __future__ import annotations

import random
import time

import httpx
import pytest

from failaware import (
    CancelSignal,
    ClientConfig,
    RequestCancelledError,
    RetriesExhaustedError,
    new_client,
    new_default_client,
)
from failaware.backoff import ExponentialJitterBackoff
from tests.helpers import UNREACHABLE_URL, StatusServer


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        max_retries=3,
        timeout=1.0,
        backoff_delay_factor=0.005,
        keep_log=True,
        rng=random.Random(666),
    )


def test_get_ok() -> None:
    with StatusServer(200) as server, new_default_client() as client:
        response = client.get(server.url)

    assert response.status_code == 200
    assert response.text == "200 status code"
    assert server.bodies == [b""]


def test_get_client_error_is_not_retried() -> None:
    with StatusServer(400) as server, new_default_client() as client:
        response = client.get(server.url)

    assert response.status_code == 400
    assert len(server.bodies) == 1


def test_post_sends_body() -> None:
    with StatusServer(200) as server, new_default_client() as client:
        response = client.post(server.url, "text/plain", b"dummyBody")

    assert response.status_code == 200
    assert server.bodies == [b"dummyBody"]


def test_server_error_exhausts_retries(config: ClientConfig) -> None:
    """Test that every retry of a POST carries the same body."""
    with (
        StatusServer(503) as server,
        new_client(config) as client,
        pytest.raises(RetriesExhaustedError) as exc_info,
    ):
        client.post(server.url, "application/json", b'{"key": "value"}')

    assert exc_info.value.retries == 3
    assert exc_info.value.status_code == 503
    assert server.bodies == [b'{"key": "value"}'] * 3


def test_do_replays_put_body(config: ClientConfig) -> None:
    with StatusServer(500) as server, new_client(config) as client:
        request = httpx.Request("PUT", server.url, content=b"dummyBody")
        with pytest.raises(RetriesExhaustedError):
            client.do(request)

    assert server.bodies == [b"dummyBody"] * 3


def test_unreachable_url(config: ClientConfig) -> None:
    """Test that connection failures are retried with increasing
    delays."""
    start = time.monotonic()
    with new_client(config) as client, pytest.raises(RetriesExhaustedError) as exc_info:
        client.get(UNREACHABLE_URL)
    elapsed = time.monotonic() - start

    error = exc_info.value
    assert error.retries == 3
    assert isinstance(error.last_error, httpx.ConnectError)
    assert error.response is None
    assert len(error.attempts) == 3
    expected = ExponentialJitterBackoff(base_delay=0.005, rng=random.Random(666))
    for i, (previous, current) in enumerate(zip(error.attempts, error.attempts[1:])):
        assert current.started_at - previous.finished_at >= expected.calculate(i) - 0.001
    for attempt in error.attempts:
        assert isinstance(attempt.error, httpx.ConnectError)
        assert attempt.finished_at >= attempt.started_at
    # Backoff waits are at least 4ms then 7ms with a 5ms factor
    assert elapsed >= 0.01


def test_unreachable_url_without_log() -> None:
    config = ClientConfig(max_retries=2, backoff_delay_factor=0.001)
    with new_client(config) as client, pytest.raises(RetriesExhaustedError) as exc_info:
        client.get(UNREACHABLE_URL)

    assert exc_info.value.retries == 2
    assert exc_info.value.attempts == ()


def test_cancel_during_backoff() -> None:
    """Test that a deadline shorter than the backoff delay interrupts the
    wait."""
    signal = CancelSignal(timeout=0.1)
    start = time.monotonic()
    with (
        StatusServer(503) as server,
        new_default_client() as client,
        pytest.raises(RequestCancelledError) as exc_info,
    ):
        client.get(server.url, signal=signal)

    assert time.monotonic() - start < 0.9
    assert exc_info.value.retries == 1
    assert exc_info.value.status_code == 503
    assert len(server.bodies) == 1
