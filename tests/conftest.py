from __future__ import annotations

import random
from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from failaware.core.config import ClientConfig
from tests.helpers import RecordingTransport

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_sleep() -> Generator[Mock, None, None]:
    """Patch time.sleep to make tests run faster."""
    with patch("time.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def fast_config() -> ClientConfig:
    """Create a config with small timeouts, a seeded random source and
    the attempt log enabled."""
    return ClientConfig(
        max_retries=3,
        timeout=0.01,
        backoff_delay_factor=0.005,
        keep_log=True,
        rng=random.Random(666),
    )


@pytest.fixture
def ok_transport() -> RecordingTransport:
    """Create a transport answering every request with status 200."""
    return RecordingTransport([200])
