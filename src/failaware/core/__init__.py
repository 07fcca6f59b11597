r"""Configuration objects and their validation."""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_DELAY_FACTOR",
    "DEFAULT_CONFIG",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
    "validate_config_params",
]

from failaware.core.config import (
    DEFAULT_BACKOFF_DELAY_FACTOR,
    DEFAULT_CONFIG,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    ClientConfig,
)
from failaware.core.validation import validate_config_params
