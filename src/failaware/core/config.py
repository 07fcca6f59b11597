r"""Configuration dataclass and defaults for FailAwareClient.

This module provides the configuration constants and the dataclass-based
configuration object shared (read-only) by every call made through a
FailAwareClient.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF_DELAY_FACTOR",
    "DEFAULT_CONFIG",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_TIMEOUT",
    "ClientConfig",
]

from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING

from failaware.core.validation import validate_config_params

if TYPE_CHECKING:
    import logging
    import random


# Number of attempts performed by the retry loop
# The first attempt is part of the loop, so 3 means at most 3 requests
DEFAULT_MAX_RETRIES = 3

# Per-attempt timeout in seconds passed to the transport
DEFAULT_TIMEOUT = 1.0

# Base unit of the exponential backoff in seconds
# Wait time = backoff_delay_factor * (2 ** attempt) +/- a third of it
# With 1.0: 1st retry waits ~1s, 2nd waits ~2s, 3rd waits ~4s
DEFAULT_BACKOFF_DELAY_FACTOR = 1.0


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for FailAwareClient retry behavior.

    Every field left at its zero value (``0``, ``0.0``, ``False`` or
    ``None``) means "use the default" once the configuration is resolved
    with ``resolve()``. As a consequence zero cannot be requested
    explicitly for the numeric fields.

    Args:
        max_retries: Number of attempts performed by the retry loop,
            the first attempt included. Must be >= 0.
        timeout: Per-attempt timeout in seconds. Must be >= 0.
        backoff_delay_factor: Base delay in seconds of the exponential
            backoff. Must be >= 0.
        keep_log: If ``True``, a record of every attempt is kept and
            attached to the final error.
        logger: Optional logger receiving the debug retry notices.
        rng: Optional random source for the backoff jitter. Pass a
            seeded ``random.Random`` for reproducible delays.

    Example:
        ```pycon
        >>> from failaware.core.config import ClientConfig
        >>> config = ClientConfig(max_retries=5).resolve()
        >>> config.max_retries
        5
        >>> config.timeout
        1.0
        >>> ClientConfig().resolve().max_retries
        3

        ```
    """

    max_retries: int = 0
    timeout: float = 0.0
    backoff_delay_factor: float = 0.0
    keep_log: bool = False
    logger: logging.Logger | None = None
    rng: random.Random | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_config_params(
            max_retries=self.max_retries,
            timeout=self.timeout,
            backoff_delay_factor=self.backoff_delay_factor,
        )

    def resolve(self, defaults: ClientConfig | None = None) -> ClientConfig:
        """Create a new config where every zero-valued field is replaced
        by the matching field of ``defaults``.

        The merge is done field by field: a caller overriding only
        ``timeout`` still gets the default ``max_retries``.

        Args:
            defaults: The configuration providing the fallback values.
                If ``None``, ``DEFAULT_CONFIG`` is used.

        Returns:
            A new ClientConfig instance with the defaults applied.

        Example:
            ```pycon
            >>> from failaware.core.config import ClientConfig
            >>> config = ClientConfig(timeout=0.01).resolve()
            >>> config.timeout, config.max_retries, config.backoff_delay_factor
            (0.01, 3, 1.0)

            ```
        """
        defaults = DEFAULT_CONFIG if defaults is None else defaults
        overrides = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if _is_zero(value):
                overrides[f.name] = getattr(defaults, f.name)
        return replace(self, **overrides)


def _is_zero(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, (bool, int, float)):
        return not value
    return False


DEFAULT_CONFIG = ClientConfig(
    max_retries=DEFAULT_MAX_RETRIES,
    timeout=DEFAULT_TIMEOUT,
    backoff_delay_factor=DEFAULT_BACKOFF_DELAY_FACTOR,
    keep_log=False,
)
