r"""Parameter validation utilities for the retry configuration.

This module provides validation functions for configuration parameters
to ensure they meet the required constraints before being used by the
retry executor.
"""

from __future__ import annotations

__all__ = ["validate_config_params"]


def validate_config_params(
    max_retries: int,
    timeout: float = 0.0,
    backoff_delay_factor: float = 0.0,
) -> None:
    """Validate configuration parameters.

    A value of zero is accepted for every parameter: it means "use the
    default value" and is substituted when the configuration is resolved.

    Args:
        max_retries: Number of attempts performed by the retry loop.
            Must be >= 0.
        timeout: Per-attempt timeout in seconds. Must be >= 0.
        backoff_delay_factor: Base delay in seconds for the exponential
            backoff. Must be >= 0.

    Raises:
        ValueError: If any parameter is negative.

    Example:
        ```pycon
        >>> from failaware.core.validation import validate_config_params
        >>> validate_config_params(max_retries=3)
        >>> validate_config_params(max_retries=3, timeout=0.5, backoff_delay_factor=0.1)
        >>> validate_config_params(max_retries=-1)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        ValueError: max_retries must be >= 0, got -1

        ```
    """
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise ValueError(msg)
    if timeout < 0:
        msg = f"timeout must be >= 0, got {timeout}"
        raise ValueError(msg)
    if backoff_delay_factor < 0:
        msg = f"backoff_delay_factor must be >= 0, got {backoff_delay_factor}"
        raise ValueError(msg)
