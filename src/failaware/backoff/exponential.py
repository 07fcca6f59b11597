r"""Exponential backoff strategy with symmetric jitter."""

from __future__ import annotations

__all__ = ["ExponentialJitterBackoff"]

import random
import threading

# Smallest delay ever returned, in milliseconds
MIN_DELAY_MS = 1


class ExponentialJitterBackoff:
    """Exponential backoff strategy with symmetric jitter.

    The delay is computed in whole milliseconds as follows:

    1. ``base = 2 ** attempt * base_delay``
    2. ``max_jitter = base // 3``
    3. ``delay = base + randrange(-max_jitter, max_jitter)``
    4. a delay ``<= 0`` is clamped to 1 millisecond.

    The random source is the only source of randomness of the retry
    logic. It can be seeded for reproducible delays, and it is guarded by
    a lock so one strategy can be shared by concurrent calls.

    Args:
        base_delay: The base delay factor in seconds (default: 1.0).
            It is truncated to whole milliseconds.
        rng: Optional random source. If ``None``, a new unseeded
            ``random.Random`` is created.

    Example:
        ```pycon
        >>> import random
        >>> from failaware.backoff import ExponentialJitterBackoff
        >>> backoff = ExponentialJitterBackoff(base_delay=0.3, rng=random.Random(42))
        >>> 0.2 <= backoff.calculate(0) <= 0.4
        True
        >>> 0.4 <= backoff.calculate(1) <= 0.8
        True
        >>> ExponentialJitterBackoff(base_delay=0.0).calculate(3)
        0.001

        ```
    """

    def __init__(self, base_delay: float = 1.0, rng: random.Random | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self._rng = rng if rng is not None else random.Random()  # noqa: S311
        self._lock = threading.Lock()

    @property
    def base_delay_ms(self) -> int:
        """The base delay factor truncated to whole milliseconds."""
        return int(round(self.base_delay * 1000, 6))

    def calculate_ms(self, attempt: int) -> int:
        """Calculate the jittered backoff delay in milliseconds.

        Args:
            attempt: The current attempt number (0-indexed).

        Returns:
            The delay in milliseconds, always >= 1.
        """
        base = (2**attempt) * self.base_delay_ms
        max_jitter = base // 3
        delay = base
        if max_jitter > 0:
            with self._lock:
                delay += self._rng.randrange(-max_jitter, max_jitter)
        return max(delay, MIN_DELAY_MS)

    def calculate(self, attempt: int) -> float:
        """Calculate the jittered backoff delay.

        Args:
            attempt: The current attempt number (0-indexed). For example,
                attempt=0 is the wait before the first retry.

        Returns:
            The delay in seconds before the next attempt.
        """
        return self.calculate_ms(attempt) / 1000
