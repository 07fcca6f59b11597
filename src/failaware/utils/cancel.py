r"""Cancellation signal observed by the retry loop."""

from __future__ import annotations

__all__ = ["CancelSignal"]

import threading
import time


class CancelSignal:
    """Cancellation signal tied to one or more requests.

    A signal is cancelled either explicitly with ``cancel()`` (from any
    thread) or implicitly once its optional deadline has passed. The
    retry loop checks it before every attempt, bounds the per-attempt
    timeout by the remaining time, and wakes up immediately from a
    backoff wait when it is cancelled.

    Args:
        timeout: Optional time budget in seconds, starting now.

    Example:
        ```pycon
        >>> from failaware.utils.cancel import CancelSignal
        >>> signal = CancelSignal()
        >>> signal.cancelled
        False
        >>> signal.cancel()
        >>> signal.cancelled
        True
        >>> CancelSignal(timeout=30).remaining() > 0
        True

        ```
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            msg = f"timeout must be >= 0, got {timeout}"
            raise ValueError(msg)
        self._event = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self) -> None:
        """Cancel the signal."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """``True`` if the signal was cancelled or its deadline passed."""
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Return the seconds left before the deadline.

        Returns:
            The remaining time (never negative), or ``None`` if the signal
            has no deadline.
        """
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def wait(self, delay: float) -> bool:
        """Block for ``delay`` seconds unless the signal is cancelled.

        Args:
            delay: The time to wait in seconds.

        Returns:
            ``True`` if the signal was cancelled before or during the
            wait, ``False`` if the full delay elapsed.
        """
        remaining = self.remaining()
        if remaining is not None and remaining < delay:
            # The deadline falls inside the wait, so the signal is cancelled
            # by the time it ends
            self._event.wait(remaining)
            return True
        return self._event.wait(delay)
