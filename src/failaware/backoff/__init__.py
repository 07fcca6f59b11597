r"""Backoff strategy used to pace retries."""

from __future__ import annotations

__all__ = ["ExponentialJitterBackoff"]

from failaware.backoff.exponential import ExponentialJitterBackoff
