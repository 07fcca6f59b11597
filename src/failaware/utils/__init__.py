r"""Utilities supporting the retry loop: body replay, cancellation and
logging setup."""

from __future__ import annotations

__all__ = [
    "BodyReplayer",
    "CancelSignal",
    "StructuredFormatter",
    "close_body",
    "configure_logging",
    "parse_log_level",
]

from failaware.utils.body import BodyReplayer, close_body
from failaware.utils.cancel import CancelSignal
from failaware.utils.structured_logging import (
    StructuredFormatter,
    configure_logging,
    parse_log_level,
)
