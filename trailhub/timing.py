"""Race-duration codec: ``HH:MM:SS`` strings <-> whole seconds."""

from __future__ import annotations

import logging
from typing import Any, Optional

SECONDS_PER_HOUR = 3600
SECONDS_PER_MINUTE = 60

logger = logging.getLogger(__name__)


def parse_time(value: Optional[str]) -> int:
    """Return the number of seconds encoded by ``value``.

    Three colon-separated parts are read as hours:minutes:seconds, two as
    minutes:seconds. Any other shape, or a part that is not an integer,
    yields 0 rather than raising.
    """
    if value is None:
        return 0
    parts = str(value).strip().split(":")
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        logger.warning("Unparseable time %r; defaulting to 0 seconds", value)
        return 0
    if len(numbers) == 3:
        h, m, s = numbers
        return h * SECONDS_PER_HOUR + m * SECONDS_PER_MINUTE + s
    if len(numbers) == 2:
        m, s = numbers
        return m * SECONDS_PER_MINUTE + s
    logger.warning("Time %r has %d parts; defaulting to 0 seconds", value, len(parts))
    return 0


def format_time(seconds: Any) -> str:
    """Return ``seconds`` as a zero-padded ``HH:MM:SS`` string.

    Hours are unbounded (no wraparound at 24). Negative or non-numeric
    input formats as ``00:00:00``.
    """
    try:
        total = int(seconds)
    except (TypeError, ValueError):
        logger.warning("Cannot format %r as a time; using 00:00:00", seconds)
        total = 0
    if total < 0:
        total = 0
    hours, rest = divmod(total, SECONDS_PER_HOUR)
    minutes, secs = divmod(rest, SECONDS_PER_MINUTE)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


# Names used by the participation services
convert_time_to_seconds = parse_time
convert_seconds_to_time = format_time

__all__ = [
    "parse_time",
    "format_time",
    "convert_time_to_seconds",
    "convert_seconds_to_time",
]
