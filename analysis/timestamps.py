"""
Timestamp parsing for critique notes ("M:SS", "H:MM:SS", "A-B" ranges).
"""

import logging
import math
from typing import Optional, Tuple

from .models import ParsedSpan

logger = logging.getLogger(__name__)

RANGE_SEPARATOR = "-"
CLOCK_SEPARATOR = ":"


def _clock_to_seconds(text: str) -> Optional[float]:
    """Convert one clock reading to seconds, or None when it has no usable shape."""
    parts = text.strip().split(CLOCK_SEPARATOR)
    if len(parts) not in (2, 3):
        return None
    values = []
    for part in parts:
        part = part.strip()
        if not part:
            return None
        try:
            value = float(part)
        except ValueError:
            return None
        if not math.isfinite(value) or value < 0:
            return None
        values.append(value)

    if len(values) == 2:
        minutes, seconds = values
        return minutes * 60 + seconds
    hours, minutes, seconds = values
    return hours * 3600 + minutes * 60 + seconds


def _parse_side(text: str) -> Tuple[float, bool]:
    seconds = _clock_to_seconds(text)
    if seconds is None:
        logger.debug("Unparseable timestamp %r, falling back to 0s", text)
        return 0.0, True
    return seconds, False


def parse_timestamp(text: str) -> ParsedSpan:
    """
    Parse "0:05", "1:02:03" or "0:12-0:18" into second offsets.

    Unparseable text never raises: the affected side becomes 0 and the
    span carries a fallback marker so callers can warn about it.
    """
    parts = (text or "").split(RANGE_SEPARATOR)
    if len(parts) >= 2:
        start, start_fallback = _parse_side(parts[0])
        end, end_fallback = _parse_side(parts[1])
        return ParsedSpan(
            start=start,
            end=end,
            start_fallback=start_fallback,
            end_fallback=end_fallback,
        )

    start, start_fallback = _parse_side(parts[0])
    return ParsedSpan(start=start, start_fallback=start_fallback)


def format_timestamp(seconds: float) -> str:
    """Format seconds as "M:SS" (whole seconds only); negative or non-finite input reads as 0."""
    seconds = float(seconds)
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0.0
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes}:{secs:02d}"
