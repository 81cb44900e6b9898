"""
Keyword tables and thresholds used to score critique notes.

Matching is a plain substring test on the lowercased note, so "hesitat"
covers "hesitation" and "hesitates".
"""

from typing import Iterable, Sequence, Tuple

# Suggestions
OPENING_KEYWORDS = ("hook", "strong", "energy", "engaging", "good")
CLOSING_KEYWORDS = ("call-to-action", "cta", "ending", "close")
NEGATIVE_KEYWORDS = ("dip", "awkward", "slow", "pause", "hesitat", "drop", "weak")

# Cut scan order over the report categories
CUT_CATEGORY_ORDER = ("pacing", "engagement", "delivery", "content")

TRIM_START_MAX_DELIVERY_SCORE = 7     # exclusive
TRIM_START_MIN_SECONDS = 1.0          # exclusive
TRIM_START_MAX_DURATION_RATIO = 0.3   # exclusive
TRIM_START_LEAD_IN_SECONDS = 0.5
TRIM_START_CONFIDENCE = 0.8

TRIM_END_MIN_TAIL_SECONDS = 2.0
TRIM_END_PAD_SECONDS = 1.0
TRIM_END_CONFIDENCE = 0.7
TRIM_END_REASON = "End after your strong closing"

CUT_MAX_CATEGORY_SCORE = 6            # exclusive
DEFAULT_NOTE_SPAN_SECONDS = 3.0

# Highlights: (any of these substrings, weight). A row counts once per note.
HIGHLIGHT_WEIGHTS: Tuple[Tuple[Tuple[str, ...], int], ...] = (
    (("strong",), 3),
    (("hook",), 3),
    (("great",), 3),
    (("energy",), 2),
    (("engaging",), 2),
    (("good",), 2),
    (("call-to-action", "cta"), 2),
    (("authentic",), 2),
    (("dip",), -2),
    (("weak",), -2),
    (("awkward",), -2),
    (("consider re-recording",), -3),
)

MAX_HIGHLIGHT_CLIPS = 5
DEFAULT_CLIP_SECONDS = 5.0
CLIP_PADDING_SECONDS = 0.5

# Timeline markers
MARKER_WARNING_KEYWORDS = ("dip", "weak")


def matches_any(text: str, keywords: Iterable[str]) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def score_note(
    text: str,
    weights: Sequence[Tuple[Tuple[str, ...], int]] = HIGHLIGHT_WEIGHTS,
) -> int:
    """Sum the weight of every table row with at least one hit in `text`."""
    lowered = (text or "").lower()
    return sum(weight for keywords, weight in weights if any(k in lowered for k in keywords))
