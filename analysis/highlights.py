"""
Highlight clip selection from positively scored key moments.
"""

import logging
from typing import List, Optional, Sequence

from . import keywords as kw
from .models import AnalysisReport, HighlightClip, TimestampedNote
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)


def _clip_for_moment(
    moment: TimestampedNote,
    clip_id: str,
    duration: float,
) -> Optional[HighlightClip]:
    span = parse_timestamp(moment.timestamp)
    has_end = span.end is not None and not span.end_fallback
    anchor = span.end if has_end else span.start
    clip_duration = (span.end - span.start) if has_end else kw.DEFAULT_CLIP_SECONDS

    start_time = max(0.0, span.start - kw.CLIP_PADDING_SECONDS)
    end_time = min(duration, anchor + clip_duration + kw.CLIP_PADDING_SECONDS)
    if start_time >= end_time:
        logger.debug(
            "Dropping highlight %r: window %.2f-%.2f is empty for a %.2fs video",
            moment.note, start_time, end_time, duration,
        )
        return None

    return HighlightClip(
        id=clip_id,
        start_time=start_time,
        end_time=end_time,
        note=moment.note,
        selected=True,
    )


def select_highlight_clips(report: AnalysisReport, duration: float) -> List[HighlightClip]:
    """
    Pick up to five highlight clips from the report's key moments.

    Moments are ranked by keyword score, but the returned clips are in
    playback order (ascending start time).
    """
    if not report.key_moments:
        return []

    scored = [(moment, kw.score_note(moment.note)) for moment in report.key_moments]
    positive = [item for item in scored if item[1] > 0]
    top = sorted(positive, key=lambda item: item[1], reverse=True)[: kw.MAX_HIGHLIGHT_CLIPS]

    clips: List[HighlightClip] = []
    for index, (moment, _score) in enumerate(top):
        clip = _clip_for_moment(moment, f"highlight-{index}", float(duration))
        if clip is not None:
            clips.append(clip)

    return sorted(clips, key=lambda c: c.start_time)


def selected_clips(clips: Sequence[HighlightClip]) -> List[HighlightClip]:
    return [clip for clip in clips if clip.selected]


def total_selected_duration(clips: Sequence[HighlightClip]) -> float:
    return sum(clip.duration for clip in clips if clip.selected)
