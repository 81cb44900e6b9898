"""Timeline markers for key moments and suggested cuts."""

from typing import List, Sequence

from . import keywords as kw
from .models import AnalysisReport, EditKind, EditSuggestion, TimelineMarker
from .timestamps import parse_timestamp

POSITIVE_COLOR = "#22c55e"
WARNING_COLOR = "#eab308"
CUT_COLOR = "#ef4444"


def build_timeline_markers(
    report: AnalysisReport,
    suggestions: Sequence[EditSuggestion],
) -> List[TimelineMarker]:
    markers: List[TimelineMarker] = []

    for moment in report.key_moments:
        warning = kw.matches_any(moment.note, kw.MARKER_WARNING_KEYWORDS)
        markers.append(
            TimelineMarker(
                time=parse_timestamp(moment.timestamp).start,
                label=moment.note,
                kind="keyMoment",
                color=WARNING_COLOR if warning else POSITIVE_COLOR,
            )
        )

    # A cut at 0s has nothing to point at on the timeline
    for suggestion in suggestions:
        if suggestion.kind == EditKind.CUT and suggestion.start_time:
            markers.append(
                TimelineMarker(
                    time=suggestion.start_time,
                    label=suggestion.reason,
                    kind="suggestion",
                    color=CUT_COLOR,
                )
            )

    return markers
