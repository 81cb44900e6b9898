"""Report analysis package."""

from .highlights import select_highlight_clips
from .markers import build_timeline_markers
from .models import (
    AnalysisReport,
    CategoryFeedback,
    ClipRange,
    EditKind,
    EditSuggestion,
    HighlightClip,
    ParsedSpan,
    TimelineMarker,
    TimestampedNote,
)
from .suggestions import generate_edit_suggestions
from .timestamps import format_timestamp, parse_timestamp
