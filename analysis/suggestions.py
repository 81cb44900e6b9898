"""
Edit suggestion logic: trim-start, trim-end and cut candidates from a report.
"""

import logging
from typing import Iterator, List, Optional

from . import keywords as kw
from .models import AnalysisReport, EditKind, EditSuggestion, TimestampedNote
from .timestamps import parse_timestamp

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Derives ranked edit suggestions from one analysis report.

    Output depends only on the report and the duration, so the same input
    always yields the same list (ids included).
    """

    def __init__(self, report: AnalysisReport, duration: float):
        self.report = report
        self.duration = float(duration)
        self._ids = self._id_sequence()

    @staticmethod
    def _id_sequence() -> Iterator[str]:
        counter = 0
        while True:
            yield f"suggestion-{counter}"
            counter += 1

    def generate(self) -> List[EditSuggestion]:
        suggestions: List[EditSuggestion] = []

        trim_start = self._trim_start_candidate()
        if trim_start:
            suggestions.append(trim_start)

        trim_end = self._trim_end_candidate()
        if trim_end:
            suggestions.append(trim_end)

        suggestions.extend(self._cut_candidates())

        # sorted() is stable: equal confidences keep generation order
        return sorted(suggestions, key=lambda s: s.confidence, reverse=True)

    def _trim_start_candidate(self) -> Optional[EditSuggestion]:
        delivery = self.report.delivery
        if delivery is None or delivery.score >= kw.TRIM_START_MAX_DELIVERY_SCORE:
            return None

        moment = next(
            (m for m in self.report.key_moments if kw.matches_any(m.note, kw.OPENING_KEYWORDS)),
            None,
        )
        if moment is None:
            return None

        start = parse_timestamp(moment.timestamp).start
        upper = self.duration * kw.TRIM_START_MAX_DURATION_RATIO
        if not (kw.TRIM_START_MIN_SECONDS < start < upper):
            return None

        return EditSuggestion(
            id=next(self._ids),
            kind=EditKind.TRIM_START,
            start_time=max(0.0, start - kw.TRIM_START_LEAD_IN_SECONDS),
            reason=moment.note,
            confidence=kw.TRIM_START_CONFIDENCE,
            source="keyMoment",
            original_timestamp=moment.timestamp,
        )

    def _trim_end_candidate(self) -> Optional[EditSuggestion]:
        closing = [m for m in self.report.key_moments if kw.matches_any(m.note, kw.CLOSING_KEYWORDS)]
        if not closing:
            return None

        moment = closing[-1]
        span = parse_timestamp(moment.timestamp)
        end_time = span.end_or(span.start + kw.DEFAULT_NOTE_SPAN_SECONDS)
        if end_time >= self.duration - kw.TRIM_END_MIN_TAIL_SECONDS:
            return None

        return EditSuggestion(
            id=next(self._ids),
            kind=EditKind.TRIM_END,
            start_time=end_time + kw.TRIM_END_PAD_SECONDS,
            reason=kw.TRIM_END_REASON,
            confidence=kw.TRIM_END_CONFIDENCE,
            source="keyMoment",
            original_timestamp=moment.timestamp,
        )

    def _cut_candidates(self) -> List[EditSuggestion]:
        cuts: List[EditSuggestion] = []
        for name in kw.CUT_CATEGORY_ORDER:
            category = self.report.category(name)
            if category is None or category.score >= kw.CUT_MAX_CATEGORY_SCORE:
                continue
            confidence = (10 - category.score) / 10
            for note in category.timestamps:
                if not kw.matches_any(note.note, kw.NEGATIVE_KEYWORDS):
                    continue
                cut = self._cut(note, name, confidence)
                if cut is not None:
                    cuts.append(cut)
        return cuts

    def _cut(self, note: TimestampedNote, source: str, confidence: float) -> Optional[EditSuggestion]:
        span = parse_timestamp(note.timestamp)
        if span.fallback:
            logger.debug("Cut note %r has an unparseable timestamp %r", note.note, note.timestamp)
        end_time = span.end_or(span.start + kw.DEFAULT_NOTE_SPAN_SECONDS)
        if end_time <= span.start:
            logger.debug("Skipping cut %r: range %r ends before it starts", note.note, note.timestamp)
            return None
        return EditSuggestion(
            id=next(self._ids),
            kind=EditKind.CUT,
            start_time=span.start,
            end_time=end_time,
            reason=note.note,
            confidence=confidence,
            source=source,
            original_timestamp=note.timestamp,
        )


def generate_edit_suggestions(report: AnalysisReport, duration: float) -> List[EditSuggestion]:
    """Ranked edit suggestions for `report`, highest confidence first."""
    return SuggestionEngine(report, duration).generate()
