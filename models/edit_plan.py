"""Edit plan model: trim bounds and cut list for one editing session."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from analysis.keywords import DEFAULT_NOTE_SPAN_SECONDS
from analysis.models import ClipRange, EditKind, EditSuggestion
from analysis.timestamps import format_timestamp
from errors import EditValidationError


@dataclass
class EditPlan:
    """
    Current trim boundaries and cuts.

    Bounds are validated when the plan is built. After that `trim_start` and
    `trim_end` are caller-owned; `compute_duration` stays non-negative even
    when they are set inconsistently.
    """

    original_duration: float
    trim_start: float = 0.0
    trim_end: Optional[float] = None
    cuts: List[ClipRange] = field(default_factory=list)
    edits_applied: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.trim_end is None:
            self.trim_end = self.original_duration
        if not (0 <= self.trim_start < self.trim_end <= self.original_duration):
            raise EditValidationError(
                f"Invalid trim bounds {self.trim_start}-{self.trim_end} "
                f"for a {self.original_duration}s video"
            )

    @classmethod
    def for_duration(cls, duration: float) -> "EditPlan":
        return cls(original_duration=float(duration))

    def compute_duration(self) -> float:
        duration = self.trim_end - self.trim_start
        for cut in self.cuts:
            cut_start = max(cut.start, self.trim_start)
            cut_end = min(cut.end, self.trim_end)
            if cut_start < cut_end:
                duration -= cut_end - cut_start
        return max(0.0, duration)

    def add_cut(self, start: float, end: float) -> ClipRange:
        """Add a cut, merging it with any cut it overlaps or touches."""
        if end <= start:
            raise EditValidationError(f"Cut end {end} must be after start {start}")

        merged = ClipRange(start=start, end=end)
        kept: List[ClipRange] = []
        for cut in self.cuts:
            if cut.end < merged.start or cut.start > merged.end:
                kept.append(cut)
            else:
                merged = ClipRange(start=min(cut.start, merged.start), end=max(cut.end, merged.end))
        kept.append(merged)
        self.cuts = sorted(kept, key=lambda c: c.start)
        return merged

    def kept_ranges(self) -> List[ClipRange]:
        """Ranges inside the trim window that survive the cuts, in order."""
        ranges: List[ClipRange] = []
        cursor = self.trim_start
        for cut in self.cuts:
            cut_start = max(cut.start, self.trim_start)
            cut_end = min(cut.end, self.trim_end)
            if cut_start >= cut_end:
                continue
            if cut_start > cursor:
                ranges.append(ClipRange(start=cursor, end=cut_start))
            cursor = max(cursor, cut_end)
        if cursor < self.trim_end:
            ranges.append(ClipRange(start=cursor, end=self.trim_end))
        return ranges

    def apply_suggestion(self, suggestion: EditSuggestion) -> None:
        if suggestion.kind == EditKind.TRIM_START:
            self.trim_start = max(0.0, suggestion.start_time)
            self.edits_applied.append(f"Trim start to {format_timestamp(self.trim_start)}")
        elif suggestion.kind == EditKind.TRIM_END:
            self.trim_end = min(self.original_duration, suggestion.start_time)
            self.edits_applied.append(f"Trim end to {format_timestamp(self.trim_end)}")
        elif suggestion.kind == EditKind.CUT:
            end = suggestion.end_time
            if end is None:
                end = suggestion.start_time + DEFAULT_NOTE_SPAN_SECONDS
            cut = self.add_cut(suggestion.start_time, end)
            self.edits_applied.append(
                f"Cut {format_timestamp(cut.start)}-{format_timestamp(cut.end)}: {suggestion.reason}"
            )

    def reset(self) -> None:
        self.trim_start = 0.0
        self.trim_end = self.original_duration
        self.cuts = []
        self.edits_applied = []
