"""
Analysis models and schemas.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


CATEGORY_NAMES = ("delivery", "pacing", "content", "engagement")

CategoryName = Literal["delivery", "pacing", "content", "engagement"]
SuggestionSource = Literal["delivery", "pacing", "content", "engagement", "keyMoment"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TimestampedNote(_CamelModel):
    """Feedback anchored to a moment in the video, e.g. ("0:12-0:18", "Energy dip")."""
    timestamp: str
    note: str = ""


class CategoryFeedback(_CamelModel):
    score: int = Field(ge=0, le=10)
    feedback: str = ""
    tips: List[str] = Field(default_factory=list)
    timestamps: List[TimestampedNote] = Field(default_factory=list)


class AnalysisReport(_CamelModel):
    """Critique of one recorded video as produced by the critique generator."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    overall_score: int = Field(default=0, alias="overallScore")
    delivery: Optional[CategoryFeedback] = None
    pacing: Optional[CategoryFeedback] = None
    content: Optional[CategoryFeedback] = None
    engagement: Optional[CategoryFeedback] = None
    summary: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    key_moments: List[TimestampedNote] = Field(default_factory=list, alias="keyMoments")

    def category(self, name: str) -> Optional[CategoryFeedback]:
        if name not in CATEGORY_NAMES:
            return None
        return getattr(self, name)


@dataclass(frozen=True)
class ParsedSpan:
    """Seconds offsets derived from a timestamp string.

    `start_fallback` / `end_fallback` mark a side whose text could not be
    parsed and silently became 0.
    """
    start: float
    end: Optional[float] = None
    start_fallback: bool = False
    end_fallback: bool = False

    @property
    def fallback(self) -> bool:
        return self.start_fallback or self.end_fallback

    def end_or(self, default: float) -> float:
        if self.end is None or self.end_fallback:
            return default
        return self.end


@dataclass(frozen=True)
class ClipRange:
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


class EditKind(str, Enum):
    TRIM_START = "trim-start"
    TRIM_END = "trim-end"
    CUT = "cut"


class EditSuggestion(_CamelModel):
    """A proposed trim or cut, with the reason it was proposed."""
    id: str
    kind: EditKind
    start_time: float = Field(alias="startTime")
    end_time: Optional[float] = Field(default=None, alias="endTime")
    reason: str
    confidence: float = Field(ge=0.0, le=1.0)
    source: SuggestionSource
    original_timestamp: str = Field(alias="originalTimestamp")


class HighlightClip(_CamelModel):
    """Candidate highlight segment; only `selected` changes after creation."""
    id: str
    start_time: float = Field(alias="startTime")
    end_time: float = Field(alias="endTime")
    note: str
    selected: bool = True

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def toggle(self) -> bool:
        self.selected = not self.selected
        return self.selected

    def to_range(self) -> ClipRange:
        return ClipRange(start=self.start_time, end=self.end_time)


class TimelineMarker(_CamelModel):
    time: float
    label: str
    kind: Literal["keyMoment", "suggestion"]
    color: str
