"""Editing session: suggestions, highlight selection and export for one video."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from analysis.highlights import select_highlight_clips, selected_clips
from analysis.markers import build_timeline_markers
from analysis.models import AnalysisReport, EditSuggestion, HighlightClip, TimelineMarker
from analysis.suggestions import generate_edit_suggestions
from config import settings
from errors import EditingError, EditValidationError
from media.engine import MediaProcessingEngine
from media.toolchain import probe_duration_seconds
from models.edit_plan import EditPlan
from models.media_asset import MediaAsset

logger = logging.getLogger(__name__)

VIDEO_MIME_BY_EXT = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".m4v": "video/x-m4v",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
}


@dataclass
class EditResult:
    asset: MediaAsset
    edits_applied: List[str] = field(default_factory=list)


async def load_media_asset(path: str, title: Optional[str] = None) -> MediaAsset:
    """Read a local media file into a MediaAsset, probing its duration."""
    media_path = Path(path)
    data = await asyncio.to_thread(media_path.read_bytes)
    duration = await asyncio.to_thread(probe_duration_seconds, str(media_path), settings.FFPROBE_BINARY)
    if duration <= 0:
        raise EditValidationError(f"Could not determine duration of {media_path.name}")
    return MediaAsset(
        data=data,
        duration=duration,
        mime_type=VIDEO_MIME_BY_EXT.get(media_path.suffix.lower(), settings.MEDIA_MIME_TYPE),
        title=title if title is not None else media_path.stem,
    )


class EditingSession:
    """
    One pass of editing a recorded video.

    Suggestions and highlight clips are recomputed from the report and the
    asset duration; the plan is discarded once an asset has been exported.
    A failed export leaves both the source asset and the plan untouched.
    """

    def __init__(
        self,
        asset: MediaAsset,
        report: Optional[AnalysisReport] = None,
        engine: Optional[MediaProcessingEngine] = None,
    ):
        self.asset = asset
        self.report = report
        self.engine = engine or MediaProcessingEngine()
        self.plan: Optional[EditPlan] = EditPlan.for_duration(asset.duration)
        self.suggestions: List[EditSuggestion] = []
        self.highlight_clips: List[HighlightClip] = []
        self.markers: List[TimelineMarker] = []
        self.result: Optional[EditResult] = None
        self.refresh()

    def refresh(self) -> None:
        """Recompute suggestions, clips and markers from the report."""
        if self.report is None:
            self.suggestions, self.highlight_clips, self.markers = [], [], []
            return
        self.suggestions = generate_edit_suggestions(self.report, self.asset.duration)
        self.highlight_clips = select_highlight_clips(self.report, self.asset.duration)
        self.markers = build_timeline_markers(self.report, self.suggestions)
        logger.info(
            "Session ready: %d suggestions, %d highlight clips",
            len(self.suggestions),
            len(self.highlight_clips),
        )

    def _active_plan(self) -> EditPlan:
        if self.plan is None:
            raise EditingError("This session already produced an edited asset")
        return self.plan

    def apply_suggestion(self, suggestion_id: str) -> EditPlan:
        plan = self._active_plan()
        suggestion = next((s for s in self.suggestions if s.id == suggestion_id), None)
        if suggestion is None:
            raise EditValidationError(f"Unknown suggestion {suggestion_id}")
        plan.apply_suggestion(suggestion)
        return plan

    def set_trim(self, start: float, end: float) -> EditPlan:
        """Set trim bounds, clamped the way the editor inputs clamp them."""
        plan = self._active_plan()
        duration = self.asset.duration
        start = max(0.0, min(start, duration - settings.MIN_TRIM_SECONDS))
        end = max(start + settings.MIN_TRIM_SECONDS, min(end, duration))
        plan.trim_start = start
        plan.trim_end = end
        return plan

    def toggle_clip(self, clip_id: str) -> HighlightClip:
        clip = next((c for c in self.highlight_clips if c.id == clip_id), None)
        if clip is None:
            raise EditValidationError(f"Unknown highlight clip {clip_id}")
        clip.toggle()
        return clip

    async def _ensure_engine(self) -> None:
        if not self.engine.is_loaded:
            await self.engine.load()

    async def export_trim(self) -> EditResult:
        """Export the plan: one kept range is a trim, several are concatenated."""
        plan = self._active_plan()
        ranges = plan.kept_ranges()
        if not ranges:
            raise EditValidationError("Nothing left to export after cuts")

        await self._ensure_engine()
        if len(ranges) == 1:
            edited = await self.engine.trim(self.asset, ranges[0].start, ranges[0].end)
        else:
            edited = await self.engine.concatenate(self.asset, ranges)

        self.result = EditResult(asset=edited, edits_applied=list(plan.edits_applied))
        self.plan = None
        logger.info("Exported edited video: %.2fs", edited.duration)
        return self.result

    async def export_highlight(self) -> EditResult:
        clips = selected_clips(self.highlight_clips)
        if not clips:
            raise EditValidationError("Select at least one clip for the highlight")

        await self._ensure_engine()
        edited = await self.engine.concatenate(self.asset, [c.to_range() for c in clips])
        highlight = MediaAsset(
            data=edited.data,
            duration=edited.duration,
            mime_type=edited.mime_type,
            title=f"{self.asset.title}{settings.HIGHLIGHT_TITLE_SUFFIX}",
        )
        self.result = EditResult(
            asset=highlight,
            edits_applied=[f"Highlight: {c.note}" for c in clips],
        )
        self.plan = None
        logger.info("Exported highlight of %d clips: %.2fs", len(clips), highlight.duration)
        return self.result
