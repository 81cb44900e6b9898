"""Models package."""

from .edit_plan import EditPlan
from .media_asset import MediaAsset
from .processing_job import JobPhase, ProcessingJob
