"""Processing job model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class JobPhase(str, Enum):
    LOADING = "loading"
    PROCESSING = "processing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ProcessingJob:
    """Transient state of one trim/concatenate call."""

    operation: str
    phase: JobPhase = JobPhase.LOADING
    progress_percent: int = 0
    error: Optional[str] = None
