"""Media asset model."""

from __future__ import annotations

from dataclasses import dataclass

from config import settings


@dataclass(frozen=True)
class MediaAsset:
    """Binary media payload plus its duration. Operations always return a new asset."""

    data: bytes
    duration: float
    mime_type: str = settings.MEDIA_MIME_TYPE
    title: str = ""

    @property
    def size_bytes(self) -> int:
        return len(self.data)
