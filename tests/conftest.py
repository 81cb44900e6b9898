from pathlib import Path
from typing import List, Optional
from unittest.mock import patch

import ffmpeg
import pytest
import pytest_asyncio

from analysis.models import AnalysisReport
from media.engine import MediaProcessingEngine
from models.media_asset import MediaAsset


class FakeToolchain:
    """Stands in for run_stream: records each ffmpeg command and writes its output file."""

    def __init__(self, fail_on_call: Optional[int] = None):
        self.commands: List[List[str]] = []
        self.fail_on_call = fail_on_call

    def run(self, stream, binary: str = "ffmpeg") -> None:
        args = ffmpeg.compile(stream, cmd=binary)
        self.commands.append(args)
        if self.fail_on_call is not None and len(self.commands) == self.fail_on_call:
            raise ffmpeg.Error(binary, b"", b"frame=0\nInvalid data found when processing input")
        output = [arg for arg in args if arg != "-y"][-1]
        Path(output).write_bytes(f"ffmpeg-output-{len(self.commands)}".encode())


@pytest.fixture
def fake_toolchain():
    toolchain = FakeToolchain()
    with (
        patch("media.engine.run_stream", side_effect=toolchain.run),
        patch("media.engine.probe_toolchain", return_value="ffmpeg version 6.1-test"),
    ):
        yield toolchain


@pytest.fixture
def scratch_dir(tmp_path):
    return tmp_path / "scratch"


@pytest_asyncio.fixture
async def loaded_engine(scratch_dir, fake_toolchain):
    engine = MediaProcessingEngine(binary="ffmpeg", scratch_dir=str(scratch_dir))
    await engine.load()
    return engine


@pytest.fixture
def source_asset():
    return MediaAsset(data=b"source-video-bytes", duration=60.0, title="Weekly update")


@pytest.fixture
def coach_report():
    return AnalysisReport.model_validate(
        {
            "overallScore": 6,
            "delivery": {"score": 5, "feedback": "A bit flat", "tips": [], "timestamps": []},
            "pacing": {
                "score": 4,
                "feedback": "Drags in the middle",
                "tips": ["Cut the pause"],
                "timestamps": [{"timestamp": "0:20-0:24", "note": "Energy dip"}],
            },
            "content": {"score": 8, "feedback": "Clear", "tips": [], "timestamps": []},
            "engagement": {"score": 7, "feedback": "Good", "tips": [], "timestamps": []},
            "summary": "Solid idea, uneven delivery.",
            "strengths": ["Clear topic"],
            "improvements": ["Tighten the middle"],
            "keyMoments": [
                {"timestamp": "0:03", "note": "Strong opening hook"},
                {"timestamp": "0:45", "note": "Great call-to-action"},
            ],
        }
    )
