"""Media processing engine: stream-copy trim and multi-clip concatenation."""

from __future__ import annotations

import asyncio
import logging
import math
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Iterable, List, Optional, Sequence

import ffmpeg

from analysis.models import ClipRange
from config import require_ffmpeg_binary, settings
from errors import EditValidationError, EngineStateError, ProcessingError
from media.toolchain import (
    build_concat_stream,
    build_extract_stream,
    describe_error,
    probe_toolchain,
    run_stream,
    write_concat_manifest,
)
from models.media_asset import MediaAsset
from models.processing_job import JobPhase, ProcessingJob

logger = logging.getLogger(__name__)

ProgressListener = Callable[[int], None]

EXTRACT_PROGRESS_SHARE = 50
CONCAT_DONE_PROGRESS = 90
TRIM_INPUT_WRITTEN_PROGRESS = 10
TRIM_EXTRACTED_PROGRESS = 90


class MediaProcessingEngine:
    """
    Handle on the ffmpeg toolchain for one editing session.

    The engine must be loaded with `await engine.load()` before use. It runs
    one trim/concatenate at a time; overlapping calls are rejected with
    EngineStateError instead of being queued.

    Progress is published to listeners registered with `subscribe()`. It is
    reset to 0 when an operation starts, never goes down while that
    operation runs and ends at 100 on success.
    """

    def __init__(
        self,
        binary: Optional[str] = None,
        scratch_dir: Optional[str] = None,
        extension: Optional[str] = None,
    ):
        self.binary = binary or require_ffmpeg_binary()
        self.scratch_dir = Path(scratch_dir or settings.MEDIA_SCRATCH_DIR)
        self.extension = extension or settings.MEDIA_CONTAINER_EXTENSION
        self.version: Optional[str] = None
        self.job: Optional[ProcessingJob] = None
        self._loaded = False
        self._load_task: Optional[asyncio.Task] = None
        self._busy = False
        self._progress = 0
        self._listeners: List[ProgressListener] = []

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_loading(self) -> bool:
        return self._load_task is not None

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def progress_percent(self) -> int:
        return self._progress

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Probe the toolchain once; concurrent callers share the same attempt."""
        if self._loaded:
            return
        if self._load_task is None:
            self._load_task = asyncio.create_task(self._load())
        await asyncio.shield(self._load_task)

    async def _load(self) -> None:
        self.job = ProcessingJob(operation="load", phase=JobPhase.LOADING)
        logger.info("Loading media toolchain %s", self.binary)
        try:
            self.version = await asyncio.to_thread(
                probe_toolchain,
                self.binary,
                settings.TOOLCHAIN_PROBE_TIMEOUT_SECONDS,
            )
            await asyncio.to_thread(self.scratch_dir.mkdir, parents=True, exist_ok=True)
            self._loaded = True
            self.job.phase = JobPhase.DONE
            self.job.progress_percent = 100
            logger.info("Media toolchain ready: %s", self.version)
        except (RuntimeError, OSError) as exc:
            self.job.phase = JobPhase.FAILED
            self.job.error = str(exc)
            logger.error("Media toolchain failed to load: %s", exc)
            raise ProcessingError("load", str(exc)) from exc
        finally:
            self._load_task = None

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------

    def subscribe(self, listener: ProgressListener) -> Callable[[], None]:
        """Register a progress listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_progress(self, percent: float, *, reset: bool = False) -> None:
        value = max(0, min(int(percent), 100))
        if not reset and value < self._progress:
            return
        self._progress = value
        if self.job is not None:
            self.job.progress_percent = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                logger.exception("Progress listener %r failed", listener)

    # ------------------------------------------------------------------
    # Operation plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[ProcessingJob]:
        if not self._loaded:
            raise EngineStateError(f"Media engine is not loaded; call load() before {name}")
        if self._busy:
            running = self.job.operation if self.job else "another operation"
            raise EngineStateError(f"Media engine is busy with {running}")

        self._busy = True
        job = ProcessingJob(operation=name, phase=JobPhase.PROCESSING)
        self.job = job
        self._set_progress(0, reset=True)
        try:
            yield job
        except BaseException as exc:
            job.phase = JobPhase.FAILED
            job.error = str(exc)
            raise
        else:
            job.phase = JobPhase.DONE
            self._set_progress(100)
        finally:
            self._busy = False

    def _scratch_path(self, op_id: str, name: str, extension: Optional[str] = None) -> Path:
        return self.scratch_dir / f"{op_id}-{name}{extension or self.extension}"

    def _cleanup(self, paths: Iterable[Path]) -> None:
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not cleanup scratch file %s: %s", path, exc)

    async def _write_input(self, operation: str, path: Path, data: bytes) -> None:
        try:
            await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, data)
        except OSError as exc:
            raise ProcessingError(operation, f"could not write scratch input: {exc}") from exc

    async def _read_output(self, operation: str, path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise ProcessingError(operation, f"toolchain produced no output: {exc}") from exc

    async def _run(self, operation: str, stream) -> None:
        """
        Run one toolchain command in a worker thread.

        The thread cannot be interrupted, so a cancelled caller still waits
        for it to exit before cancellation propagates. Scratch cleanup and
        the busy flag therefore never run ahead of the toolchain.
        """
        future = asyncio.ensure_future(asyncio.to_thread(run_stream, stream, self.binary))
        try:
            await asyncio.shield(future)
        except asyncio.CancelledError:
            logger.warning("Media %s cancelled; waiting for the running command to exit", operation)
            while not future.done():
                try:
                    await asyncio.shield(future)
                except asyncio.CancelledError:
                    continue
                except (ffmpeg.Error, OSError):
                    break
            if future.exception() is not None:
                logger.warning(
                    "Cancelled media %s also failed: %s", operation, describe_error(future.exception())
                )
            raise
        except (ffmpeg.Error, OSError) as exc:
            cause = describe_error(exc)
            logger.error("Media %s failed: %s", operation, cause)
            raise ProcessingError(operation, cause) from exc

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def trim(self, asset: MediaAsset, start: float, end: float) -> MediaAsset:
        """Extract [start, end] from `asset` without re-encoding."""
        if start < 0 or end <= start:
            raise EditValidationError(f"Invalid trim range {start}-{end}")

        async with self._operation("trim"):
            op_id = uuid.uuid4().hex[:12]
            input_path = self._scratch_path(op_id, "input")
            output_path = self._scratch_path(op_id, "output")
            logger.info("Trimming %.3fs-%.3fs (op %s)", start, end, op_id)
            try:
                await self._write_input("trim", input_path, asset.data)
                self._set_progress(TRIM_INPUT_WRITTEN_PROGRESS)
                await self._run(
                    "trim",
                    build_extract_stream(str(input_path), str(output_path), start, end=end),
                )
                self._set_progress(TRIM_EXTRACTED_PROGRESS)
                data = await self._read_output("trim", output_path)
            finally:
                self._cleanup([input_path, output_path])

        return MediaAsset(
            data=data,
            duration=end - start,
            mime_type=asset.mime_type,
            title=asset.title,
        )

    async def concatenate(self, asset: MediaAsset, clips: Sequence[ClipRange]) -> MediaAsset:
        """
        Extract each clip from `asset` and join them in order.

        The returned duration is the sum of the clip durations; the output is
        not re-measured.
        """
        ranges = list(clips)
        if not ranges:
            raise EditValidationError("No clips to concatenate")
        for clip in ranges:
            if clip.start < 0 or clip.end <= clip.start:
                raise EditValidationError(f"Invalid clip range {clip.start}-{clip.end}")

        async with self._operation("concatenate"):
            op_id = uuid.uuid4().hex[:12]
            input_path = self._scratch_path(op_id, "input")
            manifest_path = self._scratch_path(op_id, "concat", ".txt")
            output_path = self._scratch_path(op_id, "highlight")
            clip_paths: List[Path] = []
            logger.info("Concatenating %d clips (op %s)", len(ranges), op_id)
            try:
                await self._write_input("concatenate", input_path, asset.data)
                for index, clip in enumerate(ranges):
                    clip_path = self._scratch_path(op_id, f"clip{index}")
                    clip_paths.append(clip_path)
                    await self._run(
                        "concatenate",
                        build_extract_stream(
                            str(input_path),
                            str(clip_path),
                            clip.start,
                            duration=clip.duration,
                        ),
                    )
                    self._set_progress(
                        math.floor(EXTRACT_PROGRESS_SHARE * (index + 1) / len(ranges) + 0.5)
                    )

                try:
                    await asyncio.to_thread(
                        write_concat_manifest,
                        [str(path) for path in clip_paths],
                        str(manifest_path),
                    )
                except OSError as exc:
                    raise ProcessingError("concatenate", f"could not write concat manifest: {exc}") from exc
                await self._run("concatenate", build_concat_stream(str(manifest_path), str(output_path)))
                self._set_progress(CONCAT_DONE_PROGRESS)
                data = await self._read_output("concatenate", output_path)
            finally:
                self._cleanup([input_path, manifest_path, output_path, *clip_paths])

        return MediaAsset(
            data=data,
            duration=sum(clip.duration for clip in ranges),
            mime_type=asset.mime_type,
            title=asset.title,
        )
