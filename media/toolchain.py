import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

import ffmpeg

logger = logging.getLogger(__name__)


def build_extract_stream(
    input_path: str,
    output_path: str,
    start: float,
    end: Optional[float] = None,
    duration: Optional[float] = None,
):
    """
    Build a stream-copy extraction of [start, end] (or start + duration).

    Equivalent to:
        ffmpeg -i input -ss START -to END -c copy output
    """
    if (end is None) == (duration is None):
        raise ValueError("Pass exactly one of end or duration")

    output_kwargs = {"ss": f"{start:.3f}", "c": "copy"}
    if end is not None:
        output_kwargs["to"] = f"{end:.3f}"
    else:
        output_kwargs["t"] = f"{duration:.3f}"

    return (
        ffmpeg
        .input(input_path)
        .output(output_path, **output_kwargs)
        .overwrite_output()
    )


def build_concat_stream(manifest_path: str, output_path: str):
    """ffmpeg -f concat -safe 0 -i manifest -c copy output"""
    return (
        ffmpeg
        .input(manifest_path, f="concat", safe=0)
        .output(output_path, c="copy")
        .overwrite_output()
    )


def _quote_manifest_path(path: str) -> str:
    # concat demuxer quoting: close the quote, emit an escaped quote, reopen
    return "'" + path.replace("'", "'\\''") + "'"


def write_concat_manifest(clip_paths: Sequence[str], manifest_path: str) -> str:
    """Write a concat demuxer manifest listing `clip_paths` in order."""
    lines = [f"file {_quote_manifest_path(str(Path(p).resolve()))}" for p in clip_paths]
    Path(manifest_path).write_text("\n".join(lines) + "\n", encoding="utf-8")
    return manifest_path


def run_stream(stream, binary: str = "ffmpeg") -> None:
    """
    Run a built stream with `binary`.
    Raises ffmpeg.Error on a non-zero exit status.
    """
    logger.debug("Running %s", " ".join(ffmpeg.compile(stream, cmd=binary)))
    stream.run(cmd=binary, capture_stdout=True, capture_stderr=True)


def describe_error(exc: Exception) -> str:
    """Human-readable cause for a toolchain failure."""
    if isinstance(exc, ffmpeg.Error):
        stderr = exc.stderr.decode(errors="replace").strip() if exc.stderr else ""
        if stderr:
            return stderr.splitlines()[-1]
    return str(exc) or exc.__class__.__name__


def probe_toolchain(binary: str = "ffmpeg", timeout: int = 10) -> str:
    """
    Check that `binary` runs and return its version banner.
    Raises RuntimeError when it cannot be executed.
    """
    try:
        result = subprocess.run(
            [binary, "-version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (FileNotFoundError, PermissionError, subprocess.TimeoutExpired) as e:
        raise RuntimeError(f"{binary} is not available: {e}") from e

    if result.returncode != 0:
        raise RuntimeError(f"{binary} -version exited with status {result.returncode}")
    banner = (result.stdout or "").splitlines()
    return banner[0] if banner else binary


def probe_duration_seconds(media_path: str, probe_binary: str = "ffprobe") -> float:
    """
    Probe media metadata and return duration in seconds (0.0 when unknown).
    """
    try:
        probe = ffmpeg.probe(media_path, cmd=probe_binary)
        fmt = probe.get("format", {})
        duration = float(fmt.get("duration", 0.0) or 0.0)
        if duration <= 0:
            for stream in probe.get("streams", []):
                if stream.get("codec_type") == "video":
                    duration = float(stream.get("duration", 0.0) or 0.0)
                    if duration > 0:
                        break
        return max(0.0, duration)
    except (ffmpeg.Error, OSError, ValueError) as e:
        logger.warning(f"Could not probe media duration for {media_path}: {describe_error(e)}")
        return 0.0
