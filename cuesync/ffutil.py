"""FFmpeg subprocess helpers and diagnostic-output parsing."""

import logging
import math
import re
import shutil
import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from cuesync.errors import ExternalToolError, FFmpegNotFoundError, MalformedSilence
from cuesync.models import SilenceInterval, TimeSpan

logger = logging.getLogger(__name__)

_SILENCE_END_RE = re.compile(
    r"\[silencedetect.*?silence_end:\s*(?P<end>[^|]*?)\s*\|\s*silence_duration:\s*(?P<duration>.*)"
)
_DURATION_RE = re.compile(r"Duration: ([0-9:.]*), start:.*bitrate:")

# Keep error messages readable when ffmpeg dumps a long log.
_STDERR_TAIL = 500


class AudioToolRunner(Protocol):
    """The external audio operations the pipeline needs.

    Report methods return ffmpeg's diagnostic (stderr) text; the others
    write files and return nothing.
    """

    def silence_report(
        self, input_path: Path, min_silence: TimeSpan, noise_db: float | None = None
    ) -> str: ...

    def probe_report(self, input_path: Path) -> str: ...

    def trim(
        self, input_path: Path, start: TimeSpan, duration: TimeSpan, output_path: Path
    ) -> None: ...

    def mix(self, inputs: Sequence[tuple[int, Path]], output_path: Path) -> None: ...


def check_ffmpeg(binary: str = "ffmpeg") -> None:
    """Raise FFmpegNotFoundError if ffmpeg is not on PATH."""
    if shutil.which(binary) is None:
        raise FFmpegNotFoundError(binary)


def _seconds(span: TimeSpan) -> str:
    return f"{span.seconds:.6f}"


def build_mix_filter(delays_ms: Sequence[int]) -> str:
    """Build an adelay/amix filter graph: one delayed stream per input, summed."""
    if not delays_ms:
        raise ValueError("build_mix_filter called with no inputs")

    filter_parts: list[str] = []
    labels: list[str] = []
    for i, delay in enumerate(delays_ms):
        filter_parts.append(f"[{i}]adelay={delay}|{delay}[a{i}]")
        labels.append(f"[a{i}]")
    filter_parts.append(f"{''.join(labels)}amix=inputs={len(delays_ms)}")
    return ";".join(filter_parts)


class FFmpegRunner:
    """AudioToolRunner backed by the ffmpeg binary.

    Every call blocks until ffmpeg exits. ``timeout`` (seconds) applies to
    each invocation separately.
    """

    def __init__(self, binary: str = "ffmpeg", timeout: float | None = None) -> None:
        self.binary = binary
        self.timeout = timeout

    def _run(self, args: list[str], stage: str, path: Path, check: bool = True) -> str:
        cmd = [self.binary, "-hide_banner", *args]
        logger.debug("%s: %s", stage, " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise FFmpegNotFoundError(self.binary) from None
        except OSError as e:
            raise ExternalToolError(stage, path, detail=str(e)) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalToolError(
                stage, path, detail=f"timed out after {e.timeout}s"
            ) from e

        stderr = result.stderr or ""
        if check and result.returncode != 0:
            raise ExternalToolError(
                stage, path, returncode=result.returncode, detail=stderr[-_STDERR_TAIL:]
            )
        if result.returncode != 0 and not stderr:
            raise ExternalToolError(
                stage, path, returncode=result.returncode, detail="no output"
            )
        return stderr

    def silence_report(
        self, input_path: Path, min_silence: TimeSpan, noise_db: float | None = None
    ) -> str:
        af = f"silencedetect=d={min_silence.seconds}"
        if noise_db is not None:
            af = f"silencedetect=noise={noise_db}dB:d={min_silence.seconds}"
        args = ["-i", str(input_path), "-af", af, "-f", "null", "-"]
        return self._run(args, "silence detection", input_path, check=False)

    def probe_report(self, input_path: Path) -> str:
        # No output file is named, so ffmpeg always exits non-zero here.
        return self._run(["-i", str(input_path)], "duration probe", input_path, check=False)

    def trim(
        self, input_path: Path, start: TimeSpan, duration: TimeSpan, output_path: Path
    ) -> None:
        args = [
            "-y",
            "-ss", _seconds(start),
            "-i", str(input_path),
            "-c", "copy",
            "-t", _seconds(duration),
            str(output_path),
        ]
        self._run(args, "segment extraction", input_path)

    def mix(self, inputs: Sequence[tuple[int, Path]], output_path: Path) -> None:
        args = ["-y"]
        for _, clip in inputs:
            args += ["-i", str(clip)]
        args += ["-filter_complex", build_mix_filter([d for d, _ in inputs]), str(output_path)]
        self._run(args, "delayed mix", output_path)


def parse_silence_intervals(
    stderr: str, source: Path | str | None = None
) -> list[SilenceInterval]:
    """Parse silencedetect output from ffmpeg stderr into SilenceIntervals.

    ffmpeg reports each silence by its end and length, so the start is
    derived as ``end - duration``. Lines that do not match are ignored;
    a matching line with bad numbers raises MalformedSilence.
    """
    intervals: list[SilenceInterval] = []
    for line in stderr.splitlines():
        m = _SILENCE_END_RE.search(line)
        if m is None:
            continue
        try:
            end = float(m.group("end"))
            duration = float(m.group("duration"))
        except ValueError:
            raise MalformedSilence(line.strip(), source, "non-numeric field") from None
        if not (math.isfinite(end) and math.isfinite(duration)) or duration <= 0 or end < 0:
            raise MalformedSilence(line.strip(), source, "non-positive duration")
        end_span = TimeSpan(end)
        try:
            start_span = end_span - TimeSpan(duration)
        except ValueError:
            raise MalformedSilence(line.strip(), source, "silence starts before 0") from None
        intervals.append(SilenceInterval(start=start_span, end=end_span))
    return intervals


def parse_duration_line(stderr: str) -> str | None:
    """Return the raw ``Duration:`` value from ffmpeg's input summary, if any."""
    m = _DURATION_RE.search(stderr)
    return m.group(1) if m else None
