"""Silence detection analyzer."""

import logging
from pathlib import Path

from cuesync import ffutil
from cuesync.analyzers.timeline import validate_silences
from cuesync.errors import DurationNotFound
from cuesync.models import SilenceInterval, SourceTrack, TimeSpan
from cuesync.timeparse import parse_loose_duration

logger = logging.getLogger(__name__)


def _runner_or_default(runner: ffutil.AudioToolRunner | None) -> ffutil.AudioToolRunner:
    return runner if runner is not None else ffutil.FFmpegRunner()


def detect_silence(
    track_path: Path,
    min_silence: TimeSpan,
    runner: ffutil.AudioToolRunner | None = None,
    noise_db: float | None = None,
) -> list[SilenceInterval]:
    """Run silencedetect over *track_path* and return silences in report order.

    Intervals must come back chronological and non-overlapping; anything
    else raises UnorderedSilence rather than yielding a skewed timeline.
    """
    runner = _runner_or_default(runner)
    stderr = runner.silence_report(track_path, min_silence, noise_db)
    silences = ffutil.parse_silence_intervals(stderr, source=track_path)
    validate_silences(silences, source=track_path)
    logger.info("%s: %d silent ranges (min %s)", track_path, len(silences), min_silence)
    return silences


def get_total_duration(
    track_path: Path, runner: ffutil.AudioToolRunner | None = None
) -> TimeSpan:
    """Read the container duration from ffmpeg's input summary."""
    runner = _runner_or_default(runner)
    stderr = runner.probe_report(track_path)
    raw = ffutil.parse_duration_line(stderr)
    if raw is None:
        raise DurationNotFound(track_path)
    return parse_loose_duration(raw)


def load_track(track_path: Path, runner: ffutil.AudioToolRunner | None = None) -> SourceTrack:
    track_path = Path(track_path)
    total = get_total_duration(track_path, runner)
    logger.info("%s: duration %s", track_path, total)
    return SourceTrack(path=track_path, total_duration=total)
