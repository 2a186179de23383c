"""Segment extractor: copies each speech segment into its own clip file."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from cuesync import ffutil
from cuesync.models import ExtractedClip, Segment, SourceTrack

logger = logging.getLogger(__name__)


def clip_path_for(track_path: Path, index: int, temp_dir: Path) -> Path:
    """``<name>#<index><suffix>`` inside *temp_dir*, e.g. ``talk.mp3#3.mp3``."""
    return temp_dir / f"{track_path.name}#{index}{track_path.suffix}"


def extract_segments(
    track: SourceTrack,
    segments: list[Segment],
    temp_dir: Path,
    runner: ffutil.AudioToolRunner | None = None,
    workers: int = 1,
    on_progress: Callable[[float], None] | None = None,
) -> list[ExtractedClip]:
    """Stream-copy every segment of *track* into *temp_dir*.

    Clips come back in segment order whatever *workers* is. The first failed
    extraction propagates; clips already written are left on disk.
    """
    runner = runner if runner is not None else ffutil.FFmpegRunner()
    temp_dir = Path(temp_dir)
    temp_dir.mkdir(parents=True, exist_ok=True)

    total = len(segments)
    done = 0

    def extract_one(index: int) -> ExtractedClip:
        seg = segments[index]
        out = clip_path_for(track.path, index, temp_dir)
        runner.trim(track.path, seg.start, seg.duration, out)
        return ExtractedClip(start=seg.start, duration=seg.duration, path=out)

    def report() -> None:
        nonlocal done
        done += 1
        if on_progress and total:
            on_progress(done / total)

    clips: list[ExtractedClip] = []
    if workers <= 1:
        for i in range(total):
            clips.append(extract_one(i))
            report()
    else:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # map() yields in submission order and re-raises the first failure.
            for clip in pool.map(extract_one, range(total)):
                clips.append(clip)
                report()

    logger.info("Extracted %d clips from %s into %s", len(clips), track.path, temp_dir)
    return clips
