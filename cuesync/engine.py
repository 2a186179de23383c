"""Orchestrator: runs the segment/sync/remix pipeline defined by a Manifest."""

import logging
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from cuesync import ffutil
from cuesync.analyzers.silence import detect_silence, load_track
from cuesync.analyzers.timeline import build_segments
from cuesync.editors.extract import extract_segments
from cuesync.editors.remix import build_join_plan, emit_subtitle_file, mix
from cuesync.manifest import Manifest
from cuesync.models import ExtractedClip, ReconciledItem, TimeSpan
from cuesync.subtitles import load_cues
from cuesync.sync import MismatchHandler, reconcile

logger = logging.getLogger(__name__)


@dataclass
class EngineResult:
    """Outcome of a run. ``clips`` is empty when the clips were discarded."""

    output_path: Path
    subtitle_path: Path
    segment_count: int = 0
    cue_count: int = 0
    duration_original: TimeSpan = field(default_factory=TimeSpan.zero)
    clips: list[ExtractedClip] = field(default_factory=list)
    items: list[ReconciledItem] = field(default_factory=list)

    @property
    def item_count(self) -> int:
        return len(self.items)


def _mismatch_handler(
    manifest: Manifest, on_mismatch: MismatchHandler | None
) -> MismatchHandler | None:
    if manifest.sync.on_mismatch == "continue":
        return lambda mismatch: True
    if manifest.sync.on_mismatch == "abort":
        return lambda mismatch: False
    return on_mismatch


def process(
    manifest: Manifest,
    on_progress: Callable[[str, float], None] | None = None,
    on_mismatch: MismatchHandler | None = None,
    runner: ffutil.AudioToolRunner | None = None,
) -> EngineResult:
    """Execute the full pipeline.

    Args:
        manifest: Validated sync manifest.
        on_progress: Optional callback(stage_name, fraction_complete).
        on_mismatch: Asked whether to continue when segment and cue counts
            differ; only consulted when the manifest says "ask".
        runner: Audio tool runner; defaults to the ffmpeg binary on PATH.
    """

    def _progress(stage: str, frac: float) -> None:
        if on_progress:
            on_progress(stage, frac)

    def _sub_progress(stage: str, base: float, span: float):
        """Return a callback that maps a stage's [0,1] to [base, base+span]."""
        def cb(frac: float) -> None:
            _progress(stage, base + frac * span)
        return cb

    if runner is None:
        ffutil.check_ffmpeg()
        runner = ffutil.FFmpegRunner()

    _progress("Loading subtitles", 0.0)
    cues = load_cues(manifest.subtitles)

    _progress("Probing audio duration", 0.05)
    track = load_track(manifest.input, runner)

    _progress("Scanning audio for silence", 0.10)
    silences = detect_silence(
        track.path,
        manifest.silence.min_silence,
        runner,
        noise_db=manifest.silence.noise_db,
    )
    segments = build_segments(silences, track.total_duration)
    logger.info("%d segments, %d cues", len(segments), len(cues))

    base_dir = manifest.extract.temp_dir
    if base_dir is not None:
        base_dir.mkdir(parents=True, exist_ok=True)
    run_dir = Path(tempfile.mkdtemp(prefix=f"{track.path.stem}_", dir=base_dir))

    try:
        _progress(f"Extracting {len(segments)} segments", 0.25)
        clips = extract_segments(
            track,
            segments,
            run_dir,
            runner,
            workers=manifest.extract.workers,
            on_progress=_sub_progress(f"Extracting {len(segments)} segments", 0.25, 0.45),
        )

        _progress("Reconciling with subtitles", 0.70)
        items = reconcile(
            clips, cues, manifest.sync.policy, _mismatch_handler(manifest, on_mismatch)
        )

        _progress("Mixing output audio", 0.75)
        mix(build_join_plan(items), manifest.output, runner)

        _progress("Writing subtitles", 0.95)
        subtitle_path = emit_subtitle_file(items, manifest.subtitle_output_path)
    finally:
        if not manifest.extract.keep_clips:
            shutil.rmtree(run_dir, ignore_errors=True)

    if not manifest.extract.keep_clips:
        clips = []

    _progress("Done", 1.0)
    return EngineResult(
        output_path=manifest.output,
        subtitle_path=subtitle_path,
        segment_count=len(segments),
        cue_count=len(cues),
        duration_original=track.total_duration,
        clips=clips,
        items=items,
    )
