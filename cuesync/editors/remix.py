"""Remix editor: lays reconciled clips onto one track and writes matching subtitles."""

import logging
from pathlib import Path

import srt

from cuesync import ffutil
from cuesync.models import JoinEntry, JoinPlan, ReconciledItem

logger = logging.getLogger(__name__)


def build_join_plan(items: list[ReconciledItem]) -> JoinPlan:
    return [JoinEntry(offset=item.chosen_start, clip_path=item.clip_path) for item in items]


def mix(
    plan: JoinPlan,
    output_path: Path,
    runner: ffutil.AudioToolRunner | None = None,
) -> Path:
    """Delay each clip by its offset (whole ms) and mix them into *output_path*.

    The output is not inspected afterwards.
    """
    if not plan:
        raise ValueError("mix called with an empty join plan")
    runner = runner if runner is not None else ffutil.FFmpegRunner()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    runner.mix([(entry.offset.millis, entry.clip_path) for entry in plan], output_path)
    logger.info("Mixed %d clips into %s", len(plan), output_path)
    return output_path


def to_subtitles(items: list[ReconciledItem]) -> list[srt.Subtitle]:
    return [
        srt.Subtitle(
            index=i,
            start=item.chosen_start.to_timedelta(),
            end=item.chosen_end.to_timedelta(),
            content=item.text,
        )
        for i, item in enumerate(items)
    ]


def emit_subtitle_file(items: list[ReconciledItem], output_path: Path) -> Path:
    """Write one SubRip cue per item, numbered from 0, in item order."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(srt.compose(to_subtitles(items), reindex=False), encoding="utf-8")
    logger.info("Wrote %d cues to %s", len(items), output_path)
    return output_path
