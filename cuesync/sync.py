"""Pair extracted clips with subtitle cues and pick each output timing."""

import logging
from typing import Callable

from cuesync.errors import CountMismatchError
from cuesync.models import (
    CountMismatch,
    ExtractedClip,
    ReconciledItem,
    Source,
    SourcePolicy,
    SubtitleCue,
    TimeSpan,
)

logger = logging.getLogger(__name__)

MismatchHandler = Callable[[CountMismatch], bool]


def check_counts(
    clips: list[ExtractedClip], cues: list[SubtitleCue]
) -> CountMismatch | None:
    if len(clips) == len(cues):
        return None
    return CountMismatch(audio_count=len(clips), subtitle_count=len(cues))


def pick_start(source: Source, clip: ExtractedClip, cue: SubtitleCue) -> TimeSpan:
    if source is Source.AUDIO:
        return clip.start
    if source is Source.SUBTITLE:
        return cue.start
    raise ValueError(f"Unknown start source: {source!r}")


def pick_duration(source: Source, clip: ExtractedClip, cue: SubtitleCue) -> TimeSpan:
    if source is Source.AUDIO:
        return clip.duration
    if source is Source.SUBTITLE:
        return cue.duration
    raise ValueError(f"Unknown duration source: {source!r}")


def reconcile(
    clips: list[ExtractedClip],
    cues: list[SubtitleCue],
    policy: SourcePolicy,
    on_mismatch: MismatchHandler | None = None,
) -> list[ReconciledItem]:
    """Pair clip[i] with cue[i] and build one ReconciledItem per pair.

    If the counts differ, ``on_mismatch`` decides: True continues with the
    shorter length, False (or no handler) raises CountMismatchError.
    Text always comes from the cue.
    """
    mismatch = check_counts(clips, cues)
    if mismatch is not None:
        logger.warning(
            "Count mismatch: %d audio segments, %d subtitle cues",
            mismatch.audio_count,
            mismatch.subtitle_count,
        )
        if on_mismatch is None or not on_mismatch(mismatch):
            raise CountMismatchError(mismatch)
        logger.info("Continuing with the first %d pairs", mismatch.usable)

    items: list[ReconciledItem] = []
    for clip, cue in zip(clips, cues):
        items.append(
            ReconciledItem(
                chosen_start=pick_start(policy.start, clip, cue),
                chosen_duration=pick_duration(policy.duration, clip, cue),
                clip_path=clip.path,
                text=cue.text,
            )
        )
    return items
