"""Build the speech-segment timeline from silence intervals."""

from pathlib import Path

from cuesync.errors import UnorderedSilence
from cuesync.models import Segment, SilenceInterval, TimeSpan

# ffmpeg prints the container duration in centiseconds, so a silence that
# runs to end-of-file may end slightly past the reported total.
DURATION_RESOLUTION = TimeSpan(0.01)


def validate_silences(
    silences: list[SilenceInterval],
    total: TimeSpan | None = None,
    source: Path | str | None = None,
) -> None:
    """Raise UnorderedSilence unless silences are chronological and disjoint."""
    cursor = TimeSpan.zero()
    for i, s in enumerate(silences):
        if s.end < s.start:
            raise UnorderedSilence(f"#{i} {s.start}-{s.end}", source, "ends before it starts")
        if s.start < cursor:
            raise UnorderedSilence(
                f"#{i} {s.start}-{s.end}", source, f"overlaps or precedes {cursor}"
            )
        cursor = s.end
    if total is not None and silences and cursor > total + DURATION_RESOLUTION:
        raise UnorderedSilence(str(cursor), source, f"silence ends after track end {total}")


def build_boundaries(silences: list[SilenceInterval], total: TimeSpan) -> list[TimeSpan]:
    """Flatten silences into ``[0, s1, e1, s2, e2, ..., total]``."""
    boundaries = [TimeSpan.zero()]
    for s in silences:
        boundaries.append(s.start)
        boundaries.append(s.end)
    boundaries.append(total)
    return boundaries


def _pair(start: TimeSpan, end: TimeSpan) -> Segment:
    if end < start and start - end <= DURATION_RESOLUTION:
        return Segment(start=start, duration=TimeSpan.zero())
    return Segment(start=start, duration=end - start)


def build_segments(silences: list[SilenceInterval], total: TimeSpan) -> list[Segment]:
    """Return the non-silent segments between silences and the track edges.

    Boundaries are paired as ``(b[0], b[1]), (b[2], b[3]), ...``. A silence
    starting at 0 yields a zero-length leading segment, which is kept.
    """
    validate_silences(silences, total)
    boundaries = build_boundaries(silences, total)
    return [
        _pair(boundaries[2 * i], boundaries[2 * i + 1])
        for i in range(len(boundaries) // 2)
    ]


def count_segments(silences: list[SilenceInterval]) -> int:
    """Number of segments the silences split a track into."""
    return len(silences) + 1
