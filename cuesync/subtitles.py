"""Reading subtitle cues supplied by the caller."""

import logging
from pathlib import Path
from typing import Iterable

import srt

from cuesync.errors import MalformedSubtitles
from cuesync.models import SubtitleCue, TimeSpan
from cuesync.timeparse import parse_cue_timestamp

logger = logging.getLogger(__name__)


def load_cues(path: Path) -> list[SubtitleCue]:
    """Parse a SubRip file into cues, in file order."""
    path = Path(path)
    text = path.read_text(encoding="utf-8-sig")
    try:
        subs = list(srt.parse(text))
    except srt.SRTParseError as e:
        raise MalformedSubtitles(str(e)[:200], path) from e

    cues = [
        SubtitleCue(
            start=TimeSpan.from_timedelta(sub.start),
            end=TimeSpan.from_timedelta(sub.end),
            text=sub.content,
        )
        for sub in subs
    ]
    logger.info("Loaded %d cues from %s", len(cues), path)
    return cues


def cues_from_cells(rows: Iterable[tuple[str, str, str]]) -> list[SubtitleCue]:
    """Build cues from raw ``(start, end, text)`` cells, e.g. an edited table.

    Timestamps must be strict ``HH:MM:SS,mmm``.
    """
    return [
        SubtitleCue(start=parse_cue_timestamp(start), end=parse_cue_timestamp(end), text=text)
        for start, end, text in rows
    ]


def cue_texts(cues: list[SubtitleCue]) -> str:
    """Cue text only, one cue per line, for feeding a text-to-speech tool."""
    return "\n".join(" ".join(cue.text.splitlines()) for cue in cues)
