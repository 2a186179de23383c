"""Parsing of ffmpeg durations and SubRip timestamps into TimeSpans."""

import math
import re

from cuesync.errors import MalformedDuration, MalformedTimestamp
from cuesync.models import TimeSpan

# Multipliers for tokens read right-to-left: seconds, minutes, hours, days.
_LOOSE_UNITS = (1, 60, 3600, 86400)

_WHOLE_RE = re.compile(r"\d+", re.ASCII)
_SECONDS_RE = re.compile(r"\d+(\.\d+)?", re.ASCII)
_CUE_TIMESTAMP_RE = re.compile(
    r"(?P<hours>\d+):(?P<minutes>\d+):(?P<seconds>\d+),(?P<millis>\d{1,3})", re.ASCII
)


def parse_loose_duration(text: str) -> TimeSpan:
    """Parse a free-form ``[[[D:]H:]M:]S[.fff]`` duration as printed by ffmpeg.

    Every field is unsigned and only the seconds token may carry a fraction.
    """
    tokens = text.strip().split(":")
    if not 1 <= len(tokens) <= len(_LOOSE_UNITS):
        raise MalformedDuration(text, reason=f"expected 1-4 fields, got {len(tokens)}")

    *whole, seconds = tokens
    if _SECONDS_RE.fullmatch(seconds) is None or not all(
        _WHOLE_RE.fullmatch(token) for token in whole
    ):
        raise MalformedDuration(text, reason="non-numeric field")

    try:
        total = float(seconds)
        for unit, token in zip(_LOOSE_UNITS[1:], reversed(whole)):
            total += int(token) * unit
    except OverflowError:
        total = math.inf
    if not math.isfinite(total):
        raise MalformedDuration(text, reason="value out of range")
    return TimeSpan(total)


def parse_cue_timestamp(text: str) -> TimeSpan:
    """Parse a strict ``HH:MM:SS,mmm`` SubRip timestamp.

    The value is assembled in integer milliseconds so ``00:00:04,960`` is
    exactly 4.96 seconds.
    """
    m = _CUE_TIMESTAMP_RE.fullmatch(text.strip())
    if m is None:
        raise MalformedTimestamp(text, reason="expected HH:MM:SS,mmm")

    hours, minutes, seconds, millis = (int(v) for v in m.group("hours", "minutes", "seconds", "millis"))
    total_ms = ((hours * 3600 + minutes * 60 + seconds) * 1000) + millis
    return TimeSpan.from_millis(total_ms)


def format_cue_timestamp(span: TimeSpan) -> str:
    total_ms = span.millis
    h, rem = divmod(total_ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms:03d}"
