"""Shared data types used across cuesync."""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from pathlib import Path

from cuesync.errors import InvalidTimeSpan

# Float subtraction noise below this is treated as zero.
_NEGATIVE_EPSILON = 1e-6


@dataclass(frozen=True, order=True)
class TimeSpan:
    """A non-negative duration in seconds, used both as an offset and a length."""

    seconds: float

    def __post_init__(self) -> None:
        if self.seconds < 0:
            if self.seconds > -_NEGATIVE_EPSILON:
                object.__setattr__(self, "seconds", 0.0)
            else:
                raise InvalidTimeSpan(f"Negative time span: {self.seconds}s")

    @classmethod
    def zero(cls) -> "TimeSpan":
        return cls(0.0)

    @classmethod
    def from_millis(cls, millis: int) -> "TimeSpan":
        return cls(millis / 1000)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "TimeSpan":
        return cls(delta.total_seconds())

    @property
    def millis(self) -> int:
        """Whole milliseconds, rounded to nearest."""
        return int(round(self.seconds * 1000))

    def to_timedelta(self) -> timedelta:
        return timedelta(milliseconds=self.millis)

    def __add__(self, other: "TimeSpan") -> "TimeSpan":
        if not isinstance(other, TimeSpan):
            return NotImplemented
        return TimeSpan(self.seconds + other.seconds)

    def __sub__(self, other: "TimeSpan") -> "TimeSpan":
        if not isinstance(other, TimeSpan):
            return NotImplemented
        diff = self.seconds - other.seconds
        if diff <= -_NEGATIVE_EPSILON:
            raise InvalidTimeSpan(
                f"Negative duration: {self.seconds}s - {other.seconds}s"
            )
        return TimeSpan(diff)

    def __str__(self) -> str:
        return f"{self.seconds:.3f}s"


@dataclass(frozen=True)
class SilenceInterval:
    """A silent range as reported by ffmpeg silencedetect."""

    start: TimeSpan
    end: TimeSpan


@dataclass(frozen=True)
class SourceTrack:
    path: Path
    total_duration: TimeSpan


@dataclass(frozen=True)
class Segment:
    """A non-silent span of a source track."""

    start: TimeSpan
    duration: TimeSpan

    @property
    def end(self) -> TimeSpan:
        return self.start + self.duration


@dataclass(frozen=True)
class ExtractedClip:
    """A segment written to its own file, tagged with its original offset."""

    start: TimeSpan
    duration: TimeSpan
    path: Path


@dataclass(frozen=True)
class SubtitleCue:
    start: TimeSpan
    end: TimeSpan
    text: str

    @property
    def duration(self) -> TimeSpan:
        return self.end - self.start


@dataclass(frozen=True)
class ReconciledItem:
    """One output unit: a clip placed at a chosen time, carrying cue text."""

    chosen_start: TimeSpan
    chosen_duration: TimeSpan
    clip_path: Path
    text: str

    @property
    def chosen_end(self) -> TimeSpan:
        return self.chosen_start + self.chosen_duration


@dataclass(frozen=True)
class JoinEntry:
    offset: TimeSpan
    clip_path: Path


JoinPlan = list[JoinEntry]


class Source(Enum):
    """Which side supplies a reconciled value."""

    AUDIO = "audio"
    SUBTITLE = "subtitle"


@dataclass(frozen=True)
class SourcePolicy:
    start: Source = Source.AUDIO
    duration: Source = Source.AUDIO


@dataclass(frozen=True)
class CountMismatch:
    """Audio segment count and subtitle cue count differ."""

    audio_count: int
    subtitle_count: int

    @property
    def usable(self) -> int:
        return min(self.audio_count, self.subtitle_count)
