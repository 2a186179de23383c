"""JSON manifest schema: the contract between CLI and engine."""

import json
from dataclasses import dataclass, field
from pathlib import Path

from cuesync.models import Source, SourcePolicy, TimeSpan

MISMATCH_CHOICES = ("ask", "continue", "abort")


@dataclass
class SilenceConfig:
    """Configuration for silence detection."""

    min_duration: float = 0.2
    noise_db: float | None = None

    @property
    def min_silence(self) -> TimeSpan:
        return TimeSpan(self.min_duration)


@dataclass
class SyncConfig:
    """Which side supplies output start times and durations."""

    start_source: str = "audio"
    duration_source: str = "audio"
    on_mismatch: str = "ask"

    def __post_init__(self) -> None:
        for name in ("start_source", "duration_source"):
            value = getattr(self, name)
            try:
                Source(value)
            except ValueError:
                raise ValueError(
                    f"{name} must be one of {[s.value for s in Source]}, got {value!r}"
                ) from None
        if self.on_mismatch not in MISMATCH_CHOICES:
            raise ValueError(
                f"on_mismatch must be one of {list(MISMATCH_CHOICES)}, got {self.on_mismatch!r}"
            )

    @property
    def policy(self) -> SourcePolicy:
        return SourcePolicy(start=Source(self.start_source), duration=Source(self.duration_source))


@dataclass
class ExtractConfig:
    """Where clips go and how many ffmpeg processes cut them at once.

    Clips are kept by default only when an explicit ``temp_dir`` is given;
    runs in the system temp directory clean up after themselves.
    """

    temp_dir: Path | None = None
    workers: int = 1
    keep_clips: bool | None = None

    def __post_init__(self) -> None:
        if self.temp_dir is not None:
            self.temp_dir = Path(self.temp_dir)
        if self.keep_clips is None:
            self.keep_clips = self.temp_dir is not None
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")


@dataclass
class Manifest:
    """Top-level sync manifest."""

    input: Path
    subtitles: Path
    output: Path
    subtitle_output: Path | None = None
    version: str = "1"
    silence: SilenceConfig = field(default_factory=SilenceConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)

    @property
    def subtitle_output_path(self) -> Path:
        return self.subtitle_output or self.output.with_suffix(".srt")


def load_manifest(path: str | Path) -> Manifest:
    """Load and validate a manifest from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())

    if not all(key in data for key in ("input", "subtitles", "output")):
        raise ValueError("Manifest must contain 'input', 'subtitles' and 'output' fields")

    silence = SilenceConfig(**data["silence"]) if "silence" in data else SilenceConfig()
    sync = SyncConfig(**data["sync"]) if "sync" in data else SyncConfig()
    extract = ExtractConfig(**data["extract"]) if "extract" in data else ExtractConfig()
    subtitle_output = data.get("subtitle_output")

    return Manifest(
        version=data.get("version", "1"),
        input=Path(data["input"]),
        subtitles=Path(data["subtitles"]),
        output=Path(data["output"]),
        subtitle_output=Path(subtitle_output) if subtitle_output else None,
        silence=silence,
        sync=sync,
        extract=extract,
    )
