"""Error types raised by the cuesync pipeline."""

from pathlib import Path


class CueSyncError(Exception):
    pass


class ExternalToolError(CueSyncError):
    """An ffmpeg invocation could not be launched or produced no usable output."""

    def __init__(
        self,
        stage: str,
        path: Path | str | None,
        returncode: int | None = None,
        detail: str = "",
    ) -> None:
        self.stage = stage
        self.path = path
        self.returncode = returncode
        self.detail = detail
        msg = f"{stage} failed"
        if path is not None:
            msg += f" for {path}"
        if returncode is not None:
            msg += f" (rc={returncode})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class FFmpegNotFoundError(ExternalToolError):
    def __init__(self, cmd: str) -> None:
        super().__init__("ffmpeg lookup", None, detail=f"{cmd} not found on PATH")


class ParseError(CueSyncError, ValueError):
    """Text did not have the expected shape, or a captured field was not numeric."""

    kind = "Malformed"

    def __init__(self, text: str, source: Path | str | None = None, reason: str = "") -> None:
        self.text = text
        self.source = source
        self.reason = reason
        msg = f"{self.kind}: {text!r}"
        if source is not None:
            msg += f" in {source}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class MalformedDuration(ParseError):
    kind = "MalformedDuration"


class MalformedTimestamp(ParseError):
    kind = "MalformedTimestamp"


class MalformedSilence(ParseError):
    kind = "MalformedSilence"


class UnorderedSilence(ParseError):
    kind = "UnorderedSilence"


class MalformedSubtitles(ParseError):
    kind = "MalformedSubtitles"


class NotFound(CueSyncError, LookupError):
    pass


class DurationNotFound(NotFound):
    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"No duration line in ffmpeg output for {path}")


class InvalidTimeSpan(CueSyncError, ValueError):
    """A time value or derived duration would be negative."""


class CountMismatchError(CueSyncError):
    """Audio segment and subtitle cue counts differ and the caller did not continue."""

    def __init__(self, mismatch) -> None:
        self.mismatch = mismatch
        super().__init__(
            f"Audio and subtitle counts differ: {mismatch.audio_count} segments "
            f"vs {mismatch.subtitle_count} cues"
        )
