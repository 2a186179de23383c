"""Shared test fixtures."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SILENCE_STDERR = """\
Input #0, mp3, from 'sample.mp3':
  Duration: 00:00:12.86, start: 0.046042, bitrate: 32 kb/s
[silencedetect @ 0x55d1] silence_start: 3.38717
[silencedetect @ 0x55d1] silence_end: 5.49354 | silence_duration: 2.10637
[silencedetect @ 0x55d1] silence_start: 8.47175
[silencedetect @ 0x55d1] silence_end: 10.584 | silence_duration: 2.11225
size=N/A time=00:00:12.86 bitrate=N/A speed= 412x
"""

PROBE_STDERR = """\
Input #0, mp3, from 'sample.mp3':
  Metadata:
    encoder         : Lavf58.76.100
  Duration: 00:00:12.86, start: 0.046042, bitrate: 32 kb/s
  Stream #0:0: Audio: mp3, 24000 Hz, mono, fltp, 32 kb/s
At least one output file must be specified
"""


class FakeRunner:
    """Stands in for ffmpeg: returns canned reports and records file operations."""

    def __init__(self, silence_stderr: str = SILENCE_STDERR, probe_stderr: str = PROBE_STDERR):
        self.silence_stderr = silence_stderr
        self.probe_stderr = probe_stderr
        self.silence_calls: list[tuple] = []
        self.trims: list[tuple] = []
        self.mixes: list[tuple] = []
        self.fail_trim_at: Path | None = None

    def silence_report(self, input_path, min_silence, noise_db=None):
        self.silence_calls.append((input_path, min_silence, noise_db))
        return self.silence_stderr

    def probe_report(self, input_path):
        return self.probe_stderr

    def trim(self, input_path, start, duration, output_path):
        from cuesync.errors import ExternalToolError

        if self.fail_trim_at is not None and output_path == self.fail_trim_at:
            raise ExternalToolError("segment extraction", input_path, returncode=1)
        self.trims.append((input_path, start, duration, output_path))
        output_path.write_bytes(b"clip")

    def mix(self, inputs, output_path):
        self.mixes.append((list(inputs), output_path))
        output_path.write_bytes(b"mix")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def sample_srt_path() -> Path:
    return FIXTURES_DIR / "sample.srt"
