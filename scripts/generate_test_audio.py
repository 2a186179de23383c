#!/usr/bin/env python3
"""Generate a synthetic speech-like track and matching subtitles for cuesync.

Produces a ~12-second WAV with alternating tone and silence:
  0-3s   440 Hz tone
  3-5s   silence
  5-8s   880 Hz tone
  8-10s  silence
  10-12s 660 Hz tone

and a SubRip file with one cue per tone, shifted by half a second.
"""

import subprocess
import sys
from pathlib import Path

CUES = """\
1
00:00:00,500 --> 00:00:03,500
First tone.

2
00:00:05,500 --> 00:00:08,500
Second tone.

3
00:00:10,500 --> 00:00:12,500
Third tone.
"""


def generate_test_audio(output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)

    silence = "anullsrc=r=44100:cl=mono:d=2"
    audio_filter = (
        "sine=f=440:r=44100:d=3[a0];"
        f"{silence}[s0];"
        "sine=f=880:r=44100:d=3[a1];"
        f"{silence}[s1];"
        "sine=f=660:r=44100:d=2[a2];"
        "[a0][s0][a1][s1][a2]concat=n=5:v=0:a=1[aout]"
    )

    cmd = [
        "ffmpeg", "-y",
        "-filter_complex", audio_filter,
        "-map", "[aout]",
        "-c:a", "pcm_s16le",
        str(output),
    ]
    subprocess.run(cmd, capture_output=True, check=True)

    srt_path = output.with_suffix(".srt")
    srt_path.write_text(CUES, encoding="utf-8")
    print(f"Generated: {output} and {srt_path}")
    return srt_path


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.wav")
    generate_test_audio(out)
