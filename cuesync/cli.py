"""Thin CLI entry point: builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from cuesync.analyzers.silence import detect_silence, load_track
from cuesync.analyzers.timeline import build_segments
from cuesync.engine import process
from cuesync.errors import CountMismatchError, CueSyncError
from cuesync.manifest import ExtractConfig, Manifest, SilenceConfig, SyncConfig, load_manifest
from cuesync.models import CountMismatch, Source, TimeSpan
from cuesync.subtitles import cue_texts, load_cues
from cuesync.timeparse import format_cue_timestamp


def _ask_continue(mismatch: CountMismatch) -> bool:
    if not sys.stdin.isatty():
        return False
    answer = input(
        f"Audio has {mismatch.audio_count} segments but subtitles have "
        f"{mismatch.subtitle_count} cues. Continue with the first {mismatch.usable}? [y/N] "
    )
    return answer.strip().lower() in ("y", "yes")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cuesync",
        description="cuesync: split speech at silences, resync to subtitles, remix.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-vv for debug)")
    sub = parser.add_subparsers(dest="command")

    sources = [s.value for s in Source]
    proc = sub.add_parser("process", help="Resync an audio file to a subtitle file")
    proc.add_argument("audio", nargs="?", type=Path, help="Input audio file")
    proc.add_argument("subtitles", nargs="?", type=Path, help="Input SubRip file")
    proc.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    proc.add_argument("--output", "-o", type=Path, help="Output audio path")
    proc.add_argument("--subtitle-output", type=Path, help="Output SubRip path")
    proc.add_argument("--min-silence", type=float, default=0.2, help="Minimum silence duration (seconds)")
    proc.add_argument("--noise-db", type=float, default=None, help="Silence threshold in dB")
    proc.add_argument("--start-from", choices=sources, default="audio", help="Side supplying start times")
    proc.add_argument("--duration-from", choices=sources, default="audio", help="Side supplying durations")
    proc.add_argument("--temp-dir", type=Path, help="Directory for extracted clips")
    proc.add_argument("--workers", type=int, default=1, help="Parallel extraction processes")
    proc.add_argument("--discard-clips", action="store_true", help="Delete extracted clips even with --temp-dir")
    answer = proc.add_mutually_exclusive_group()
    answer.add_argument("--yes", "-y", action="store_true", help="Continue on count mismatch")
    answer.add_argument("--no", "-n", action="store_true", help="Abort on count mismatch")

    segs = sub.add_parser("segments", help="List the speech segments of an audio file")
    segs.add_argument("audio", type=Path, help="Input audio file")
    segs.add_argument("--min-silence", type=float, default=0.2, help="Minimum silence duration (seconds)")
    segs.add_argument("--noise-db", type=float, default=None, help="Silence threshold in dB")

    texts = sub.add_parser("texts", help="Print cue text, one line per cue")
    texts.add_argument("subtitles", type=Path, help="Input SubRip file")

    return parser


def _manifest_from_args(args: argparse.Namespace) -> Manifest:
    if args.manifest:
        return load_manifest(args.manifest)
    output = args.output or args.audio.with_stem(args.audio.stem + "_synced")
    on_mismatch = "continue" if args.yes else "abort" if args.no else "ask"
    return Manifest(
        input=args.audio,
        subtitles=args.subtitles,
        output=output,
        subtitle_output=args.subtitle_output,
        silence=SilenceConfig(min_duration=args.min_silence, noise_db=args.noise_db),
        sync=SyncConfig(
            start_source=args.start_from,
            duration_source=args.duration_from,
            on_mismatch=on_mismatch,
        ),
        extract=ExtractConfig(
            temp_dir=args.temp_dir,
            workers=args.workers,
            keep_clips=False if args.discard_clips else None,
        ),
    )


def _run_process(args: argparse.Namespace) -> None:
    if not args.manifest and not (args.audio and args.subtitles):
        print("Error: provide AUDIO and SUBTITLES arguments or --manifest.", file=sys.stderr)
        sys.exit(1)
    m = _manifest_from_args(args)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    result = process(m, on_progress=on_progress, on_mismatch=_ask_continue)

    print()
    print(f"Done! Output: {result.output_path}")
    print(f"  Subtitles: {result.subtitle_path}")
    print(f"  Segments: {result.segment_count}, cues: {result.cue_count}, mixed: {result.item_count}")


def _run_segments(args: argparse.Namespace) -> None:
    track = load_track(args.audio)
    silences = detect_silence(track.path, TimeSpan(args.min_silence), noise_db=args.noise_db)
    segments = build_segments(silences, track.total_duration)
    print(f"{len(segments)} segments in {track.path} ({track.total_duration})")
    for i, seg in enumerate(segments):
        print(f"  {i:3d}  {format_cue_timestamp(seg.start)} --> {format_cue_timestamp(seg.end)}")


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "process":
            _run_process(args)
        elif args.command == "segments":
            _run_segments(args)
        elif args.command == "texts":
            print(cue_texts(load_cues(args.subtitles)))
    except CountMismatchError as e:
        print(f"Aborted: {e}", file=sys.stderr)
        sys.exit(2)
    except (CueSyncError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
