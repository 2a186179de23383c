"""Unit tests for clip/cue reconciliation."""

from pathlib import Path

import pytest

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
from cuesync.sync import check_counts, reconcile


def _clip(start: float, duration: float, name: str) -> ExtractedClip:
    return ExtractedClip(TimeSpan(start), TimeSpan(duration), Path(name))


def _cue(start: float, end: float, text: str) -> SubtitleCue:
    return SubtitleCue(TimeSpan(start), TimeSpan(end), text)


CLIPS = [_clip(0.0, 3.0, "c0.mp3"), _clip(5.0, 2.0, "c1.mp3"), _clip(9.0, 1.5, "c2.mp3")]
CUES = [_cue(1.0, 5.0, "one"), _cue(6.0, 6.5, "two"), _cue(8.0, 12.0, "three")]


class TestCheckCounts:
    def test_equal(self):
        assert check_counts(CLIPS, CUES) is None

    def test_mismatch(self):
        assert check_counts(CLIPS, CUES[:2]) == CountMismatch(3, 2)


class TestReconcilePolicy:
    def test_all_from_audio(self):
        items = reconcile(CLIPS, CUES, SourcePolicy(Source.AUDIO, Source.AUDIO))
        assert items[1] == ReconciledItem(TimeSpan(5.0), TimeSpan(2.0), Path("c1.mp3"), "two")

    def test_all_from_subtitle(self):
        items = reconcile(CLIPS, CUES, SourcePolicy(Source.SUBTITLE, Source.SUBTITLE))
        assert items[0].chosen_start == TimeSpan(1.0)
        assert items[0].chosen_duration == TimeSpan(4.0)
        assert items[0].clip_path == Path("c0.mp3")

    def test_start_from_subtitle_duration_from_audio(self):
        items = reconcile(CLIPS, CUES, SourcePolicy(Source.SUBTITLE, Source.AUDIO))
        for item, clip, cue in zip(items, CLIPS, CUES):
            assert item.chosen_start == cue.start
            assert item.chosen_duration == clip.duration

    def test_start_from_audio_duration_from_subtitle(self):
        items = reconcile(CLIPS, CUES, SourcePolicy(Source.AUDIO, Source.SUBTITLE))
        assert [i.chosen_start for i in items] == [c.start for c in CLIPS]
        assert [i.chosen_duration for i in items] == [c.duration for c in CUES]

    def test_text_always_from_cue(self):
        items = reconcile(CLIPS, CUES, SourcePolicy())
        assert [i.text for i in items] == ["one", "two", "three"]


class TestReconcileMismatch:
    def test_no_handler_raises_with_structured_value(self):
        with pytest.raises(CountMismatchError) as exc_info:
            reconcile(CLIPS, CUES[:2], SourcePolicy())
        assert exc_info.value.mismatch == CountMismatch(3, 2)

    def test_handler_declines(self):
        with pytest.raises(CountMismatchError, match="3 segments vs 2 cues"):
            reconcile(CLIPS, CUES[:2], SourcePolicy(), on_mismatch=lambda m: False)

    def test_continue_truncates_to_shorter(self):
        seen: list[CountMismatch] = []

        def accept(mismatch: CountMismatch) -> bool:
            seen.append(mismatch)
            return True

        items = reconcile(CLIPS, CUES[:2], SourcePolicy(), on_mismatch=accept)

        assert seen == [CountMismatch(3, 2)]
        assert len(items) == 2
        assert [i.clip_path for i in items] == [Path("c0.mp3"), Path("c1.mp3")]
        assert [i.text for i in items] == ["one", "two"]

    def test_more_cues_than_clips(self):
        items = reconcile(CLIPS[:1], CUES, SourcePolicy(), on_mismatch=lambda m: True)
        assert len(items) == 1
        assert items[0].text == "one"

    def test_handler_not_called_when_counts_match(self):
        def explode(mismatch):
            raise AssertionError("should not be asked")

        assert len(reconcile(CLIPS, CUES, SourcePolicy(), on_mismatch=explode)) == 3

    def test_empty_inputs(self):
        assert reconcile([], [], SourcePolicy()) == []
