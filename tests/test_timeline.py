"""Unit tests for the segment timeline builder."""

import pytest

from cuesync.analyzers.timeline import (
    build_boundaries,
    build_segments,
    count_segments,
    validate_silences,
)
from cuesync.errors import UnorderedSilence
from cuesync.models import Segment, SilenceInterval, TimeSpan


def _silence(start: float, end: float) -> SilenceInterval:
    return SilenceInterval(start=TimeSpan(start), end=TimeSpan(end))


def _spans(segments: list[Segment]) -> list[tuple[float, float]]:
    return [(round(s.start.seconds, 6), round(s.duration.seconds, 6)) for s in segments]


class TestBuildSegmentsNoSilence:
    """When no silence is detected, the entire track is one segment."""

    def test_single_segment(self):
        assert build_segments([], TimeSpan(30.0)) == [Segment(TimeSpan(0.0), TimeSpan(30.0))]

    def test_boundaries(self):
        assert build_boundaries([], TimeSpan(30.0)) == [TimeSpan(0.0), TimeSpan(30.0)]


class TestBuildSegmentsBasic:
    def test_speech_silence_speech(self):
        result = build_segments([_silence(10.0, 15.0)], TimeSpan(30.0))
        assert _spans(result) == [(0.0, 10.0), (15.0, 15.0)]

    def test_two_silences(self):
        result = build_segments([_silence(3.0, 5.0), _silence(8.0, 10.0)], TimeSpan(12.0))
        assert _spans(result) == [(0.0, 3.0), (5.0, 3.0), (10.0, 2.0)]

    def test_count_is_one_more_than_silences(self):
        silences = [_silence(1.0, 2.0), _silence(4.0, 5.0), _silence(7.0, 7.5)]
        assert len(build_segments(silences, TimeSpan(9.0))) == count_segments(silences) == 4

    def test_boundary_count_is_even(self):
        for n in range(5):
            silences = [_silence(2.0 * i + 1, 2.0 * i + 1.5) for i in range(n)]
            assert len(build_boundaries(silences, TimeSpan(20.0))) % 2 == 0

    def test_segments_are_ordered_and_disjoint(self):
        result = build_segments([_silence(3.0, 5.0), _silence(8.0, 10.0)], TimeSpan(12.0))
        for a, b in zip(result, result[1:]):
            assert a.end <= b.start


class TestBuildSegmentsEdges:
    def test_silence_at_start_yields_zero_length_segment(self):
        result = build_segments([_silence(0.0, 3.0)], TimeSpan(20.0))
        assert _spans(result) == [(0.0, 0.0), (3.0, 17.0)]

    def test_silence_to_end_yields_zero_length_trailing_segment(self):
        result = build_segments([_silence(17.0, 20.0)], TimeSpan(20.0))
        assert _spans(result) == [(0.0, 17.0), (20.0, 0.0)]

    def test_silence_end_slightly_past_reported_total(self):
        # Container duration is reported in centiseconds.
        result = build_segments([_silence(10.0, 12.864)], TimeSpan(12.86))
        assert _spans(result)[-1] == (12.864, 0.0)

    def test_silence_well_past_total_rejected(self):
        with pytest.raises(UnorderedSilence, match="after track end"):
            build_segments([_silence(10.0, 14.0)], TimeSpan(12.0))


class TestValidateSilences:
    def test_ordered_passes(self):
        validate_silences([_silence(1.0, 2.0), _silence(2.0, 3.0)], TimeSpan(5.0))

    def test_out_of_order(self):
        with pytest.raises(UnorderedSilence):
            validate_silences([_silence(5.0, 6.0), _silence(1.0, 2.0)])

    def test_overlap(self):
        with pytest.raises(UnorderedSilence, match="overlaps"):
            validate_silences([_silence(1.0, 4.0), _silence(3.0, 5.0)])

    def test_backwards_interval(self):
        with pytest.raises(UnorderedSilence, match="ends before it starts"):
            validate_silences([_silence(4.0, 3.0)])
