"""
Tests for climb chunking, chunk metrics and segment admission.
"""

import random

import pytest

from core.grades import Grade
from core.models.segment import ClimbChunk
from core.models.track import Point
from core.segments import (
    find_steep_segments,
    build_climb_chunks,
    classify_step,
    scan_step,
    measure_chunk,
    build_segment,
    ScanState,
    StepKind,
)
from core.segments import detector
from tests.track_builders import north_track


def meter_track(*samples):
    """Points from (meters_along_track, elevation) pairs; see meter_distances."""
    return [Point(longitude=0.0, latitude=float(m), elevation=e) for m, e in samples]


def assert_partition(chunks, length):
    """Chunks are ordered, disjoint and cover every index."""
    assert chunks[0].start_idx == 0
    assert chunks[-1].end_idx == length - 1
    for chunk in chunks:
        assert chunk.start_idx <= chunk.end_idx
    for previous, following in zip(chunks, chunks[1:]):
        assert following.start_idx == previous.end_idx + 1
        assert following.end_idx > previous.end_idx


class TestClassifyStep:
    """Tests for classify_step."""

    def test_missing_elevation_is_barrier(self):
        """Either missing elevation makes a barrier."""
        assert classify_step(Point(0, 0, None), Point(0, 1, 10)) is StepKind.BARRIER
        assert classify_step(Point(0, 0, 10), Point(0, 1, None)) is StepKind.BARRIER

    def test_zero_elevation_is_not_missing(self):
        """0 m is a real elevation."""
        assert classify_step(Point(0, 0, 0.0), Point(0, 1, 0.0)) is StepKind.FLAT

    def test_descent_flat_ascent(self):
        """Elevation change decides the step kind."""
        assert classify_step(Point(0, 0, 10), Point(0, 1, 9)) is StepKind.DESCENT
        assert classify_step(Point(0, 0, 10), Point(0, 1, 10)) is StepKind.FLAT
        assert classify_step(Point(0, 0, 10), Point(0, 1, 11)) is StepKind.ASCENT


class TestScanStep:
    """Tests for the individual scan transitions."""

    def test_barrier_closes_chunk(self):
        """A barrier closes at the current index and restarts after it."""
        state, closed = scan_step(ScanState(2, 4.0), 5, Point(0, 0, None), Point(0, 1, 3))
        assert closed == ClimbChunk(2, 5)
        assert state == ScanState(6, 0.0)

    def test_descent_closes_chunk(self):
        """A descent closes at the current index and resets flat distance."""
        state, closed = scan_step(ScanState(0, 7.5), 3, Point(0, 0, 10), Point(0, 1, 9))
        assert closed == ClimbChunk(0, 3)
        assert state == ScanState(4, 0.0)

    def test_ascent_resets_flat_distance(self, meter_distances):
        """An ascent keeps the chunk open and clears flat credit."""
        state, closed = scan_step(ScanState(1, 8.0), 4, Point(0, 0, 10), Point(0, 5, 11))
        assert closed is None
        assert state == ScanState(1, 0.0)

    def test_flat_accumulates(self, meter_distances):
        """Flat travel adds its distance while under the tolerance."""
        state, closed = scan_step(ScanState(0, 3.0), 2, Point(0, 0, 10), Point(0, 4, 10))
        assert closed is None
        assert state == ScanState(0, 7.0)

    def test_flat_over_tolerance_closes(self, meter_distances):
        """Flat travel beyond the tolerance closes the chunk."""
        state, closed = scan_step(ScanState(0, 8.0), 2, Point(0, 0, 10), Point(0, 4, 10))
        assert closed == ClimbChunk(0, 2)
        assert state == ScanState(3, 0.0)


class TestBuildClimbChunks:
    """Tests for build_climb_chunks."""

    def test_empty_track(self):
        """No points, no chunks."""
        assert build_climb_chunks([]) == []

    def test_single_point(self):
        """A single point is one degenerate chunk."""
        assert build_climb_chunks([Point(0, 0, 10)]) == [ClimbChunk(0, 0)]

    def test_strictly_increasing_is_one_chunk(self):
        """A continuous ascent spans the whole track."""
        points = north_track([100, 101, 105, 110, 130, 131])
        assert build_climb_chunks(points) == [ClimbChunk(0, 5)]

    def test_flat_run_of_exactly_ten_meters_continues(self, meter_distances):
        """10.0 m of flat travel does not end the chunk."""
        points = meter_track((0, 100), (5, 100), (10, 100), (30, 120))
        assert build_climb_chunks(points) == [ClimbChunk(0, 3)]

    def test_flat_run_over_ten_meters_closes(self, meter_distances):
        """10.1 m of flat travel ends the chunk."""
        points = meter_track((0, 100), (5, 100), (10.1, 100), (30, 120))
        assert build_climb_chunks(points) == [ClimbChunk(0, 1), ClimbChunk(2, 3)]

    def test_ascent_clears_flat_credit(self, meter_distances):
        """Flat stretches separated by a climb are not added together."""
        points = meter_track((0, 100), (8, 100), (9, 101), (17, 101), (40, 130))
        assert build_climb_chunks(points) == [ClimbChunk(0, 4)]

    def test_descent_always_closes(self, meter_distances):
        """A single descending step closes regardless of prior history."""
        points = meter_track((0, 100), (10, 110), (12, 110), (20, 120), (21, 119.9), (30, 130))
        assert build_climb_chunks(points) == [ClimbChunk(0, 3), ClimbChunk(4, 5)]

    def test_missing_elevation_is_never_bridged(self):
        """Points without elevation split the track."""
        points = north_track([100, None, 120, 130])
        assert build_climb_chunks(points) == [
            ClimbChunk(0, 0), ClimbChunk(1, 1), ClimbChunk(2, 3)
        ]

    def test_descent_on_last_pair_leaves_degenerate_chunk(self):
        """A close on the final pair leaves the last point as its own chunk."""
        points = north_track([100, 110, 105])
        assert build_climb_chunks(points) == [ClimbChunk(0, 1), ClimbChunk(2, 2)]

    @pytest.mark.parametrize("seed", range(20))
    def test_chunks_partition_track(self, seed):
        """Chunks are disjoint, ordered and cover every index."""
        rng = random.Random(seed)
        elevations = []
        for _ in range(rng.randint(2, 60)):
            roll = rng.random()
            if roll < 0.1:
                elevations.append(None)
            elif roll < 0.35 and elevations and elevations[-1] is not None:
                elevations.append(elevations[-1])
            else:
                elevations.append(float(rng.randint(0, 40)))
        points = north_track(elevations, step=rng.choice([0.00001, 0.0001, 0.001]))

        assert_partition(build_climb_chunks(points), len(points))


class TestMeasureChunk:
    """Tests for measure_chunk."""

    def test_gain_is_endpoint_to_endpoint(self, meter_distances):
        """Gain uses the endpoints; distance sums every leg."""
        points = meter_track((0, 100), (10, 100), (25, 108), (40, 112))
        measurement = measure_chunk(points, ClimbChunk(0, 3))
        assert measurement.elevation_gain == 12
        assert measurement.horizontal_distance == 40

    def test_missing_endpoint_elevation(self):
        """Chunks with an unknown endpoint cannot be measured."""
        points = north_track([None, 100, 120])
        assert measure_chunk(points, ClimbChunk(0, 0)) is None


class TestSegmentAdmission:
    """Tests for build_segment and the admission rules."""

    def test_gain_must_exceed_ten_meters(self, meter_distances):
        """Exactly 10 m of gain is rejected."""
        points = meter_track((0, 100), (20, 110))
        assert build_segment(points, ClimbChunk(0, 1), 0) is None

    def test_gain_above_ten_meters_admitted(self, meter_distances):
        """10.5 m of gain is enough."""
        points = meter_track((0, 100), (20, 110.5))
        segment = build_segment(points, ClimbChunk(0, 1), 0)
        assert segment is not None
        assert segment.gain_m == 10.5

    def test_distance_of_twenty_meters_admitted(self, meter_distances):
        """The minimum distance is inclusive."""
        points = meter_track((0, 100), (20, 115))
        segment = build_segment(points, ClimbChunk(0, 1), 0)
        assert segment is not None
        assert segment.distance_m == 20.0
        assert segment.slope_percent == 75.0
        assert segment.grade is Grade.S

    def test_distance_under_twenty_meters_rejected(self, meter_distances):
        """Short climbs are rejected however steep."""
        points = meter_track((0, 100), (19.9, 150))
        assert build_segment(points, ClimbChunk(0, 1), 0) is None

    def test_zero_distance_never_reaches_slope_formula(self, monkeypatch):
        """A chunk with no horizontal travel is rejected before division."""
        def fail(*args):
            raise AssertionError("slope computed for a zero-distance chunk")

        monkeypatch.setattr(detector, 'calculate_slope_percent', fail)
        points = [Point(7.0, 45.0, 100), Point(7.0, 45.0, 100), Point(7.0, 45.0, 130)]
        assert build_climb_chunks(points) == [ClimbChunk(0, 2)]
        assert find_steep_segments(points, 0) == []

    def test_segment_copies_point_range(self, sample_points):
        """Segments carry their endpoints and the inclusive point range."""
        segment = build_segment(sample_points, ClimbChunk(0, 2), 19)
        assert segment.start == sample_points[0]
        assert segment.end == sample_points[2]
        assert segment.points == tuple(sample_points[0:3])
        assert segment.point_count == 3


class TestThreePointTrack:
    """The synthetic (0,0,0), (0,0.001,5), (0,0.002,30) track."""

    @pytest.fixture
    def points(self):
        return [Point(0, 0, 0), Point(0, 0.001, 5), Point(0, 0.002, 30)]

    def test_metrics(self, points):
        """Gain 30 over two 111.2 m legs is 13.5 %."""
        segments = find_steep_segments(points, 10)
        assert len(segments) == 1
        segment = segments[0]
        assert segment.gain_m == 30.0
        assert segment.distance_m == 222.4
        assert segment.slope_percent == 13.5
        assert segment.grade is Grade.UNCLASSIFIED

    def test_rejected_at_default_threshold(self, points):
        """13.5 % does not exceed 19 %."""
        assert find_steep_segments(points, 19) == []

    def test_threshold_is_strict(self, points):
        """A slope equal to the threshold is rejected."""
        assert find_steep_segments(points, 13.5) == []
        assert len(find_steep_segments(points, 13.4)) == 1


class TestFindSteepSegments:
    """Tests for the full detection pipeline."""

    def test_sample_track(self, sample_points):
        """The sample track holds an S climb and a B climb, in order."""
        segments = find_steep_segments(sample_points, 19)
        assert [(s.start_idx, s.end_idx) for s in segments] == [(0, 2), (3, 7)]
        assert [s.slope_percent for s in segments] == [54.0, 28.1]
        assert [s.grade for s in segments] == [Grade.S, Grade.B]
        assert [s.gain_m for s in segments] == [24.0, 25.0]
        assert [s.distance_m for s in segments] == [44.5, 89.0]

    def test_threshold_filters(self, sample_points):
        """Raising the threshold drops the gentler climb."""
        segments = find_steep_segments(sample_points, 30)
        assert [s.grade for s in segments] == [Grade.S]

    def test_empty_track(self):
        """An empty track yields no segments."""
        assert find_steep_segments([], 0) == []

    def test_all_elevations_missing(self):
        """A track without elevation yields no segments."""
        assert find_steep_segments(north_track([None] * 5), 0) == []

    def test_results_are_independent_between_runs(self, sample_points):
        """Running twice gives equal, fresh results."""
        first = find_steep_segments(sample_points, 19)
        second = find_steep_segments(sample_points, 19)
        assert first == second
        assert first is not second
