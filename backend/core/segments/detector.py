"""
Climb segment detection algorithms.

This module contains the functions that turn an ordered track into steep
climb segments. Each function has a single responsibility and can be tested
independently:

1. classify_step / scan_step / build_climb_chunks - partition the track
   into maximal climb chunks
2. measure_chunk - elevation gain and path distance of a chunk
3. build_segment - admission rules and rounded metrics
4. find_steep_segments - the full pipeline
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from core.calculations import haversine_distance, calculate_slope_percent, round_metric
from core.constants import (
    MAX_FLAT_DISTANCE_METERS, MIN_HORIZONTAL_DISTANCE_METERS, MIN_ELEVATION_GAIN_METERS
)
from core.models.segment import ClimbChunk, Segment
from core.models.track import Point

logger = logging.getLogger(__name__)


class StepKind(Enum):
    """How elevation changes between two consecutive points."""
    BARRIER = 'barrier'  # At least one elevation is unknown
    DESCENT = 'descent'
    FLAT = 'flat'
    ASCENT = 'ascent'


@dataclass(frozen=True)
class ScanState:
    """Accumulator threaded through the chunking scan."""
    segment_start: int = 0
    flat_distance: float = 0.0  # Meters of zero-delta travel since last reset


@dataclass(frozen=True)
class ChunkMeasurement:
    """Raw (unrounded) metrics of a chunk."""
    elevation_gain: float
    horizontal_distance: float


def point_distance(a: Point, b: Point) -> float:
    """Horizontal distance between two track points in meters."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def classify_step(current: Point, following: Point) -> StepKind:
    """Classify the elevation change from one point to the next."""
    if not current.has_elevation or not following.has_elevation:
        return StepKind.BARRIER
    if following.elevation < current.elevation:
        return StepKind.DESCENT
    if following.elevation == current.elevation:
        return StepKind.FLAT
    return StepKind.ASCENT


def scan_step(state: ScanState, index: int, current: Point,
              following: Point) -> Tuple[ScanState, Optional[ClimbChunk]]:
    """
    Advance the chunking scan over the pair (track[index], track[index + 1]).

    Missing elevation and any descent close the running chunk at ``index``.
    Flat travel accumulates distance and closes the chunk once the total
    exceeds the flat tolerance. An ascent clears accumulated flat distance.

    Args:
        state: Scan state before this pair
        index: Index of ``current`` in the track
        current: Point at ``index``
        following: Point at ``index + 1``

    Returns:
        Tuple of (new state, chunk closed by this pair or None)
    """
    kind = classify_step(current, following)

    if kind in (StepKind.BARRIER, StepKind.DESCENT):
        return ScanState(segment_start=index + 1), ClimbChunk(state.segment_start, index)

    if kind is StepKind.FLAT:
        flat_distance = state.flat_distance + point_distance(current, following)
        if flat_distance > MAX_FLAT_DISTANCE_METERS:
            return ScanState(segment_start=index + 1), ClimbChunk(state.segment_start, index)
        return ScanState(state.segment_start, flat_distance), None

    return ScanState(segment_start=state.segment_start), None


def build_climb_chunks(points: Sequence[Point]) -> List[ClimbChunk]:
    """
    Partition a track into maximal climb chunks.

    Chunks are disjoint, cover every index in ascending order and end at
    strictly increasing indices. A single-point track yields one chunk
    covering that point; an empty track yields none.

    Args:
        points: Ordered track points

    Returns:
        List of ClimbChunk objects in track order
    """
    chunks: List[ClimbChunk] = []
    state = ScanState()

    for i in range(len(points) - 1):
        state, closed = scan_step(state, i, points[i], points[i + 1])
        if closed is not None:
            chunks.append(closed)

    if state.segment_start <= len(points) - 1:
        chunks.append(ClimbChunk(state.segment_start, len(points) - 1))

    logger.debug(f"Partitioned {len(points)} points into {len(chunks)} climb chunks")
    return chunks


def measure_chunk(points: Sequence[Point], chunk: ClimbChunk) -> Optional[ChunkMeasurement]:
    """
    Measure elevation gain and horizontal path distance of a chunk.

    Gain is measured endpoint to endpoint. Distance is the sum of the legs
    between consecutive points, not the straight line between endpoints.

    Args:
        points: Ordered track points
        chunk: Chunk to measure

    Returns:
        ChunkMeasurement, or None when either endpoint lacks elevation
    """
    start = points[chunk.start_idx]
    end = points[chunk.end_idx]
    if not start.has_elevation or not end.has_elevation:
        return None

    distance = 0.0
    for j in range(chunk.start_idx, chunk.end_idx):
        distance += point_distance(points[j], points[j + 1])

    return ChunkMeasurement(
        elevation_gain=end.elevation - start.elevation,
        horizontal_distance=distance,
    )


def build_segment(points: Sequence[Point], chunk: ClimbChunk,
                  slope_threshold: float) -> Optional[Segment]:
    """
    Apply the admission rules to a chunk and build its Segment.

    A chunk is admitted when both endpoints have elevation, the gain is
    above the minimum, the path distance reaches the minimum and the
    rounded slope is strictly above the threshold.

    Args:
        points: Ordered track points
        chunk: Candidate chunk
        slope_threshold: Slope in percent that must be exceeded

    Returns:
        Segment if admitted, otherwise None
    """
    measurement = measure_chunk(points, chunk)
    if measurement is None:
        return None
    if measurement.elevation_gain <= MIN_ELEVATION_GAIN_METERS:
        return None
    if measurement.horizontal_distance < MIN_HORIZONTAL_DISTANCE_METERS:
        return None

    slope = round_metric(calculate_slope_percent(
        measurement.elevation_gain, measurement.horizontal_distance
    ))
    if slope <= slope_threshold:
        return None

    return Segment(
        start_idx=chunk.start_idx,
        end_idx=chunk.end_idx,
        start=points[chunk.start_idx],
        end=points[chunk.end_idx],
        slope_percent=slope,
        distance_m=round_metric(measurement.horizontal_distance),
        gain_m=round_metric(measurement.elevation_gain),
        points=tuple(points[chunk.start_idx:chunk.end_idx + 1]),
    )


def find_steep_segments(points: Sequence[Point], slope_threshold: float) -> List[Segment]:
    """
    Find sustained climbs steeper than a threshold.

    This is the main entry point for climb detection. The threshold is
    expected to be validated by the caller (finite and >= 0).

    Args:
        points: Ordered track points
        slope_threshold: Slope in percent that admitted segments must exceed

    Returns:
        Admitted segments in ascending start index order
    """
    if not points:
        logger.warning("No track points for climb detection")
        return []

    chunks = build_climb_chunks(points)

    segments = []
    for chunk in chunks:
        segment = build_segment(points, chunk, slope_threshold)
        if segment is not None:
            segments.append(segment)

    logger.info(f"Admitted {len(segments)} of {len(chunks)} climb chunks " +
                f"with slope threshold {slope_threshold}%")
    return segments
