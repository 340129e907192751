"""
Segment data models.

This module defines the data structures for steep climb segments detected in
GPS tracks.
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Tuple

import pandas as pd

from core.grades import Grade, classify_slope
from core.models.track import Point


@dataclass(frozen=True)
class ClimbChunk:
    """
    A maximal climb candidate before filtering.

    Indices are inclusive positions in the track.
    """
    start_idx: int
    end_idx: int


@dataclass(frozen=True)
class Segment:
    """
    Represents a steep climb segment.

    A segment is a climb chunk that passed the admission rules. Metrics are
    rounded to one decimal place. The grade is derived from the slope each
    time it is read.
    """
    # Index boundaries in the original track
    start_idx: int
    end_idx: int

    # Endpoints
    start: Point
    end: Point

    # Climb characteristics
    slope_percent: float  # Elevation gain over path distance, in percent
    distance_m: float  # Horizontal path distance in meters
    gain_m: float  # Endpoint-to-endpoint elevation gain in meters

    # Copy of the track points from start_idx to end_idx inclusive
    points: Tuple[Point, ...] = ()

    @property
    def grade(self) -> Grade:
        """Steepness grade for the current slope."""
        return classify_slope(self.slope_percent)

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def distance_km(self) -> float:
        """Distance in kilometers."""
        return self.distance_m / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert segment to dictionary for DataFrame creation."""
        return {
            'start_idx': self.start_idx,
            'end_idx': self.end_idx,
            'start_longitude': self.start.longitude,
            'start_latitude': self.start.latitude,
            'start_elevation': self.start.elevation,
            'end_longitude': self.end.longitude,
            'end_latitude': self.end.latitude,
            'end_elevation': self.end.elevation,
            'slope_percent': self.slope_percent,
            'distance_m': self.distance_m,
            'gain_m': self.gain_m,
            'point_count': self.point_count,
            'grade': self.grade.value,
        }


def segments_to_dataframe(segments: List[Segment]) -> pd.DataFrame:
    """
    Convert a list of segments to a pandas DataFrame.

    Args:
        segments: List of Segment objects

    Returns:
        pandas DataFrame with one row per segment
    """
    if not segments:
        return pd.DataFrame()

    data = [segment.to_dict() for segment in segments]
    return pd.DataFrame(data)
