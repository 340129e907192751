"""
Track point data models.

This module defines the normalized in-memory representation of a track:
an ordered list of points whose elevation may be unknown.
"""

from dataclasses import dataclass
from typing import Optional, List, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Point:
    """
    A single recorded track position.

    Elevation is ``None`` when the source did not record it. Missing
    elevation is distinct from an elevation of 0 m.
    """
    longitude: float  # Degrees
    latitude: float  # Degrees
    elevation: Optional[float] = None  # Meters

    @classmethod
    def from_coordinates(cls, coordinates: Sequence[float]) -> 'Point':
        """Build a point from a ``(lon, lat[, ele])`` coordinate sequence."""
        elevation = coordinates[2] if len(coordinates) > 2 else None
        return cls(
            longitude=float(coordinates[0]),
            latitude=float(coordinates[1]),
            elevation=float(elevation) if elevation is not None else None,
        )

    def to_coordinates(self) -> Tuple[float, ...]:
        """Convert to a ``(lon, lat[, ele])`` tuple."""
        if self.elevation is None:
            return (self.longitude, self.latitude)
        return (self.longitude, self.latitude, self.elevation)

    @property
    def has_elevation(self) -> bool:
        return self.elevation is not None


def points_to_dataframe(points: Sequence[Point]) -> pd.DataFrame:
    """
    Convert a track to a pandas DataFrame.

    Args:
        points: Ordered track points

    Returns:
        DataFrame with 'longitude', 'latitude', 'elevation' columns;
        missing elevations become NaN
    """
    if not points:
        return pd.DataFrame(columns=['longitude', 'latitude', 'elevation'])

    return pd.DataFrame({
        'longitude': [p.longitude for p in points],
        'latitude': [p.latitude for p in points],
        'elevation': [p.elevation if p.elevation is not None else np.nan for p in points],
    })


def dataframe_to_points(df: pd.DataFrame) -> List[Point]:
    """Convert a track DataFrame back to points, mapping NaN elevation to None."""
    points = []
    for row in df.itertuples(index=False):
        elevation = getattr(row, 'elevation', None)
        if elevation is not None and pd.isna(elevation):
            elevation = None
        points.append(Point(
            longitude=float(row.longitude),
            latitude=float(row.latitude),
            elevation=float(elevation) if elevation is not None else None,
        ))
    return points
