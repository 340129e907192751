"""
Shared calculations module.

This module contains the mathematical operations used by climb detection:
great-circle distance, slope percentage and metric rounding. Keeping them
here gives a single source of truth for every consumer.
"""

import math
import logging
from typing import Sequence

from core.constants import EARTH_RADIUS_METERS, METRIC_DECIMALS

logger = logging.getLogger(__name__)


# =============================================================================
# BASIC GEOMETRIC CALCULATIONS
# =============================================================================

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points in meters.

    Uses the haversine formula on a sphere with the mean Earth radius.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Surface distance in meters (0 for coincident points)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def path_distance(latitudes: Sequence[float], longitudes: Sequence[float]) -> float:
    """Sum of consecutive leg distances along a polyline, in meters."""
    total = 0.0
    for i in range(len(latitudes) - 1):
        total += haversine_distance(latitudes[i], longitudes[i],
                                    latitudes[i + 1], longitudes[i + 1])
    return total


# =============================================================================
# SLOPE CALCULATIONS
# =============================================================================

def calculate_slope_percent(elevation_gain: float, horizontal_distance: float) -> float:
    """
    Calculate slope as a percentage of horizontal distance.

    Args:
        elevation_gain: Elevation gain in meters
        horizontal_distance: Horizontal path distance in meters (must be > 0)

    Returns:
        Slope in percent (10.0 means 10 m of gain per 100 m)

    Raises:
        ValueError: If horizontal_distance is not positive
    """
    if horizontal_distance <= 0:
        raise ValueError(f"Horizontal distance must be positive, got {horizontal_distance}")
    return elevation_gain / horizontal_distance * 100


def round_metric(value: float, decimals: int = METRIC_DECIMALS) -> float:
    """
    Round a reported metric half-up to a fixed number of decimals.

    Unlike ``round()``, ties go upward: 0.25 -> 0.3.
    """
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor
