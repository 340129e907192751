"""
Segment and track summaries.

Aggregate statistics over detected segments (per-grade counts and gain,
distribution of slopes) and over the raw track.
"""

import logging
from typing import Dict, Any, List, Sequence

import numpy as np

from core.calculations import path_distance, round_metric
from core.constants import METERS_PER_KILOMETER
from core.grades import GRADE_ORDER
from core.models.segment import Segment, segments_to_dataframe
from core.models.track import Point, points_to_dataframe

logger = logging.getLogger(__name__)


def summarize_by_grade(segments: List[Segment]) -> Dict[str, Dict[str, float]]:
    """
    Count segments and cumulative elevation gain per grade.

    Unclassified segments are left out. Every grade is present in the
    result, steepest first, even when it has no segments.

    Args:
        segments: Detected segments

    Returns:
        Mapping of grade label to {'count', 'total_gain_m'}
    """
    summary = {grade.value: {'count': 0, 'total_gain_m': 0.0} for grade in GRADE_ORDER}

    df = segments_to_dataframe(segments)
    if df.empty:
        return summary

    grouped = df.groupby('grade')['gain_m'].agg(['count', 'sum'])
    for grade, row in grouped.iterrows():
        if grade in summary:
            summary[grade] = {
                'count': int(row['count']),
                'total_gain_m': round_metric(float(row['sum'])),
            }

    logger.debug(f"Grade summary: {summary}")
    return summary


def analyze_segment_distribution(segments: List[Segment]) -> Dict[str, Any]:
    """
    Analyze the distribution of detected segments.

    This provides useful statistics about the segments for debugging
    and quality assessment.

    Args:
        segments: List of detected segments

    Returns:
        Dictionary with distribution statistics
    """
    if not segments:
        return {}

    distances = [s.distance_m for s in segments]
    gains = [s.gain_m for s in segments]
    slopes = [s.slope_percent for s in segments]

    stats = {
        'count': len(segments),
        'total_distance_km': sum(distances) / METERS_PER_KILOMETER,
        'total_gain_m': round_metric(sum(gains)),
        'avg_segment_distance_m': float(np.mean(distances)),
        'avg_segment_gain_m': float(np.mean(gains)),
        'avg_slope_percent': float(np.mean(slopes)),
        'max_slope_percent': max(slopes),
        'slope_range': (min(slopes), max(slopes)),
        'distance_range': (min(distances), max(distances)),
    }

    return stats


def summarize_track(points: Sequence[Point]) -> Dict[str, Any]:
    """
    Basic statistics of a track.

    Args:
        points: Ordered track points

    Returns:
        Dictionary with point counts, elevation range and path distance
    """
    df = points_to_dataframe(points)
    if df.empty:
        return {
            'point_count': 0,
            'missing_elevation_count': 0,
            'min_elevation_m': None,
            'max_elevation_m': None,
            'total_distance_m': 0.0,
        }

    elevations = df['elevation'].dropna()
    return {
        'point_count': int(len(df)),
        'missing_elevation_count': int(df['elevation'].isna().sum()),
        'min_elevation_m': float(elevations.min()) if not elevations.empty else None,
        'max_elevation_m': float(elevations.max()) if not elevations.empty else None,
        'total_distance_m': round_metric(path_distance(
            df['latitude'].tolist(), df['longitude'].tolist()
        )),
    }
