"""
Shared climb analysis service.

This module provides a unified analysis pipeline so the API and scripts
run exactly the same steps: validate the threshold, load the track,
extract points, detect steep segments and summarize them.
"""

import logging
from typing import Dict, Any, Optional, List, Sequence

import pandas as pd

from core.constants import AUTO_ANALYZE_SLOPE_THRESHOLD
from core.export import export_segments
from core.geometry import extract_points
from core.gpx import load_track_file
from core.models.segment import Segment, segments_to_dataframe
from core.models.track import Point
from core.segments import find_steep_segments
from core.summary import summarize_by_grade, analyze_segment_distribution, summarize_track
from core.validation import validate_slope_threshold, check_track_points

logger = logging.getLogger(__name__)


class ClimbAnalysisResult:
    """Container for the results of one analysis run."""

    def __init__(self,
                 track_points: List[Point],
                 segments: List[Segment],
                 slope_threshold: float,
                 auto_mode: bool = False,
                 filename: str = "current_track.gpx",
                 metadata: Optional[Dict[str, Any]] = None):
        self.track_points = track_points
        self.segments = segments
        self.slope_threshold = slope_threshold
        self.auto_mode = auto_mode
        self.filename = filename
        self.metadata = metadata or {}

        # Calculate derived metrics
        self._calculate_summary_metrics()

    def _calculate_summary_metrics(self) -> None:
        """Calculate summary metrics from segments and track."""
        self.grade_summary = summarize_by_grade(self.segments)
        self.distribution = analyze_segment_distribution(self.segments)
        self.track_summary = summarize_track(self.track_points)
        self.segment_count = len(self.segments)
        self.total_gain = sum(s.gain_m for s in self.segments)

    @property
    def segments_df(self) -> pd.DataFrame:
        return segments_to_dataframe(self.segments)

    def export(self, export_format: str) -> str:
        """Export this run's segments (see core.export.export_segments)."""
        return export_segments(export_format, self.segments, self.track_points)


def resolve_slope_threshold(slope_threshold: Optional[float], auto_mode: bool) -> float:
    """
    Threshold for an analysis run.

    Automatic mode always uses the fixed automatic threshold; otherwise the
    user value is validated.
    """
    if auto_mode:
        return AUTO_ANALYZE_SLOPE_THRESHOLD
    return validate_slope_threshold(slope_threshold)


def analyze_track_points(points: Sequence[Point],
                         slope_threshold: Optional[float] = None,
                         auto_mode: bool = False,
                         filename: str = "current_track.gpx",
                         metadata: Optional[Dict[str, Any]] = None) -> ClimbAnalysisResult:
    """
    Analyze track points that are already loaded.

    Args:
        points: Ordered track points
        slope_threshold: Slope in percent segments must exceed (ignored in
            automatic mode)
        auto_mode: Use the automatic threshold
        filename: Name for the track (for display purposes)
        metadata: Optional metadata dict

    Returns:
        ClimbAnalysisResult: Complete analysis results

    Raises:
        ValidationError: If the threshold is invalid
    """
    threshold = resolve_slope_threshold(slope_threshold, auto_mode)

    try:
        logger.info(f"Analyzing {filename} with {len(points)} points " +
                    f"(threshold={threshold}%, auto_mode={auto_mode})")
        check_track_points(points, filename)

        segments = find_steep_segments(points, threshold)
        logger.info(f"Found {len(segments)} steep segments in {filename}")

        return ClimbAnalysisResult(
            track_points=list(points),
            segments=segments,
            slope_threshold=threshold,
            auto_mode=auto_mode,
            filename=filename,
            metadata=metadata
        )

    except Exception as e:
        logger.error(f"Error analyzing {filename}: {e}")
        raise


def analyze_track_file(file,
                       slope_threshold: Optional[float] = None,
                       auto_mode: bool = False,
                       filename: Optional[str] = None) -> ClimbAnalysisResult:
    """
    Analyze a single track file using the standard pipeline.

    This function loads a GPX or KML file and delegates to
    analyze_track_points for consistent analysis.

    Args:
        file: File object or str/bytes document to analyze
        slope_threshold: Slope in percent segments must exceed
        auto_mode: Use the automatic threshold
        filename: Original file name (defaults to the file object's name)

    Returns:
        ClimbAnalysisResult: Complete analysis results

    Raises:
        ValidationError: If the threshold or the file is invalid
    """
    filename = filename or getattr(file, 'name', None) or "current_track.gpx"

    # Reject a bad threshold before reading the file
    resolve_slope_threshold(slope_threshold, auto_mode)

    try:
        geometry, metadata = load_track_file(file, filename=filename)
        points = extract_points(geometry)
        logger.info(f"Loaded {filename} with {len(points)} points")

        return analyze_track_points(
            points,
            slope_threshold=slope_threshold,
            auto_mode=auto_mode,
            filename=filename,
            metadata=metadata
        )

    except Exception as e:
        logger.error(f"Error analyzing {filename}: {e}")
        raise
