"""
Input validation utilities for core functions.

Climb detection itself never validates its inputs; callers use these
helpers to reject bad thresholds and uploads before analysis runs.
"""

import math
import logging
from typing import Any, Union, Optional, Sequence
from pathlib import Path

from core.models.track import Point

logger = logging.getLogger(__name__)

SUPPORTED_TRACK_EXTENSIONS = ('.gpx', '.kml')
MAX_TRACK_FILE_BYTES = 10 * 1024 * 1024  # 10MB


class ValidationError(Exception):
    """Custom exception for validation errors."""
    pass


def validate_slope_threshold(slope_threshold: Union[int, float, str, None],
                             context: str = "Slope threshold") -> float:
    """
    Validate a user-supplied slope threshold.

    Args:
        slope_threshold: Threshold value in percent
        context: Context description for error messages

    Returns:
        Threshold as float

    Raises:
        ValidationError: If the value is missing, non-numeric, not finite
            or negative
    """
    if slope_threshold is None:
        raise ValidationError(f"{context}: Value is None")

    try:
        threshold = float(slope_threshold)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{context}: Cannot convert to float: {slope_threshold}") from e

    if math.isnan(threshold) or math.isinf(threshold):
        raise ValidationError(f"{context}: Invalid value: {threshold}")

    if threshold < 0:
        raise ValidationError(f"{context}: Must be >= 0, got {threshold}")

    logger.debug(f"{context}: {slope_threshold} → {threshold}")
    return threshold


def track_file_extension(filename: Optional[str]) -> str:
    """Lower-case extension of a track file name ('' when unknown)."""
    if not filename:
        return ''
    return Path(filename).suffix.lower()


def validate_file_upload(uploaded_file: Any, filename: Optional[str] = None) -> None:
    """
    Validate an uploaded track file before processing.

    Args:
        uploaded_file: File-like object
        filename: Original file name, if the object does not carry one

    Raises:
        ValidationError: If file validation fails
    """
    if uploaded_file is None:
        raise ValidationError("No file uploaded")

    size = getattr(uploaded_file, 'size', None)
    if size is not None and size > MAX_TRACK_FILE_BYTES:
        raise ValidationError(
            f"File too large: {size / 1024 / 1024:.1f}MB "
            f"(max {MAX_TRACK_FILE_BYTES // 1024 // 1024}MB)"
        )

    name = filename or getattr(uploaded_file, 'name', None)
    if name:
        suffix = track_file_extension(name)
        if suffix not in SUPPORTED_TRACK_EXTENSIONS:
            raise ValidationError(
                f"Invalid file type: {suffix or '(none)'} (expected .gpx or .kml)"
            )

    logger.debug(f"File validation passed: {name or 'unknown'}")


def check_track_points(points: Sequence[Point], context: str = "Track") -> None:
    """
    Log data-quality warnings for a track.

    Missing elevation is not an error: detection treats it as a climb
    boundary. This only reports it.
    """
    if not points:
        logger.warning(f"{context}: no points")
        return

    missing = sum(1 for p in points if not p.has_elevation)
    if missing == len(points):
        logger.warning(f"{context}: all {missing} points lack elevation")
    elif missing:
        logger.warning(f"{context}: {missing} of {len(points)} points lack elevation")

    invalid = sum(1 for p in points
                  if not -90 <= p.latitude <= 90 or not -180 <= p.longitude <= 180)
    if invalid:
        logger.warning(f"{context}: {invalid} points have out-of-range coordinates")
