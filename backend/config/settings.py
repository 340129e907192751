"""
Application settings and configuration.

This module contains application-specific configuration and defaults.
For algorithmic constants, see core.constants module.
"""

import os
import logging
from typing import Dict, Any

# Import algorithmic constants from core module
from core.constants import (
    AUTO_ANALYZE_SLOPE_THRESHOLD,
    MAX_FLAT_DISTANCE_METERS,
    MIN_HORIZONTAL_DISTANCE_METERS,
    MIN_ELEVATION_GAIN_METERS,
    GRADE_MIN_SLOPES,
    EXPORT_ENCODING,
    EXPORT_TRACK_NAME,
    MERGED_DOCUMENT_NAME,
)
from core.export import EXPORT_FORMATS
from core.validation import MAX_TRACK_FILE_BYTES, SUPPORTED_TRACK_EXTENSIONS

# App information
APP_NAME = "Slope Finder"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Find sustained steep climbs in hiking and riding tracks"

# UI defaults for climb detection parameters
DEFAULT_SLOPE_THRESHOLD = AUTO_ANALYZE_SLOPE_THRESHOLD  # Percent - UI default, can be overridden
SLOPE_THRESHOLD_RANGE = {"min": 0, "max": 100, "step": 0.5}

# API limits
MAX_UPLOAD_BYTES = MAX_TRACK_FILE_BYTES
MIN_UPLOAD_BYTES = 50  # Smaller bodies cannot hold a track

# Development server
API_HOST = os.environ.get("SLOPE_FINDER_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("SLOPE_FINDER_PORT", "8000"))

# CORS origins for the frontend
CORS_ORIGINS = [
    "http://localhost:3000",  # Dev server
    "http://localhost:5173",  # Dev server (vite)
]

# Logging configuration
LOGGING_CONFIG = {
    "level": logging.INFO,
    "format": '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
}


# =============== Configuration Classes ===============
# These classes provide typed access to configuration sections

class ClimbConfig:
    """Configuration parameters for climb detection."""
    SLOPE_THRESHOLD = DEFAULT_SLOPE_THRESHOLD
    AUTO_SLOPE_THRESHOLD = AUTO_ANALYZE_SLOPE_THRESHOLD  # From core.constants
    MAX_FLAT_DISTANCE = MAX_FLAT_DISTANCE_METERS  # From core.constants
    MIN_DISTANCE = MIN_HORIZONTAL_DISTANCE_METERS  # From core.constants
    MIN_GAIN = MIN_ELEVATION_GAIN_METERS  # From core.constants

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get climb configuration as a dictionary."""
        return {
            'slope_threshold': cls.SLOPE_THRESHOLD,
            'auto_slope_threshold': cls.AUTO_SLOPE_THRESHOLD,
            'max_flat_distance_m': cls.MAX_FLAT_DISTANCE,
            'min_distance_m': cls.MIN_DISTANCE,
            'min_gain_m': cls.MIN_GAIN,
            'grades': {label: min_slope for label, min_slope in GRADE_MIN_SLOPES},
        }


class ExportConfig:
    """Configuration parameters for segment export."""
    FORMATS = EXPORT_FORMATS
    ENCODING = EXPORT_ENCODING
    TRACK_NAME = EXPORT_TRACK_NAME
    MERGED_NAME = MERGED_DOCUMENT_NAME
    FILE_EXTENSIONS = SUPPORTED_TRACK_EXTENSIONS

    @classmethod
    def as_dict(cls) -> Dict[str, Any]:
        """Get export configuration as a dictionary."""
        return {
            'formats': list(cls.FORMATS),
            'encoding': cls.ENCODING,
            'track_name': cls.TRACK_NAME,
            'merged_name': cls.MERGED_NAME,
            'accepted_extensions': list(cls.FILE_EXTENSIONS),
        }
