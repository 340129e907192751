"""
Constants for the Slope Finder application.

This module contains all the mathematical, algorithmic, and domain-specific
constants used throughout the codebase. Constants are grouped by their purpose
and documented with their units where applicable.
"""

# =============================================================================
# GEODESY
# =============================================================================

EARTH_RADIUS_METERS = 6371000  # Mean Earth radius used by the haversine formula

# Distance conversions
METERS_PER_KILOMETER = 1000

# =============================================================================
# CLIMB DETECTION THRESHOLDS (all in meters)
# =============================================================================

# Cumulative zero-delta horizontal distance tolerated inside one climb
MAX_FLAT_DISTANCE_METERS = 10.0

# Admission rules for a climb chunk
MIN_HORIZONTAL_DISTANCE_METERS = 20.0  # Inclusive lower bound
MIN_ELEVATION_GAIN_METERS = 10.0  # Strict lower bound

# =============================================================================
# SLOPE THRESHOLDS (all in percent)
# =============================================================================

# Threshold used when analysis runs in automatic mode
AUTO_ANALYZE_SLOPE_THRESHOLD = 19.0

# Grade table, steepest first. First matching minimum wins.
GRADE_MIN_SLOPES = (
    ('S', 45.0),
    ('A', 36.0),
    ('B', 26.0),
    ('C', 19.0),
)

UNCLASSIFIED_GRADE_LABEL = '—'

# =============================================================================
# ROUNDING
# =============================================================================

METRIC_DECIMALS = 1  # slope, distance and gain are reported to 0.1
COORDINATE_DISPLAY_DECIMALS = 6

# =============================================================================
# EXPORT STYLING (KML colors are aabbggrr)
# =============================================================================

KML_TRACK_STYLE_ID = 'styleTrack'
KML_TRACK_COLOR = '7f7f7f7f'
KML_TRACK_WIDTH = 2
KML_SEGMENT_WIDTH = 4

KML_GRADE_COLORS = {
    'C': 'ff00ff00',  # green
    'B': 'ff00a5ff',  # orange
    'A': 'ff0000ff',  # red
    'S': 'ffff00ff',  # magenta
}

# =============================================================================
# EXPORT DOCUMENTS
# =============================================================================

EXPORT_CREATOR = 'slope-finder'  # GPX creator attribute
EXPORT_TRACK_NAME = 'Exported segments'
MERGED_DOCUMENT_NAME = 'Merged export'
ORIGINAL_TRACK_NAME = 'Original track'
EXPORT_ENCODING = 'utf-8-sig'  # UTF-8 with byte-order mark

# =============================================================================
# VALIDATION
# =============================================================================

# Grade minimums must be strictly descending
assert all(a[1] > b[1] for a, b in zip(GRADE_MIN_SLOPES, GRADE_MIN_SLOPES[1:])), \
    "Grade minimum slopes must be strictly descending"
assert set(KML_GRADE_COLORS) == {grade for grade, _ in GRADE_MIN_SLOPES}, \
    "Every grade needs a KML color"
