"""
Services package.

Provides business logic layer between API and core algorithms.

Modules:
    climb_analysis_service: Main analysis pipeline for GPX and KML tracks
"""

from services.climb_analysis_service import (
    analyze_track_points,
    analyze_track_file,
    ClimbAnalysisResult,
)

__all__ = [
    'analyze_track_points',
    'analyze_track_file',
    'ClimbAnalysisResult',
]
