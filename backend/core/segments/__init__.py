"""
Segments package.

This package contains functionality for climb segment detection.
"""

# Core segment detection functions
from .detector import (
    find_steep_segments,
    build_climb_chunks,
    classify_step,
    scan_step,
    measure_chunk,
    build_segment,
    ScanState,
    StepKind,
    ChunkMeasurement,
)

# Segment models
from core.models.segment import ClimbChunk, Segment, segments_to_dataframe

__all__ = [
    # Main detection function
    'find_steep_segments',

    # Modular detection functions
    'build_climb_chunks',
    'classify_step',
    'scan_step',
    'measure_chunk',
    'build_segment',
    'ScanState',
    'StepKind',
    'ChunkMeasurement',

    # Models
    'ClimbChunk',
    'Segment',
    'segments_to_dataframe',
]
