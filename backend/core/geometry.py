"""
Track point extraction.

Flattens a nested geometry structure into the ordered point sequence that
climb detection runs on.
"""

import logging
from typing import List, Optional

from core.models.geometry import (
    GeometryNode, Feature, FeatureCollection, LineString, MultiLineString
)
from core.models.track import Point

logger = logging.getLogger(__name__)


def _walk(node: Optional[GeometryNode], points: List[Point]) -> None:
    match node:
        case Feature(geometry=geometry):
            _walk(geometry, points)
        case FeatureCollection(features=features):
            for feature in features:
                _walk(feature, points)
        case LineString(coordinates=coordinates):
            points.extend(Point.from_coordinates(c) for c in coordinates)
        case MultiLineString(lines=lines):
            # Sub-lines are concatenated with no break between them
            for line in lines:
                points.extend(Point.from_coordinates(c) for c in line)
        case _:
            pass


def extract_points(root: Optional[GeometryNode]) -> List[Point]:
    """
    Extract the ordered track points from a geometry tree.

    Traversal is depth-first in encounter order. A multi-line's sub-lines
    are appended back to back, so the last point of one line and the first
    point of the next become consecutive points even when they are far
    apart.

    Args:
        root: Root geometry node (Feature, FeatureCollection, LineString
            or MultiLineString)

    Returns:
        Ordered list of points; empty when the tree holds no lines
    """
    points: List[Point] = []
    _walk(root, points)

    if not points:
        logger.warning("Geometry contains no line coordinates")
    else:
        logger.debug(f"Extracted {len(points)} points from geometry")
    return points
