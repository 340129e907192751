"""
Track file parsing and handling.

This module contains functions for loading GPX files and dispatching track
files to the right parser. Parsers return the nested geometry structure that
core.geometry.extract_points flattens.
"""

import os
import gpxpy
import gpxpy.gpx
import logging
from typing import Tuple, Dict, Any, Optional, Union

from core.models.geometry import (
    GeometryNode, Feature, FeatureCollection, LineString, MultiLineString
)
from core.validation import validate_file_upload, track_file_extension, ValidationError

logger = logging.getLogger(__name__)


def read_track_text(track_file: Any) -> str:
    """
    Read a track document as text.

    Accepts a file-like object or a raw str/bytes document. Bytes
    are decoded as UTF-8 and a leading byte-order mark is dropped.
    """
    content: Union[str, bytes] = track_file.read() if hasattr(track_file, 'read') else track_file
    if isinstance(content, bytes):
        try:
            return content.decode('utf-8-sig')
        except UnicodeDecodeError as e:
            raise ValidationError(f"Track file is not valid UTF-8: {e}") from e
    return content.lstrip('\ufeff')


def _coordinate(point) -> Tuple[float, ...]:
    if point.elevation is None:
        return (point.longitude, point.latitude)
    return (point.longitude, point.latitude, point.elevation)


def gpx_to_geometry(gpx: gpxpy.gpx.GPX) -> FeatureCollection:
    """
    Convert a parsed GPX document to geometry.

    Each track becomes a Feature holding a LineString (one track segment) or
    a MultiLineString (several). Routes follow the tracks as LineString
    features. Waypoints are ignored.
    """
    features = []

    for track in gpx.tracks:
        lines = tuple(
            tuple(_coordinate(p) for p in segment.points)
            for segment in track.segments
        )
        geometry: GeometryNode
        if len(lines) == 1:
            geometry = LineString(coordinates=lines[0])
        else:
            geometry = MultiLineString(lines=lines)
        features.append(Feature(geometry=geometry, properties={'name': track.name}))

    for route in gpx.routes:
        features.append(Feature(
            geometry=LineString(coordinates=tuple(_coordinate(p) for p in route.points)),
            properties={'name': route.name},
        ))

    return FeatureCollection(features=tuple(features))


def load_gpx_file(gpx_file, filename: Optional[str] = None) -> Tuple[FeatureCollection, Dict[str, Any]]:
    """
    Load and parse a GPX file into geometry.

    Args:
        gpx_file: A file-like object or str/bytes containing GPX data
        filename: Original file name, used for validation and metadata

    Returns:
        tuple: (FeatureCollection with track geometry, dict with metadata)

    Raises:
        ValidationError: If file validation or parsing fails
    """
    try:
        if hasattr(gpx_file, 'read'):
            validate_file_upload(gpx_file, filename)

        gpx = gpxpy.parse(read_track_text(gpx_file))

        if not gpx.tracks and not gpx.routes:
            raise ValidationError("GPX file contains no tracks or routes")

    except gpxpy.gpx.GPXException as e:
        raise ValidationError(f"Invalid GPX file format: {str(e)}") from e
    except Exception as e:
        if isinstance(e, ValidationError):
            raise
        raise ValidationError(f"Failed to parse GPX file: {str(e)}") from e

    # Extract metadata
    metadata = {
        'name': None,
        'description': None,
        'time': None,
        'author': None
    }

    name = filename or getattr(gpx_file, 'name', None)
    if gpx.tracks and gpx.tracks[0].name:
        metadata['name'] = gpx.tracks[0].name
    elif gpx.name:
        metadata['name'] = gpx.name
    elif name:
        metadata['name'] = os.path.splitext(os.path.basename(name))[0]

    if gpx.description:
        metadata['description'] = gpx.description
    if gpx.time:
        metadata['time'] = gpx.time
    if gpx.author_name:
        metadata['author'] = gpx.author_name

    geometry = gpx_to_geometry(gpx)
    point_count = gpx.get_points_no() + sum(len(r.points) for r in gpx.routes)
    logger.info(f"Successfully loaded GPX file with {point_count} points " +
                f"in {len(geometry.features)} features")
    return geometry, metadata


def load_track_file(track_file, filename: Optional[str] = None) -> Tuple[GeometryNode, Dict[str, Any]]:
    """
    Load a GPX or KML track file, choosing the parser by extension.

    Files without a recognizable name are parsed as GPX.

    Args:
        track_file: A file-like object or str/bytes document
        filename: Original file name

    Returns:
        tuple: (geometry root, dict with metadata)

    Raises:
        ValidationError: If validation or parsing fails
    """
    name = filename or getattr(track_file, 'name', None)
    if track_file_extension(name) == '.kml':
        from core.kml import load_kml_file
        return load_kml_file(track_file, filename=name)
    return load_gpx_file(track_file, filename=name)


def load_track_from_path(file_path: str) -> Tuple[GeometryNode, Dict[str, Any]]:
    """
    Load a track file from disk path.

    Args:
        file_path: Path to the GPX or KML file

    Returns:
        tuple: (geometry root, dict with metadata)

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Track file not found: {file_path}")

    with open(file_path, 'rb') as f:
        geometry, metadata = load_track_file(f, filename=file_path)

        # Use filename if no name was extracted
        if not metadata['name']:
            metadata['name'] = os.path.splitext(os.path.basename(file_path))[0]

        return geometry, metadata
