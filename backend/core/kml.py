"""
KML file parsing.

Converts the line geometry of KML placemarks into the geometry variants
used by point extraction.
"""

import os
import logging
import xml.etree.ElementTree as ET
from typing import Tuple, Dict, Any, Optional, List

from core.models.geometry import (
    GeometryNode, Feature, FeatureCollection, LineString, MultiLineString, Coordinate
)
from core.validation import validate_file_upload, ValidationError

logger = logging.getLogger(__name__)


def _local(tag: str) -> str:
    """Tag name without namespace."""
    return tag.rsplit('}', 1)[-1]


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _iter_named(element: ET.Element, name: str):
    for child in element.iter():
        if _local(child.tag) == name:
            yield child


def parse_kml_coordinates(text: Optional[str]) -> Tuple[Coordinate, ...]:
    """
    Parse a KML <coordinates> body.

    Tuples are whitespace separated, values inside a tuple are comma
    separated: ``lon,lat[,alt] lon,lat[,alt] ...``.
    """
    if not text:
        return ()

    coordinates = []
    for chunk in text.split():
        values = [v for v in chunk.split(',') if v != '']
        if len(values) < 2:
            continue
        try:
            coordinates.append(tuple(float(v) for v in values[:3]))
        except ValueError:
            logger.warning(f"Skipping malformed KML coordinate: {chunk}")
    return tuple(coordinates)


def _gx_track_coordinates(track: ET.Element) -> Tuple[Coordinate, ...]:
    # gx:coord values are space separated: "lon lat alt"
    coordinates = []
    for coord in _children(track, 'coord'):
        values = (coord.text or '').split()
        if len(values) >= 2:
            coordinates.append(tuple(float(v) for v in values[:3]))
    return tuple(coordinates)


def _line_geometry(container: ET.Element) -> Optional[GeometryNode]:
    """Line geometry of a Placemark or MultiGeometry, if any."""
    lines = []
    for child in container:
        name = _local(child.tag)
        if name == 'LineString':
            coords = _children(child, 'coordinates')
            lines.append(parse_kml_coordinates(coords[0].text if coords else None))
        elif name == 'Track':
            lines.append(_gx_track_coordinates(child))
        elif name == 'MultiTrack':
            lines.extend(_gx_track_coordinates(t) for t in _children(child, 'Track'))
        elif name == 'MultiGeometry':
            nested = _line_geometry(child)
            if isinstance(nested, LineString):
                lines.append(nested.coordinates)
            elif isinstance(nested, MultiLineString):
                lines.extend(nested.lines)

    if not lines:
        return None
    if len(lines) == 1 and _local(container.tag) == 'Placemark':
        return LineString(coordinates=lines[0])
    return MultiLineString(lines=tuple(lines))


def kml_to_geometry(root: ET.Element) -> FeatureCollection:
    """
    Convert a parsed KML document to geometry.

    Every Placemark with line geometry becomes a Feature, in document
    order. Placemarks with only points or polygons are skipped.
    """
    features = []
    for placemark in _iter_named(root, 'Placemark'):
        geometry = _line_geometry(placemark)
        if geometry is None:
            continue
        names = _children(placemark, 'name')
        features.append(Feature(
            geometry=geometry,
            properties={'name': names[0].text if names else None},
        ))
    return FeatureCollection(features=tuple(features))


def load_kml_file(kml_file, filename: Optional[str] = None) -> Tuple[FeatureCollection, Dict[str, Any]]:
    """
    Load and parse a KML file into geometry.

    Args:
        kml_file: A file-like object or str/bytes containing KML data
        filename: Original file name, used for validation and metadata

    Returns:
        tuple: (FeatureCollection with track geometry, dict with metadata)

    Raises:
        ValidationError: If file validation or parsing fails
    """
    from core.gpx import read_track_text

    try:
        if hasattr(kml_file, 'read'):
            validate_file_upload(kml_file, filename)
        root = ET.fromstring(read_track_text(kml_file))
    except ET.ParseError as e:
        raise ValidationError(f"Invalid KML file format: {str(e)}") from e

    if _local(root.tag) != 'kml':
        raise ValidationError(f"Not a KML document: root element is <{_local(root.tag)}>")

    try:
        geometry = kml_to_geometry(root)
    except ValueError as e:
        raise ValidationError(f"Invalid KML coordinates: {str(e)}") from e
    if not geometry.features:
        raise ValidationError("KML file contains no line placemarks")

    metadata = {
        'name': None,
        'description': None,
        'time': None,
        'author': None
    }
    documents = list(_iter_named(root, 'Document'))
    if documents:
        names = _children(documents[0], 'name')
        descriptions = _children(documents[0], 'description')
        if names and names[0].text:
            metadata['name'] = names[0].text.strip()
        if descriptions and descriptions[0].text:
            metadata['description'] = descriptions[0].text.strip()
    name = filename or getattr(kml_file, 'name', None)
    if not metadata['name'] and name:
        metadata['name'] = os.path.splitext(os.path.basename(name))[0]

    logger.info(f"Successfully loaded KML file with {len(geometry.features)} line placemarks")
    return geometry, metadata
