"""
Geometry data models.

Track files are converted into a small, closed set of nested geometry
variants before points are extracted. The shapes mirror GeoJSON:

    Feature            -> wraps one geometry
    FeatureCollection  -> ordered features
    LineString         -> ordered coordinates
    MultiLineString    -> ordered lines of coordinates
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Dict, Any, Union, Mapping

Coordinate = Tuple[float, ...]  # (lon, lat) or (lon, lat, ele)


@dataclass(frozen=True)
class LineString:
    coordinates: Tuple[Coordinate, ...] = ()


@dataclass(frozen=True)
class MultiLineString:
    lines: Tuple[Tuple[Coordinate, ...], ...] = ()


@dataclass(frozen=True)
class Feature:
    geometry: Optional['GeometryNode'] = None
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class FeatureCollection:
    features: Tuple['GeometryNode', ...] = ()  # Usually Features; bare geometries allowed


GeometryNode = Union[Feature, FeatureCollection, LineString, MultiLineString]


def _coordinate(values) -> Coordinate:
    return tuple(float(v) for v in values if v is not None)


def geometry_from_geojson(obj: Optional[Mapping[str, Any]]) -> Optional[GeometryNode]:
    """
    Convert a GeoJSON-style mapping into geometry variants.

    Unsupported types (Point, Polygon, GeometryCollection, ...) and
    malformed members return None, so they contribute no points.

    Args:
        obj: Parsed GeoJSON object

    Returns:
        The corresponding geometry node, or None
    """
    if not isinstance(obj, Mapping):
        return None

    kind = obj.get('type')
    if kind == 'Feature':
        return Feature(
            geometry=geometry_from_geojson(obj.get('geometry')),
            properties=dict(obj.get('properties') or {}),
        )
    if kind == 'FeatureCollection' and isinstance(obj.get('features'), list):
        features = []
        for member in obj['features']:
            node = geometry_from_geojson(member)
            if node is not None:
                features.append(node)
        return FeatureCollection(features=tuple(features))
    if kind == 'LineString' and isinstance(obj.get('coordinates'), list):
        return LineString(coordinates=tuple(_coordinate(c) for c in obj['coordinates']))
    if kind == 'MultiLineString' and isinstance(obj.get('coordinates'), list):
        return MultiLineString(lines=tuple(
            tuple(_coordinate(c) for c in line) for line in obj['coordinates']
        ))
    return None
