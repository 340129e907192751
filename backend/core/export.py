"""
Export of detected segments to track files.

Three formats are produced:

- GPX 1.1: one track, one track segment per climb, each tagged with its
  grade in <extensions><grade>.
- KML 2.2: one LineString placemark per climb.
- Merged KML: the original track, every climb styled by grade and a
  START/END marker pair per graded climb.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import List, Optional, Sequence, Dict

import gpxpy
import gpxpy.gpx

from core.constants import (
    EXPORT_CREATOR, EXPORT_TRACK_NAME, MERGED_DOCUMENT_NAME, ORIGINAL_TRACK_NAME,
    EXPORT_ENCODING, KML_TRACK_STYLE_ID, KML_TRACK_COLOR, KML_TRACK_WIDTH,
    KML_SEGMENT_WIDTH, KML_GRADE_COLORS
)
from core.grades import Grade, GRADE_ORDER
from core.models.segment import Segment
from core.models.track import Point
from core.validation import ValidationError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('gpx', 'kml', 'merged-kml')

MEDIA_TYPES = {
    'gpx': 'application/gpx+xml',
    'kml': 'application/vnd.google-earth.kml+xml',
}

KML_HEADER = ('<?xml version="1.0" encoding="UTF-8"?>\n'
              '<kml xmlns="http://www.opengis.net/kml/2.2">\n')
KML_FOOTER = '\n  </Document>\n</kml>'


def kml_coordinate(point: Point) -> str:
    """Format one point as ``lon,lat[,ele]`` with the shortest exact text of each value."""
    return ','.join(repr(float(value)) for value in point.to_coordinates())


def kml_coordinates(points: Sequence[Point]) -> str:
    return ' '.join(kml_coordinate(p) for p in points)


def _require_segments(segments: Sequence[Segment]) -> None:
    if not segments:
        raise ValidationError("No segments to export")


def segment_placemark_name(index: int, segment: Segment) -> str:
    """Name of the 1-based ``index``-th segment placemark."""
    return f"Segment {index} ({segment.grade.value})"


# =============================================================================
# GPX
# =============================================================================

def segments_to_gpx(segments: Sequence[Segment]) -> str:
    """
    Serialize segments as a GPX 1.1 document.

    Args:
        segments: Segments to export, in output order

    Returns:
        GPX document text

    Raises:
        ValidationError: If there are no segments
    """
    _require_segments(segments)

    gpx = gpxpy.gpx.GPX()
    gpx.creator = EXPORT_CREATOR

    track = gpxpy.gpx.GPXTrack(name=EXPORT_TRACK_NAME)
    gpx.tracks.append(track)

    for segment in segments:
        track_segment = gpxpy.gpx.GPXTrackSegment()
        for point in segment.points:
            track_segment.points.append(gpxpy.gpx.GPXTrackPoint(
                latitude=point.latitude,
                longitude=point.longitude,
                elevation=point.elevation,
            ))

        grade = ET.Element('grade')
        grade.text = segment.grade.value
        track_segment.extensions.append(grade)

        track.segments.append(track_segment)

    logger.info(f"Exported {len(segments)} segments to GPX")
    return gpx.to_xml(version='1.1')


# =============================================================================
# KML
# =============================================================================

def segments_to_kml(segments: Sequence[Segment]) -> str:
    """
    Serialize segments as a KML document with one LineString each.

    Raises:
        ValidationError: If there are no segments
    """
    _require_segments(segments)

    placemarks = '\n'.join(
        f"  <Placemark><name>{segment_placemark_name(i, s)}</name>"
        f"<LineString><coordinates>{kml_coordinates(s.points)}</coordinates></LineString>"
        f"</Placemark>"
        for i, s in enumerate(segments, start=1)
    )

    logger.info(f"Exported {len(segments)} segments to KML")
    return (KML_HEADER +
            f"  <Document><name>{EXPORT_TRACK_NAME}</name>\n" +
            placemarks +
            KML_FOOTER)


def number_segments_by_grade(segments: Sequence[Segment]) -> List[Optional[int]]:
    """
    Per-grade marker numbers for the merged export.

    Numbers count down within each grade: the first segment of a grade gets
    the number of segments of that grade, the next one that number minus
    one, and so on down to 1. Unclassified segments get None.

    Args:
        segments: Segments in output order

    Returns:
        One number (or None) per segment
    """
    grades = [s.grade for s in segments]
    remaining: Dict[Grade, int] = {
        grade: sum(1 for g in grades if g is grade) for grade in GRADE_ORDER
    }

    numbers: List[Optional[int]] = []
    for grade in grades:
        if not grade.is_classified:
            numbers.append(None)
            continue
        numbers.append(remaining[grade])
        remaining = {**remaining, grade: remaining[grade] - 1}
    return numbers


def _kml_styles() -> str:
    styles = [
        f'<Style id="{KML_TRACK_STYLE_ID}"><LineStyle><color>{KML_TRACK_COLOR}</color>'
        f'<width>{KML_TRACK_WIDTH}</width></LineStyle></Style>'
    ]
    # Least steep first
    for grade in reversed(GRADE_ORDER):
        styles.append(
            f'<Style id="style{grade.value}"><LineStyle><color>{KML_GRADE_COLORS[grade.value]}</color>'
            f'<width>{KML_SEGMENT_WIDTH}</width></LineStyle></Style>'
        )
    return '\n  '.join(styles)


def _point_placemark(name: str, point: Point) -> str:
    return (f"<Placemark><name>{name}</name><Point><coordinates>"
            f"{kml_coordinate(point)}</coordinates></Point></Placemark>")


def merged_kml(segments: Sequence[Segment], track_points: Sequence[Point]) -> str:
    """
    Serialize the full track together with its segments as one KML document.

    The document holds the line styles, the original track, one styled
    placemark per segment and, for every graded segment, START and END
    point placemarks labeled with the grade and its countdown number
    (see number_segments_by_grade).

    Args:
        segments: Segments in output order
        track_points: The complete analyzed track

    Returns:
        KML document text

    Raises:
        ValidationError: If there are no segments or no track points
    """
    _require_segments(segments)
    if not track_points:
        raise ValidationError("No track points to export")

    track_placemark = (
        f"<Placemark><name>{ORIGINAL_TRACK_NAME}</name><styleUrl>#{KML_TRACK_STYLE_ID}</styleUrl>"
        f"<LineString><coordinates>{kml_coordinates(track_points)}</coordinates></LineString>"
        f"</Placemark>"
    )

    segment_placemarks = []
    marker_placemarks = []
    for i, (segment, number) in enumerate(zip(segments, number_segments_by_grade(segments)), start=1):
        grade = segment.grade
        style_id = f"style{grade.value}" if grade.is_classified else KML_TRACK_STYLE_ID
        segment_placemarks.append(
            f"<Placemark><name>{segment_placemark_name(i, segment)}</name>"
            f"<styleUrl>#{style_id}</styleUrl>"
            f"<LineString><coordinates>{kml_coordinates(segment.points)}</coordinates></LineString>"
            f"</Placemark>"
        )
        if number is not None:
            label = f"{grade.value}{number}"
            marker_placemarks.append(_point_placemark(f"{label} START", segment.start))
            marker_placemarks.append(_point_placemark(f"{label} END", segment.end))

    body = (
        f"  <Document><name>{MERGED_DOCUMENT_NAME}</name>\n"
        f"  {_kml_styles()}\n"
        f"  {track_placemark}\n"
        f"  " + '\n'.join(segment_placemarks)
    )
    if marker_placemarks:
        body += '\n  ' + '\n  '.join(marker_placemarks)

    logger.info(f"Exported {len(segments)} segments and {len(track_points)} track points " +
                f"to merged KML with {len(marker_placemarks)} markers")
    return KML_HEADER + body + KML_FOOTER


# =============================================================================
# FILES
# =============================================================================

def default_export_filename(extension: str, now: Optional[datetime] = None) -> str:
    """Timestamped export file name, e.g. ``2024-05-01-14-03-09.gpx``."""
    now = now or datetime.now()
    return f"{now.strftime('%Y-%m-%d-%H-%M-%S')}.{extension}"


def export_segments(export_format: str, segments: Sequence[Segment],
                    track_points: Sequence[Point] = ()) -> str:
    """
    Export segments in one of EXPORT_FORMATS.

    Raises:
        ValidationError: If the format is unknown or there is nothing to export
    """
    if export_format == 'gpx':
        return segments_to_gpx(segments)
    if export_format == 'kml':
        return segments_to_kml(segments)
    if export_format == 'merged-kml':
        return merged_kml(segments, track_points)
    raise ValidationError(f"Unknown export format: {export_format} (expected one of {EXPORT_FORMATS})")


def export_file_extension(export_format: str) -> str:
    return 'gpx' if export_format == 'gpx' else 'kml'


def encode_export(document: str) -> bytes:
    """Encode an export document as UTF-8 with a byte-order mark."""
    return document.encode(EXPORT_ENCODING)


def write_export(path: str, document: str) -> None:
    with open(path, 'w', encoding=EXPORT_ENCODING) as f:
        f.write(document)
    logger.info(f"Wrote export to {path}")
