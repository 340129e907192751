"""
Shared fixtures for the test suite.
"""

import pytest

from tests.track_builders import north_track, to_gpx, SAMPLE_ELEVATIONS


@pytest.fixture
def sample_points():
    return north_track(SAMPLE_ELEVATIONS)


@pytest.fixture
def sample_gpx(sample_points):
    return to_gpx(sample_points)


@pytest.fixture
def meter_distances(monkeypatch):
    """
    Treat latitude as meters along the track.

    Lets tests place points at exact distances (10.0 m, 20.0 m, ...)
    without floating-point haversine error.
    """
    from core.segments import detector
    monkeypatch.setattr(detector, 'point_distance',
                        lambda a, b: abs(b.latitude - a.latitude))
