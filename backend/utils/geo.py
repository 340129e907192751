"""
Geographic display utilities.

Re-exports the distance calculation from core.calculations and adds
coordinate text formatting for API responses.
"""

from core.calculations import haversine_distance
from core.constants import COORDINATE_DISPLAY_DECIMALS


def format_coordinate(longitude: float, latitude: float,
                      decimals: int = COORDINATE_DISPLAY_DECIMALS) -> str:
    """Plain decimal ``lon,lat`` text, e.g. ``116.397128,39.916527``."""
    return f"{longitude:.{decimals}f},{latitude:.{decimals}f}"


__all__ = [
    'haversine_distance',
    'format_coordinate',
]
