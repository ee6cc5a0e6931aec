"""
Distance helpers shared by the places cache and the presentation layer
"""
import math
from typing import Sequence

from citywalk.models.place import Coordinate

EARTH_RADIUS_M = 6371000  # mean Earth radius in meters


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two points in meters (Haversine formula)"""
    lat1_rad = math.radians(a.latitude)
    lat2_rad = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_M * c


def route_length(points: Sequence[Coordinate]) -> float:
    """Total length of a route in meters"""
    if len(points) < 2:
        return 0.0

    return sum(distance(prev, curr) for prev, curr in zip(points, points[1:]))


def format_distance(meters: float) -> str:
    if meters < 1000:
        return f"{math.floor(meters + 0.5)}m"
    return f"{meters / 1000:.1f}km"


def format_duration(milliseconds: int) -> str:
    """Format a duration, coarser unit first (e.g. "1h 1m", "1m 1s", "5s")"""
    seconds = int(milliseconds // 1000)
    minutes = seconds // 60
    hours = minutes // 60

    if hours > 0:
        return f"{hours}h {minutes % 60}m"
    elif minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
