import math
from collections.abc import Sequence

from wellpath.schemas.geo import Coordinate

EARTH_RADIUS_KM = 6371.0


def haversine(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Distance in km between two points."""
    lat1, lng1, lat2, lng2 = map(math.radians, [lat1, lng1, lat2, lng2])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def distance_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in meters between two coordinates."""
    return haversine(a.latitude, a.longitude, b.latitude, b.longitude) * 1000


def path_length_m(path: Sequence[Coordinate]) -> float:
    """Total length in meters of a path; 0 for fewer than two points."""
    total = 0.0
    for i in range(1, len(path)):
        total += distance_m(path[i - 1], path[i])
    return total
