"""
Distance and time metrics with memoization.

The kilometre haversine is used by live fusion; the mile haversine is the
in-process twin of the proximity store's SQL predicate. Both share one
central-angle computation so converted radii give identical decisions.
"""
import math
from functools import lru_cache
from typing import Protocol

# Earth mean radii
EARTH_RADIUS_KM = 6371.0
EARTH_RADIUS_MI = 3959.0

MILES_PER_KM = EARTH_RADIUS_MI / EARTH_RADIUS_KM


class Geolocated(Protocol):
    latitude: float
    longitude: float
    timestamp: int


@lru_cache(maxsize=10000)
def _central_angle(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Central angle in radians between two points (haversine formula).

    The operation order mirrors the SQL expression in
    services.report_store.haversine_miles_expression.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (math.sin(dlat / 2) * math.sin(dlat / 2) +
         math.cos(lat1_rad) * math.cos(lat2_rad) *
         math.sin(dlon / 2) * math.sin(dlon / 2))
    return 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def haversine_distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance in kilometres.

    Examples:
        >>> haversine_distance_km(29.45, -98.50, 29.45, -98.50)
        0.0
        >>> round(haversine_distance_km(29.45, -98.50, 29.4505, -98.5005), 3)
        0.074

    Note:
        Does NOT validate coordinates - caller is responsible for validation.
        No antipodal handling; the service region is a single metro area.
    """
    return EARTH_RADIUS_KM * _central_angle(lat1, lon1, lat2, lon2)


def haversine_distance_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles (Earth radius 3959 mi)."""
    return EARTH_RADIUS_MI * _central_angle(lat1, lon1, lat2, lon2)


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM


def miles_to_km(miles: float) -> float:
    return miles / MILES_PER_KM


def distance_km(a: Geolocated, b: Geolocated) -> float:
    """Haversine distance in kilometres between two observations."""
    return haversine_distance_km(a.latitude, a.longitude, b.latitude, b.longitude)


def elapsed_ms(a: Geolocated, b: Geolocated) -> int:
    """Absolute time between two observations in milliseconds."""
    return abs(a.timestamp - b.timestamp)


def get_cache_info() -> dict:
    """Central-angle LRU cache statistics (reported by the health endpoint)."""
    info = _central_angle.cache_info()
    return {
        'hits': info.hits,
        'misses': info.misses,
        'maxsize': info.maxsize,
        'currsize': info.currsize
    }
