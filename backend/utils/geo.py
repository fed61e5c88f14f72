"""
Geospatial predicates for the service region.
Includes coordinate validation, the bounding-box fast path and the
ray-casting point-in-polygon test.
"""
import math
from typing import Sequence, Tuple

# (lat, lon) vertex
Vertex = Tuple[float, float]
# (min_lat, max_lat, min_lon, max_lon)
BoundingBox = Tuple[float, float, float, float]


def is_valid_coordinates(latitude: float, longitude: float) -> bool:
    """
    Validate geographic coordinates.

    Examples:
        >>> is_valid_coordinates(29.4241, -98.4936)
        True
        >>> is_valid_coordinates(0, 0)  # Equator + prime meridian
        True
        >>> is_valid_coordinates(91, 0)
        False
        >>> is_valid_coordinates(float('nan'), 0)
        False
    """
    try:
        lat = float(latitude)
        lon = float(longitude)

        if math.isnan(lat) or math.isnan(lon) or math.isinf(lat) or math.isinf(lon):
            return False

        return -90 <= lat <= 90 and -180 <= lon <= 180
    except (TypeError, ValueError):
        return False


def bounding_box_of(polygon: Sequence[Vertex]) -> BoundingBox:
    """Smallest axis-aligned box covering every vertex."""
    lats = [vertex[0] for vertex in polygon]
    lons = [vertex[1] for vertex in polygon]
    return (min(lats), max(lats), min(lons), max(lons))


def in_bounding_box(lat: float, lon: float, bbox: BoundingBox) -> bool:
    """
    Cheap rejection test against an axis-aligned box (edges inclusive).

    NaN coordinates fail every comparison and are rejected.
    """
    min_lat, max_lat, min_lon, max_lon = bbox
    return min_lat <= lat <= max_lat and min_lon <= lon <= max_lon


def point_in_polygon(lat: float, lon: float, polygon: Sequence[Vertex]) -> bool:
    """
    Ray-casting point-in-polygon test.

    Casts a horizontal ray (constant latitude, increasing longitude) from the
    point and counts edge crossings; an odd count means inside. Points exactly
    on an edge or vertex may resolve either way, but the result is
    deterministic for a given input.

    Args:
        lat: Point latitude
        lon: Point longitude
        polygon: Ordered (lat, lon) vertices; the ring closes implicitly

    Returns:
        True if the point is inside the polygon
    """
    inside = False
    count = len(polygon)
    j = count - 1
    for i in range(count):
        lat_i, lon_i = polygon[i]
        lat_j, lon_j = polygon[j]
        if (lat_i > lat) != (lat_j > lat):
            crossing_lon = (lon_j - lon_i) * (lat - lat_i) / (lat_j - lat_i) + lon_i
            if lon < crossing_lon:
                inside = not inside
        j = i
    return inside
