"""
Service Region Filter
Decides whether an observation lies inside the configured service area
(bounding box fast path, then ray-casting against the boundary polygon).
"""
import logging
import math
from typing import List, Optional, Sequence, Tuple

from shapely.geometry import Polygon

from utils.geo import (
    BoundingBox,
    Vertex,
    bounding_box_of,
    in_bounding_box,
    point_in_polygon,
)

logger = logging.getLogger(__name__)

# Bexar County, TX (simplified rectangle)
BEXAR_COUNTY_POLYGON: List[Vertex] = [
    (29.7, -98.8),
    (29.7, -98.2),
    (29.1, -98.2),
    (29.1, -98.8),
]
BEXAR_COUNTY_BBOX: BoundingBox = (29.1, 29.7, -98.8, -98.2)


class ServiceRegion:
    """
    Bounded geographic area within which fusion considers observations.

    The polygon is fixed configuration, not user data. Call validate() once at
    startup; contains() itself never raises.
    """

    def __init__(self, polygon: Sequence[Vertex], bounding_box: Optional[BoundingBox] = None,
                 name: str = 'service_region'):
        self.name = name
        self.polygon: Tuple[Vertex, ...] = tuple((float(lat), float(lon)) for lat, lon in polygon)
        self.bounding_box: BoundingBox = (
            tuple(float(v) for v in bounding_box) if bounding_box is not None
            else bounding_box_of(self.polygon)
        )

    def contains(self, lat: float, lon: float) -> bool:
        """Two-stage containment test: bounding box, then polygon."""
        if not in_bounding_box(lat, lon, self.bounding_box):
            return False
        return point_in_polygon(lat, lon, self.polygon)

    def _as_shape(self) -> Polygon:
        # shapely works in (x, y) = (lon, lat)
        return Polygon([(lon, lat) for lat, lon in self.polygon])

    @property
    def centroid(self) -> Vertex:
        """Polygon centroid as (lat, lon)."""
        point = self._as_shape().centroid
        return (point.y, point.x)

    def validate(self) -> 'ServiceRegion':
        """
        Check the region configuration.

        Raises:
            ValueError: If the polygon has fewer than three vertices, contains
                non-finite values, self-intersects, or is not covered by the
                bounding box
        """
        if len(self.polygon) < 3:
            raise ValueError(f"Region '{self.name}' needs at least 3 vertices, got {len(self.polygon)}")

        for lat, lon in self.polygon:
            if not (math.isfinite(lat) and math.isfinite(lon)):
                raise ValueError(f"Region '{self.name}' has a non-finite vertex: ({lat}, {lon})")

        shape = self._as_shape()
        if not shape.is_valid:
            raise ValueError(f"Region '{self.name}' polygon is not simple (self-intersecting or degenerate)")

        min_lat, max_lat, min_lon, max_lon = self.bounding_box
        poly_min_lat, poly_max_lat, poly_min_lon, poly_max_lon = bounding_box_of(self.polygon)
        if (poly_min_lat < min_lat or poly_max_lat > max_lat or
                poly_min_lon < min_lon or poly_max_lon > max_lon):
            raise ValueError(f"Region '{self.name}' bounding box does not cover its polygon")

        logger.info(f"Service region '{self.name}' validated: {len(self.polygon)} vertices, bbox {self.bounding_box}")
        return self


def bexar_county_region() -> ServiceRegion:
    return ServiceRegion(BEXAR_COUNTY_POLYGON, BEXAR_COUNTY_BBOX, name='bexar_county')
