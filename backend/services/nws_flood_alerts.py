"""
NWS Flood Alerts Integration
Fetches active flood alerts for a point from the National Weather Service API
Documentation: https://www.weather.gov/documentation/services-web-api
"""
import requests
import logging
from typing import List, Optional, Tuple

from models import NWS_SOURCE, OfficialAlert, normalize_severity
from utils.timestamps import now_millis, to_epoch_millis

logger = logging.getLogger(__name__)


class NWSFloodAlertService:
    """Service to fetch flood alerts from the NWS active alerts endpoint"""

    BASE_URL = "https://api.weather.gov/alerts/active"

    def __init__(self, user_agent: str = 'SAFloodResponse/1.0 (contact@example.com)',
                 timeout: float = 30):
        self.headers = {
            'User-Agent': user_agent,
            'Accept': 'application/geo+json'
        }
        self.timeout = timeout

    def get_flood_alerts(self, latitude: float, longitude: float) -> List[OfficialAlert]:
        """
        Fetch active flood-related alerts covering a point.

        Args:
            latitude: Query point latitude
            longitude: Query point longitude

        Returns:
            list: OfficialAlert values, in feed order. Empty on any
            network or response error.
        """
        try:
            response = requests.get(
                self.BASE_URL,
                params={'point': f'{latitude:.4f},{longitude:.4f}'},
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()
            features = response.json().get('features', [])
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching NWS flood alerts: {e}")
            return []
        except ValueError as e:
            logger.error(f"Error decoding NWS response: {e}")
            return []

        alerts = []
        for index, feature in enumerate(features):
            try:
                alert = self._parse_feature(feature, latitude, longitude)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                # Skip the feature, keep the batch
                logger.warning(f"Error processing NWS feature {index}: {e}")
                continue
            if alert is not None:
                alerts.append(alert)

        logger.info(f"NWS returned {len(features)} alerts, {len(alerts)} flood-related")
        return alerts

    def _parse_feature(self, feature, fallback_lat: float, fallback_lon: float) -> Optional[OfficialAlert]:
        """
        Convert one GeoJSON feature to an OfficialAlert.

        Returns None for non-flood events. Alerts without geometry (zone or
        county based) are placed at the query point.
        """
        properties = feature.get('properties') or {}
        event = properties.get('event') or ''
        if 'flood' not in event.lower():
            return None

        coordinates = self._extract_coordinates(feature.get('geometry'))
        if coordinates:
            longitude, latitude = coordinates
        else:
            latitude, longitude = fallback_lat, fallback_lon

        timestamp = to_epoch_millis(properties.get('sent'))
        if timestamp is None:
            timestamp = now_millis()

        return OfficialAlert(
            id=properties.get('id') or feature.get('id') or f"nws_{timestamp}",
            title=properties.get('headline') or event,
            description=properties.get('description') or properties.get('headline') or event,
            severity=normalize_severity(properties.get('severity')),
            area_desc=properties.get('areaDesc') or '',
            latitude=float(latitude),
            longitude=float(longitude),
            timestamp=timestamp,
            source=NWS_SOURCE,
        )

    def _extract_coordinates(self, geometry) -> Optional[Tuple[float, float]]:
        """
        Extract representative coordinates from GeoJSON geometry

        Args:
            geometry (dict): GeoJSON geometry object

        Returns:
            tuple: (longitude, latitude) or None
        """
        if not geometry:
            return None

        geom_type = geometry.get('type')
        coordinates = geometry.get('coordinates')
        if not coordinates:
            return None

        if geom_type == 'Point':
            return (float(coordinates[0]), float(coordinates[1]))
        if geom_type == 'Polygon':
            return self._calculate_centroid(coordinates[0])
        if geom_type == 'MultiPolygon':
            return self._calculate_centroid(coordinates[0][0])
        return None

    def _calculate_centroid(self, ring) -> Optional[Tuple[float, float]]:
        """
        Mean of a ring's vertices (closing vertex excluded)

        Args:
            ring (list): List of [lon, lat] coordinate pairs

        Returns:
            tuple: (longitude, latitude)
        """
        if not ring or len(ring) < 3:
            return None

        points = ring[:-1] if ring[0] == ring[-1] else ring
        lon_sum = sum(float(coord[0]) for coord in points)
        lat_sum = sum(float(coord[1]) for coord in points)
        count = len(points)
        return (lon_sum / count, lat_sum / count)
