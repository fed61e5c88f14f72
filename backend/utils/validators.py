"""
Validation utilities for flood report submissions and query parameters.
"""
import math
from typing import Any, Dict, Optional, Tuple

from models import SEVERITY_LEVELS
from utils.geo import is_valid_coordinates


class CoordinateValidator:
    """Validator for geographic coordinates."""

    @staticmethod
    def validate_coordinates(lat: Any, lon: Any) -> bool:
        """
        Validate latitude and longitude ranges.

        Examples:
            >>> CoordinateValidator.validate_coordinates(29.4241, -98.4936)
            True
            >>> CoordinateValidator.validate_coordinates(91, 0)
            False
            >>> CoordinateValidator.validate_coordinates('abc', 0)
            False
        """
        return is_valid_coordinates(lat, lon)


class FloodReportValidator:
    """Validator for community flood report payloads."""

    MAX_DESCRIPTION_LENGTH = 2000

    @staticmethod
    def validate_severity(severity: Any) -> bool:
        """
        Examples:
            >>> FloodReportValidator.validate_severity('extreme')
            True
            >>> FloodReportValidator.validate_severity('critical')
            False
        """
        if not severity or not isinstance(severity, str):
            return False
        return severity.lower() in SEVERITY_LEVELS

    @staticmethod
    def validate_report_data(data: Dict) -> Tuple[bool, Optional[str]]:
        """
        Validate a flood report submission.

        Checks:
        - Required fields (latitude, longitude, description)
        - Coordinate ranges
        - Optional severity, water depth and photo URL list

        Returns:
            Tuple of (is_valid, error_message)
        """
        required_fields = ['latitude', 'longitude', 'description']
        missing_fields = [field for field in required_fields if field not in data]
        if missing_fields:
            return False, f'Missing required fields: {", ".join(missing_fields)}'

        try:
            lat = float(data['latitude'])
            lon = float(data['longitude'])
        except (ValueError, TypeError):
            return False, 'Latitude and longitude must be valid numbers'
        if not CoordinateValidator.validate_coordinates(lat, lon):
            return False, 'Latitude must be between -90 and 90 and longitude between -180 and 180'

        description = data['description']
        if not isinstance(description, str) or not description.strip():
            return False, 'Description must be a non-empty string'
        if len(description) > FloodReportValidator.MAX_DESCRIPTION_LENGTH:
            return False, f'Description cannot exceed {FloodReportValidator.MAX_DESCRIPTION_LENGTH} characters'

        if 'severity' in data and not FloodReportValidator.validate_severity(data['severity']):
            return False, f'Invalid severity. Must be one of: {", ".join(SEVERITY_LEVELS)}'

        if 'water_depth_inches' in data:
            try:
                depth = float(data['water_depth_inches'])
            except (ValueError, TypeError):
                return False, 'water_depth_inches must be a number'
            if not math.isfinite(depth) or depth < 0:
                return False, 'water_depth_inches must be non-negative'

        if 'photo_urls' in data:
            photo_urls = data['photo_urls']
            if not isinstance(photo_urls, list) or not all(isinstance(url, str) for url in photo_urls):
                return False, 'photo_urls must be a list of strings'

        return True, None

    @staticmethod
    def validate_radius(radius: Any, max_radius: float) -> Tuple[bool, Optional[str]]:
        """
        Examples:
            >>> FloodReportValidator.validate_radius(5, 100)
            (True, None)
            >>> FloodReportValidator.validate_radius(0, 100)
            (False, 'radius_mi must be greater than 0 and at most 100')
        """
        try:
            value = float(radius)
        except (TypeError, ValueError):
            return False, 'radius_mi must be a number'
        if not math.isfinite(value) or value <= 0 or value > max_radius:
            return False, f'radius_mi must be greater than 0 and at most {max_radius:g}'
        return True, None
